"""
Exception types for the Slack ↔ Home Assistant relay.

Only outbound failures are exceptions. Duplicate, filtered and malformed
events are ordinary outcomes of the dispatcher and never raise.
"""


class RelayError(RuntimeError):
    """릴레이 공통 예외"""


class ConversationAgentError(RelayError):
    """Home Assistant 대화 API 호출 실패 (네트워크, 타임아웃, 비정상 응답)"""


class ReplyDeliveryError(RelayError):
    """Slack 응답 메시지 전송 실패"""
