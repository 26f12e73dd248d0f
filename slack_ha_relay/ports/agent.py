"""
Conversation agent port interface.

This module defines the protocol for the conversational agent the relay
forwards Slack messages to.
"""

from typing import Optional, Protocol

class ConversationAgentPort(Protocol):
    """대화 에이전트 포트 인터페이스"""

    async def start(self) -> None:
        """HTTP 세션을 엽니다."""
        ...

    async def close(self) -> None:
        """HTTP 세션을 닫습니다."""
        ...

    async def process_conversation(self, text: str, conversation_id: Optional[str] = None) -> dict:
        """
        사용자 메시지를 에이전트에 전달합니다.

        Args:
            text: 사용자 메시지
            conversation_id: 이전 대화를 이어갈 세션 토큰

        Returns:
            에이전트 응답 JSON

        Raises:
            ConversationAgentError: 호출 실패 시
        """
        ...
