"""
Core domain models for the relay.

Inbound Slack payloads are validated with Pydantic v2; the Home Assistant
response is read defensively since its shape differs between agents.
"""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict

FALLBACK_REPLY = "No response"

class SlackMessageEvent(BaseModel):
    """Slack 이벤트 본문 (event 필드)"""
    model_config = ConfigDict(extra="ignore")

    user: Optional[str] = None
    text: str = ""
    channel: str = ""
    event_id: Optional[str] = None

class SlackEnvelope(BaseModel):
    """Slack Events API 요청 본문"""
    model_config = ConfigDict(extra="ignore")

    challenge: Optional[str] = None
    event_id: Optional[str] = None
    event: Optional[dict] = None

class EventOutcome(str, Enum):
    """이벤트 처리 결과"""
    DEDUPED = "deduped"
    FILTERED = "filtered"
    MALFORMED = "malformed"
    DISPATCHED = "dispatched"
    REPLIED = "replied"
    FAILED = "failed"

def extract_reply_text(data: Any) -> str:
    """
    Home Assistant 응답에서 답변 텍스트를 추출합니다.

    최상위 speech, response.speech.plain.speech 순으로 찾고
    둘 다 없으면 FALLBACK_REPLY를 반환합니다.
    """
    if not isinstance(data, dict):
        return FALLBACK_REPLY

    speech = data.get("speech")
    if isinstance(speech, str) and speech:
        return speech

    node: Any = data
    for key in ("response", "speech", "plain", "speech"):
        if not isinstance(node, dict):
            return FALLBACK_REPLY
        node = node.get(key)
    if isinstance(node, str) and node:
        return node
    return FALLBACK_REPLY

def extract_conversation_id(data: Any) -> Optional[str]:
    """응답에 conversation_id가 있으면 반환합니다."""
    if not isinstance(data, dict):
        return None
    value = data.get("conversation_id")
    if isinstance(value, str) and value:
        return value
    return None
