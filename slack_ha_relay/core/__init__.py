"""
Core state and models for the relay.

This module contains the in-memory dedup set, the conversation session
store and the payload models, independent of HTTP and other I/O.
"""

from .context import RelayContext
from .dedup import ExpiringKeySet
from .sessions import ConversationSession, ConversationSessionStore
from .models import (
    EventOutcome,
    FALLBACK_REPLY,
    SlackEnvelope,
    SlackMessageEvent,
    extract_conversation_id,
    extract_reply_text,
)

__all__ = [
    "RelayContext",
    "ExpiringKeySet",
    "ConversationSession",
    "ConversationSessionStore",
    "EventOutcome",
    "FALLBACK_REPLY",
    "SlackEnvelope",
    "SlackMessageEvent",
    "extract_conversation_id",
    "extract_reply_text",
]
