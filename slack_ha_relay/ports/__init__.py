"""
Port interfaces for the relay's hexagonal architecture.

This module defines the port interfaces (Protocols) between the
dispatcher and the outbound HTTP adapters.
"""

from .agent import ConversationAgentPort
from .reply import ReplySenderPort

__all__ = ["ConversationAgentPort", "ReplySenderPort"]
