"""
Process-wide relay state.

Holds the two pieces of shared mutable state (event dedup set and
conversation sessions). Built empty at startup and handed to the dispatcher.
"""

import time
from typing import Callable, Optional
from slack_ha_relay.core.dedup import ExpiringKeySet, DEFAULT_DEDUP_TTL_SEC
from slack_ha_relay.core.sessions import ConversationSessionStore, DEFAULT_SESSION_TTL_SEC

class RelayContext:
    """릴레이 공유 상태 컨테이너"""

    def __init__(self,
                 *,
                 dedup_ttl_sec: float = DEFAULT_DEDUP_TTL_SEC,
                 session_ttl_sec: float = DEFAULT_SESSION_TTL_SEC,
                 clock: Optional[Callable[[], float]] = None):
        clock = clock or time.monotonic
        self.seen_events = ExpiringKeySet(dedup_ttl_sec, clock=clock)
        self.sessions = ConversationSessionStore(session_ttl_sec, clock=clock)
