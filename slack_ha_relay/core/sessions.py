"""
Per-channel conversation session store.

Maps a Slack channel to the ``conversation_id`` Home Assistant returned for it,
so follow-up messages continue the same multi-turn context. An entry is live
while ``now - last_used_at`` is below the window. Only ``put`` moves
``last_used_at``: reading a session does not extend it, and stale entries are
ignored rather than deleted.
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

DEFAULT_SESSION_TTL_SEC = 1800.0

@dataclass(frozen=True)
class ConversationSession:
    """채널별 대화 세션"""
    channel_key: str
    session_token: str
    last_used_at: float

class ConversationSessionStore:
    """채널 → Home Assistant conversation_id 저장소"""

    def __init__(self,
                 ttl_sec: float = DEFAULT_SESSION_TTL_SEC,
                 clock: Callable[[], float] = time.monotonic):
        """
        초기화합니다.

        Args:
            ttl_sec: 세션 유효 시간 (초), 마지막 put 시각 기준
            clock: 현재 시각을 반환하는 함수 (테스트에서 주입)
        """
        if ttl_sec <= 0:
            raise ValueError("ttl_sec must be positive")
        self.ttl = float(ttl_sec)
        self._clock = clock
        self._sessions: Dict[str, ConversationSession] = {}
        self._lock = threading.Lock()

    def get(self, channel_key: str) -> Optional[str]:
        """
        유효한 세션 토큰을 반환합니다.

        Args:
            channel_key: 채널 ID

        Returns:
            세션 토큰 또는 None (없거나 만료된 경우)
        """
        with self._lock:
            entry = self._sessions.get(channel_key)
            if entry is None:
                return None
            if self._clock() - entry.last_used_at >= self.ttl:
                return None
            return entry.session_token

    def put(self, channel_key: str, token: str) -> None:
        """채널의 세션을 무조건 덮어쓰고 last_used_at을 현재 시각으로 설정합니다."""
        with self._lock:
            self._sessions[channel_key] = ConversationSession(
                channel_key=channel_key,
                session_token=token,
                last_used_at=self._clock(),
            )

    def peek(self, channel_key: str) -> Optional[ConversationSession]:
        """만료 여부와 관계없이 저장된 항목을 반환합니다."""
        with self._lock:
            return self._sessions.get(channel_key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
