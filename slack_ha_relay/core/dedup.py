"""
In-memory expiring key set for Slack event deduplication.

Slack redelivers an event when it does not see an acknowledgement in time.
Each ``event_id`` is remembered for a fixed TTL counted from its first
sighting; expired entries are swept on access rather than by per-key timers.
"""

import threading
import time
from typing import Callable, Dict

DEFAULT_DEDUP_TTL_SEC = 300.0

class ExpiringKeySet:
    """TTL 기반 중복 이벤트 ID 집합 (최초 수신 시각 기준 만료)"""

    def __init__(self,
                 ttl_sec: float = DEFAULT_DEDUP_TTL_SEC,
                 clock: Callable[[], float] = time.monotonic):
        """
        초기화합니다.

        Args:
            ttl_sec: 항목 유지 시간 (초)
            clock: 현재 시각을 반환하는 함수 (테스트에서 주입)
        """
        if ttl_sec <= 0:
            raise ValueError("ttl_sec must be positive")
        self.ttl = float(ttl_sec)
        self._clock = clock
        self._seen_at: Dict[str, float] = {}
        self._lock = threading.Lock()

    def mark_seen(self, key: str) -> None:
        """
        키를 현재 시각으로 기록합니다.

        이미 기록된 키는 갱신하지 않습니다. 만료 시각은 최초 기록 시각을 따릅니다.
        """
        self.add_if_absent(key)

    def has_seen(self, key: str) -> bool:
        """키가 현재 기록되어 있는지 반환합니다."""
        with self._lock:
            self._purge(self._clock())
            return key in self._seen_at

    def add_if_absent(self, key: str) -> bool:
        """
        키가 없으면 기록하고 True, 이미 있으면 False를 반환합니다.

        조회와 기록이 하나의 잠금 구간에서 수행되므로 동시 호출 중
        같은 키가 두 번 True를 받는 일은 없습니다.
        """
        with self._lock:
            now = self._clock()
            self._purge(now)
            if key in self._seen_at:
                return False
            self._seen_at[key] = now
            return True

    def sweep(self) -> int:
        """만료된 항목을 정리하고 삭제된 개수를 반환합니다."""
        with self._lock:
            return self._purge(self._clock())

    def __len__(self) -> int:
        with self._lock:
            self._purge(self._clock())
            return len(self._seen_at)

    def __contains__(self, key: str) -> bool:
        return self.has_seen(key)

    def _purge(self, now: float) -> int:
        # caller holds the lock
        expired = [k for k, seen_at in self._seen_at.items() if now - seen_at >= self.ttl]
        for k in expired:
            del self._seen_at[k]
        return len(expired)
