"""
ExpiringKeySet 단위 테스트

이 모듈은 event_id 중복 제거 집합의 TTL과 동시성 동작을 테스트합니다.
"""

import pytest
from concurrent.futures import ThreadPoolExecutor
from hypothesis import given, settings, strategies as st

from conftest import FakeClock
from slack_ha_relay.core.dedup import ExpiringKeySet


class TestExpiringKeySet:
    """중복 제거 집합 테스트"""

    @pytest.fixture
    def keys(self, clock):
        return ExpiringKeySet(ttl_sec=300, clock=clock)

    def test_mark_then_has_seen_within_ttl(self, keys, clock):
        keys.mark_seen("Ev1")
        clock.advance(299)
        assert keys.has_seen("Ev1") is True

    def test_unknown_key_not_seen(self, keys):
        assert keys.has_seen("Ev-unknown") is False

    def test_expires_after_ttl(self, keys, clock):
        keys.mark_seen("Ev1")
        clock.advance(300.001)
        assert keys.has_seen("Ev1") is False

    def test_expires_exactly_at_ttl(self, keys, clock):
        keys.mark_seen("Ev1")
        clock.advance(300)
        assert keys.has_seen("Ev1") is False

    def test_first_seen_wins(self, keys, clock):
        """다시 기록해도 만료 시각은 최초 기록 기준"""
        keys.mark_seen("Ev1")
        clock.advance(4 * 60)
        keys.mark_seen("Ev1")
        clock.advance(60 + 0.001)
        assert keys.has_seen("Ev1") is False

    def test_readd_after_expiry_starts_fresh_ttl(self, keys, clock):
        keys.mark_seen("Ev1")
        clock.advance(301)
        assert keys.add_if_absent("Ev1") is True
        clock.advance(200)
        assert keys.has_seen("Ev1") is True

    def test_add_if_absent(self, keys):
        assert keys.add_if_absent("Ev1") is True
        assert keys.add_if_absent("Ev1") is False
        assert keys.add_if_absent("Ev2") is True
        assert len(keys) == 2

    def test_has_seen_has_no_side_effect(self, keys):
        assert keys.has_seen("Ev1") is False
        assert keys.add_if_absent("Ev1") is True

    def test_sweep_removes_only_expired(self, keys, clock):
        keys.mark_seen("old")
        clock.advance(200)
        keys.mark_seen("new")
        clock.advance(150)
        assert keys.sweep() == 1
        assert "new" in keys
        assert "old" not in keys

    def test_invalid_ttl(self):
        with pytest.raises(ValueError):
            ExpiringKeySet(ttl_sec=0)


@given(st.lists(st.sampled_from([f"Ev{i}" for i in range(20)]), min_size=1, max_size=200))
@settings(max_examples=50, deadline=None)
def test_concurrent_add_if_absent_admits_each_id_once(ids):
    """겹치는 ID를 여러 스레드에서 동시에 추가해도 ID마다 한 번만 통과"""
    keys = ExpiringKeySet(ttl_sec=300, clock=FakeClock())
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda k: (k, keys.add_if_absent(k)), ids))

    admitted = [k for k, ok in results if ok]
    assert sorted(admitted) == sorted(set(ids))
    assert len(keys) == len(set(ids))
    assert all(keys.has_seen(k) for k in set(ids))


@given(st.lists(st.text(min_size=1, max_size=8), min_size=1, max_size=50))
@settings(max_examples=30, deadline=None)
def test_concurrent_mark_and_query_lose_nothing(ids):
    """mark_seen/has_seen 혼합 호출 후 모든 ID가 남아 있음"""
    keys = ExpiringKeySet(ttl_sec=300, clock=FakeClock())
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(keys.mark_seen, ids))
        list(pool.map(keys.has_seen, ids))
    assert all(keys.has_seen(k) for k in ids)
    assert len(keys) == len(set(ids))
