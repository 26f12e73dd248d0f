"""
테스트 설정 및 픽스처

이 모듈은 pytest 설정과 공통 픽스처를 제공합니다.
"""

import pytest
from unittest.mock import AsyncMock
from slack_ha_relay.settings import Settings
from slack_ha_relay.core.context import RelayContext
from slack_ha_relay.orchestrators.dispatcher import EventDispatcher


class FakeClock:
    """수동으로 진행시키는 테스트용 시계"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


BOT_USER_ID = "U088Z942Z4H"


@pytest.fixture
def clock():
    """테스트용 시계"""
    return FakeClock()


@pytest.fixture
def relay_context(clock):
    """가짜 시계를 쓰는 릴레이 상태"""
    return RelayContext(dedup_ttl_sec=300, session_ttl_sec=1800, clock=clock)


@pytest.fixture
def mock_agent():
    """테스트용 대화 에이전트 (Home Assistant)"""
    agent = AsyncMock()
    agent.process_conversation.return_value = {
        "response": {"speech": {"plain": {"speech": "The light is on."}}},
        "conversation_id": "conv-1",
    }
    return agent


@pytest.fixture
def mock_replier():
    """테스트용 응답 발송기 (Slack)"""
    return AsyncMock()


@pytest.fixture
def dispatcher(relay_context, mock_agent, mock_replier):
    """테스트용 디스패처"""
    return EventDispatcher(
        relay_context,
        mock_agent,
        mock_replier,
        bot_user_id=BOT_USER_ID,
        shutdown_grace_sec=1.0,
    )


@pytest.fixture
def sample_settings():
    """테스트용 설정"""
    settings = Settings()
    settings.observability.service_name = "test-service"
    settings.observability.build_version = "1.0.0"
    settings.observability.log_level = "INFO"
    settings.slack.bot_user_id = BOT_USER_ID
    return settings


def make_event(event_id="Ev001", text="turn on the kitchen light", channel="C123", user="U999"):
    """Slack event_callback 본문을 만듭니다."""
    payload = {
        "type": "event_callback",
        "event": {"type": "message", "user": user, "text": text, "channel": channel},
    }
    if event_id is not None:
        payload["event_id"] = event_id
    return payload
