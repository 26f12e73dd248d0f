# slack_ha_relay/settings.py
from __future__ import annotations
from pydantic import BaseModel, Field

class SlackConfig(BaseModel):
    bot_token: str = ""
    bot_user_id: str = ""                     # 자기 메시지 무시용 (U...)
    signing_secret: str = ""                  # 비어 있으면 서명 검증 생략
    api_base_url: str = "https://slack.com/api"
    events_path: str = "/slack/events"
    timeout_sec: float = 10.0

class HAConfig(BaseModel):
    base_url: str = "http://homeassistant.local:8123"
    token: str = ""
    agent_id: str = "conversation.chatgpt"
    language: str = "en"
    timeout_sec: float = 10.0

class Relay(BaseModel):
    dedup_ttl_sec: float = 300.0              # event_id 중복 제거 창
    session_ttl_sec: float = 1800.0           # 채널별 대화 유지 시간
    shutdown_grace_sec: float = 5.0

class Observability(BaseModel):
    http_port: int = 3000
    metrics_enabled: bool = True
    service_name: str = "slack-ha-relay"
    build_version: str = "0.1.0"
    log_level: str = "INFO"
    json_logs: bool = False

class Settings(BaseModel):
    slack: SlackConfig = Field(default_factory=SlackConfig)
    ha: HAConfig = Field(default_factory=HAConfig)
    relay: Relay = Field(default_factory=Relay)
    observability: Observability = Field(default_factory=Observability)
