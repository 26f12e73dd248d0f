# slack_ha_relay/main.py
import os
import uvicorn
from slack_ha_relay.settings import Settings
from slack_ha_relay.core.context import RelayContext
from slack_ha_relay.adapters.homeassistant.client import HAClient
from slack_ha_relay.adapters.slack.client import SlackClient
from slack_ha_relay.orchestrators.dispatcher import EventDispatcher
from slack_ha_relay.observability.health import create_app
from slack_ha_relay.observability.logging_setup import setup_logger, get_logger
from slack_ha_relay.utils.env_checker import check_required_settings

def _b(name, default=False): return os.getenv(name, str(default)).lower() in ("1","true","yes","on")

def build_settings() -> Settings:
    s = Settings()

    # Slack
    s.slack.bot_token = os.getenv("SLACK_BOT_TOKEN", s.slack.bot_token)
    s.slack.bot_user_id = os.getenv("SLACK_BOT_USER_ID", s.slack.bot_user_id)
    s.slack.signing_secret = os.getenv("SLACK_SIGNING_SECRET", s.slack.signing_secret)
    s.slack.api_base_url = os.getenv("SLACK_API_BASE_URL", s.slack.api_base_url)
    s.slack.events_path = os.getenv("SLACK_EVENTS_PATH", s.slack.events_path)
    s.slack.timeout_sec = float(os.getenv("SLACK_TIMEOUT_SEC", s.slack.timeout_sec))

    # HA
    s.ha.base_url = os.getenv("HA_URL", s.ha.base_url).rstrip("/")
    s.ha.token = os.getenv("HA_TOKEN", s.ha.token)
    s.ha.agent_id = os.getenv("HA_AGENT_ID", s.ha.agent_id)
    s.ha.language = os.getenv("HA_LANGUAGE", s.ha.language)
    s.ha.timeout_sec = float(os.getenv("HA_TIMEOUT_SEC", s.ha.timeout_sec))

    # 릴레이 상태
    s.relay.dedup_ttl_sec = float(os.getenv("DEDUP_TTL_SEC", s.relay.dedup_ttl_sec))
    s.relay.session_ttl_sec = float(os.getenv("SESSION_TTL_SEC", s.relay.session_ttl_sec))
    s.relay.shutdown_grace_sec = float(os.getenv("SHUTDOWN_GRACE_SEC", s.relay.shutdown_grace_sec))

    # 관측성
    s.observability.http_port = int(os.getenv("PORT", s.observability.http_port))
    s.observability.metrics_enabled = _b("METRICS_ENABLED", s.observability.metrics_enabled)
    s.observability.log_level = os.getenv("LOG_LEVEL", s.observability.log_level)
    s.observability.json_logs = _b("LOG_JSON", s.observability.json_logs)

    return s

def build_dispatcher(s: Settings) -> EventDispatcher:
    context = RelayContext(
        dedup_ttl_sec=s.relay.dedup_ttl_sec,
        session_ttl_sec=s.relay.session_ttl_sec,
    )
    ha = HAClient(
        base_url=s.ha.base_url,
        token=s.ha.token,
        timeout=s.ha.timeout_sec,
        agent_id=s.ha.agent_id,
        language=s.ha.language,
    )
    slack = SlackClient(
        bot_token=s.slack.bot_token,
        api_base_url=s.slack.api_base_url,
        timeout=s.slack.timeout_sec,
    )
    return EventDispatcher(
        context,
        ha,
        slack,
        bot_user_id=s.slack.bot_user_id,
        shutdown_grace_sec=s.relay.shutdown_grace_sec,
    )

def main():
    s = build_settings()
    setup_logger(s.observability.log_level, json_logs=s.observability.json_logs)
    log = get_logger("relay.main")
    log.info("설정 로드 완료")
    check_required_settings(s)

    app = create_app(s, build_dispatcher(s))
    log.info(f"서버 시작 port:{s.observability.http_port} path:{s.slack.events_path}")
    uvicorn.run(app, host="0.0.0.0", port=s.observability.http_port, log_config=None)

if __name__ == "__main__":
    main()
