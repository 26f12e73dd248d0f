from typing import List
from slack_ha_relay.settings import Settings
from slack_ha_relay.observability.logging_setup import get_logger

log = get_logger("relay.env")

def check_required_settings(settings: Settings) -> List[str]:
    """필수 설정 중 비어 있는 환경 변수 이름 목록을 반환하고 경고를 남깁니다."""
    required = {
        "SLACK_BOT_TOKEN": settings.slack.bot_token,
        "SLACK_BOT_USER_ID": settings.slack.bot_user_id,
        "HA_TOKEN": settings.ha.token,
        "HA_URL": settings.ha.base_url,
    }
    missing = [name for name, value in required.items() if not value]
    for name in missing:
        log.warning(f"⚠️  {name} 환경 변수가 설정되지 않았습니다")
    if not settings.slack.signing_secret:
        log.info("ℹ️  SLACK_SIGNING_SECRET 미설정, 요청 서명 검증을 생략합니다")
    return missing
