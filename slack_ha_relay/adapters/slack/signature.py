"""Slack request signature verification (v0 signing secret)."""

import hashlib
import hmac
import time
from typing import Optional

MAX_CLOCK_SKEW_SEC = 300

def verify_slack_signature(signing_secret: str,
                           body: bytes,
                           timestamp: Optional[str],
                           signature: Optional[str],
                           now: Optional[float] = None) -> bool:
    """
    Slack 요청 서명을 검증합니다.

    Args:
        signing_secret: Slack 앱 서명 시크릿
        body: 원본 요청 본문 바이트
        timestamp: X-Slack-Request-Timestamp 헤더 값
        signature: X-Slack-Signature 헤더 값 (v0=...)
        now: 현재 시각 (초), 없으면 time.time()

    Returns:
        서명이 일치하고 타임스탬프가 허용 범위 안이면 True
    """
    secret = (signing_secret or "").strip()
    received = (signature or "").strip()
    ts = (timestamp or "").strip()
    if not secret or not received or not ts:
        return False

    try:
        ts_value = int(ts)
    except ValueError:
        return False
    current = time.time() if now is None else now
    if abs(current - ts_value) > MAX_CLOCK_SKEW_SEC:
        return False

    base = b"v0:" + ts.encode("utf-8") + b":" + body
    digest = hmac.new(secret.encode("utf-8"), base, hashlib.sha256).hexdigest()
    return hmac.compare_digest(f"v0={digest}", received)
