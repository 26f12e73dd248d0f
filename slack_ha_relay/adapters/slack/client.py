"""
Slack Web API client.

Posts the agent's reply to the originating channel with ``chat.postMessage``.
"""

import asyncio
import aiohttp
from typing import Dict, Optional
from slack_ha_relay.errors import ReplyDeliveryError
from slack_ha_relay.observability.logging_setup import get_logger

log = get_logger("relay.slack")

DEFAULT_API_BASE_URL = "https://slack.com/api"

class SlackClient:
    """Slack 메시지 발송 클라이언트"""

    def __init__(self,
                 bot_token: str,
                 api_base_url: str = DEFAULT_API_BASE_URL,
                 timeout: float = 10):
        """
        초기화합니다.

        Args:
            bot_token: Slack 봇 토큰 (xoxb-...)
            api_base_url: Slack Web API 기본 URL
            timeout: 요청 타임아웃 (초)
        """
        self.bot_token = (bot_token or "").strip()
        self.api_base_url = (api_base_url or DEFAULT_API_BASE_URL).rstrip('/')
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None

    async def start(self) -> None:
        """HTTP 세션을 엽니다."""
        if self.session is not None:
            return
        self.session = aiohttp.ClientSession(
            headers={
                "Authorization": f"Bearer {self.bot_token}",
                "Content-Type": "application/json; charset=utf-8"
            },
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        )

    async def close(self) -> None:
        """HTTP 세션을 닫습니다."""
        if self.session:
            await self.session.close()
            self.session = None

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def post_message(self, channel: str, text: str) -> None:
        """
        채널에 메시지를 게시합니다.

        Args:
            channel: 채널 ID
            text: 메시지 텍스트

        Raises:
            ReplyDeliveryError: HTTP 오류 또는 Slack 응답의 ok가 false인 경우
        """
        if not self.session:
            raise RuntimeError("세션이 초기화되지 않았습니다. start()를 먼저 호출하세요.")

        url = f"{self.api_base_url}/chat.postMessage"
        try:
            async with self.session.post(url, json={"channel": channel, "text": text}) as response:
                response.raise_for_status()
                body: Dict = await response.json()
        except aiohttp.ClientResponseError as e:
            raise ReplyDeliveryError(f"Slack 응답 오류 status:{e.status}") from e
        except asyncio.TimeoutError as e:
            raise ReplyDeliveryError("Slack 요청 시간 초과") from e
        except aiohttp.ClientError as e:
            raise ReplyDeliveryError(f"Slack 연결 오류: {e}") from e
        except ValueError as e:
            raise ReplyDeliveryError("Slack 응답 JSON 파싱 실패") from e

        if not isinstance(body, dict) or not body.get("ok", False):
            error = body.get("error", "unknown") if isinstance(body, dict) else "unknown"
            raise ReplyDeliveryError(f"Slack API 오류: {error}")

        log.debug(f"Slack 메시지 게시됨 channel:{channel}")
