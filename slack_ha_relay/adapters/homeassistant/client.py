"""
Home Assistant conversation API client.

This module provides a client for forwarding chat text to the
Home Assistant conversation agent (``/api/conversation/process``).
"""

import asyncio
import aiohttp
from typing import Dict, Optional
from slack_ha_relay.errors import ConversationAgentError
from slack_ha_relay.observability.logging_setup import get_logger

log = get_logger("relay.ha")

CONVERSATION_PATH = "/api/conversation/process"

class HAClient:
    """Home Assistant 대화 API 클라이언트"""

    def __init__(self,
                 base_url: str,
                 token: str,
                 timeout: float = 10,
                 *,
                 agent_id: str = "conversation.chatgpt",
                 language: str = "en"):
        """
        초기화합니다.

        Args:
            base_url: Home Assistant 기본 URL
            token: Home Assistant 장기 토큰
            timeout: 요청 타임아웃 (초)
            agent_id: 대화 에이전트 ID
            language: 대화 언어 코드
        """
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.timeout = timeout
        self.agent_id = agent_id
        self.language = language
        self.session: Optional[aiohttp.ClientSession] = None

        log.info("Home Assistant 클라이언트 초기화됨")

    async def start(self) -> None:
        """HTTP 세션을 엽니다."""
        if self.session is not None:
            return
        self.session = aiohttp.ClientSession(
            headers={
                "Authorization": f"Bearer {self.token}",
                "Content-Type": "application/json"
            },
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        )

    async def close(self) -> None:
        """HTTP 세션을 닫습니다."""
        if self.session:
            await self.session.close()
            self.session = None

    async def __aenter__(self):
        """비동기 컨텍스트 매니저 진입"""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """비동기 컨텍스트 매니저 종료"""
        await self.close()

    async def _make_request(self, method: str, endpoint: str, **kwargs) -> Dict:
        """
        API 요청을 한 번 수행합니다.

        Args:
            method: HTTP 메서드
            endpoint: API 엔드포인트
            **kwargs: 추가 요청 매개변수

        Returns:
            응답 데이터

        Raises:
            ConversationAgentError: 네트워크 오류, 타임아웃, 2xx 외 상태
        """
        if not self.session:
            raise RuntimeError("세션이 초기화되지 않았습니다. start()를 먼저 호출하세요.")

        url = f"{self.base_url}{endpoint}"
        try:
            async with self.session.request(method, url, **kwargs) as response:
                response.raise_for_status()
                return await response.json()
        except aiohttp.ClientResponseError as e:
            raise ConversationAgentError(f"Home Assistant 응답 오류 status:{e.status}") from e
        except asyncio.TimeoutError as e:
            raise ConversationAgentError("Home Assistant 요청 시간 초과") from e
        except aiohttp.ClientError as e:
            raise ConversationAgentError(f"Home Assistant 연결 오류: {e}") from e
        except ValueError as e:
            raise ConversationAgentError("Home Assistant 응답 JSON 파싱 실패") from e

    async def process_conversation(self, text: str, conversation_id: Optional[str] = None) -> Dict:
        """
        사용자 메시지를 대화 에이전트에 전달합니다.

        Args:
            text: 사용자 메시지
            conversation_id: 이어갈 대화 ID (없으면 새 대화)

        Returns:
            에이전트 응답 JSON
        """
        payload = {
            "language": self.language,
            "text": text,
            "agent_id": self.agent_id,
        }
        if conversation_id:
            payload["conversation_id"] = conversation_id

        data = await self._make_request("POST", CONVERSATION_PATH, json=payload)
        if not isinstance(data, dict):
            raise ConversationAgentError("Home Assistant 응답이 JSON 객체가 아닙니다")

        log.debug(f"대화 응답 수신 conversation_id:{data.get('conversation_id')}")
        return data
