"""
Home Assistant 클라이언트 단위 테스트

이 모듈은 대화 API 호출과 실패 시 예외 변환을 테스트합니다.
"""

import asyncio
import aiohttp
import pytest
from unittest.mock import AsyncMock, MagicMock, Mock, patch

from slack_ha_relay.adapters.homeassistant.client import HAClient, CONVERSATION_PATH
from slack_ha_relay.errors import ConversationAgentError


def make_session(json_data=None, raise_exc=None, request_exc=None):
    """aiohttp 세션 목업"""
    session = MagicMock()
    session.close = AsyncMock()
    response = MagicMock()
    response.raise_for_status = Mock(side_effect=raise_exc)
    response.json = AsyncMock(return_value=json_data)
    if request_exc is not None:
        session.request.side_effect = request_exc
    else:
        session.request.return_value.__aenter__.return_value = response
    return session


class TestHAClient:
    """Home Assistant 대화 클라이언트 테스트"""

    @pytest.fixture
    def ha_client(self):
        return HAClient(base_url="http://ha.local:8123/", token="test_token", timeout=5)

    def test_initialization(self, ha_client):
        assert ha_client.base_url == "http://ha.local:8123"
        assert ha_client.token == "test_token"
        assert ha_client.timeout == 5
        assert ha_client.agent_id == "conversation.chatgpt"
        assert ha_client.language == "en"
        assert ha_client.session is None

    @pytest.mark.asyncio
    async def test_context_manager_opens_and_closes_session(self, ha_client):
        with patch("aiohttp.ClientSession") as mock_session_class:
            mock_session = MagicMock()
            mock_session.close = AsyncMock()
            mock_session_class.return_value = mock_session

            async with ha_client as client:
                assert client.session is mock_session

            mock_session.close.assert_awaited_once()
            assert ha_client.session is None
            headers = mock_session_class.call_args.kwargs["headers"]
            assert headers["Authorization"] == "Bearer test_token"

    @pytest.mark.asyncio
    async def test_request_without_session(self, ha_client):
        with pytest.raises(RuntimeError, match="세션이 초기화되지 않았습니다"):
            await ha_client.process_conversation("hello")

    @pytest.mark.asyncio
    async def test_new_conversation_payload(self, ha_client):
        ha_client.session = make_session({"speech": "hi"})

        data = await ha_client.process_conversation("turn on the light")

        assert data == {"speech": "hi"}
        method, url = ha_client.session.request.call_args.args
        assert method == "POST"
        assert url == f"http://ha.local:8123{CONVERSATION_PATH}"
        assert ha_client.session.request.call_args.kwargs["json"] == {
            "language": "en",
            "text": "turn on the light",
            "agent_id": "conversation.chatgpt",
        }

    @pytest.mark.asyncio
    async def test_conversation_id_included_when_present(self, ha_client):
        ha_client.session = make_session({"conversation_id": "conv-1"})

        await ha_client.process_conversation("and the fan", "conv-1")

        payload = ha_client.session.request.call_args.kwargs["json"]
        assert payload["conversation_id"] == "conv-1"

    @pytest.mark.asyncio
    async def test_http_error_status(self, ha_client):
        err = aiohttp.ClientResponseError(request_info=Mock(), history=(), status=401)
        ha_client.session = make_session(raise_exc=err)

        with pytest.raises(ConversationAgentError, match="status:401"):
            await ha_client.process_conversation("hello")

    @pytest.mark.asyncio
    async def test_timeout(self, ha_client):
        ha_client.session = make_session(request_exc=asyncio.TimeoutError())

        with pytest.raises(ConversationAgentError, match="시간 초과"):
            await ha_client.process_conversation("hello")

    @pytest.mark.asyncio
    async def test_connection_error(self, ha_client):
        ha_client.session = make_session(request_exc=aiohttp.ClientConnectionError("refused"))

        with pytest.raises(ConversationAgentError):
            await ha_client.process_conversation("hello")

    @pytest.mark.asyncio
    async def test_non_object_body(self, ha_client):
        ha_client.session = make_session(["not", "a", "dict"])

        with pytest.raises(ConversationAgentError):
            await ha_client.process_conversation("hello")
