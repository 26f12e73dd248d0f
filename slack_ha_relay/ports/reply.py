"""
Reply sender port interface.

This module defines the protocol for posting the agent's answer back
to the originating chat channel.
"""

from typing import Protocol

class ReplySenderPort(Protocol):
    """응답 발송 포트 인터페이스"""

    async def start(self) -> None:
        """HTTP 세션을 엽니다."""
        ...

    async def close(self) -> None:
        """HTTP 세션을 닫습니다."""
        ...

    async def post_message(self, channel: str, text: str) -> None:
        """
        채널에 메시지를 게시합니다.

        Args:
            channel: 채널 ID
            text: 메시지 텍스트

        Raises:
            ReplyDeliveryError: 전송 실패 시
        """
        ...
