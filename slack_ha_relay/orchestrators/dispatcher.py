"""
Slack event dispatcher for the relay.

This module implements the single entry point for inbound Slack requests:
challenge handshake, event_id deduplication, self-echo filtering, and the
fire-and-forget relay of message text to the conversation agent and of the
agent's answer back to the channel.
"""

import asyncio
import time
from typing import Any, Dict, Optional, Set, Tuple, Union
from pydantic import ValidationError
from slack_ha_relay.core.context import RelayContext
from slack_ha_relay.core.models import (
    EventOutcome,
    SlackEnvelope,
    SlackMessageEvent,
    extract_conversation_id,
    extract_reply_text,
)
from slack_ha_relay.errors import ConversationAgentError, ReplyDeliveryError
from slack_ha_relay.ports.agent import ConversationAgentPort
from slack_ha_relay.ports.reply import ReplySenderPort
from slack_ha_relay.observability import metrics
from slack_ha_relay.observability.logging_setup import get_logger, with_context

log = get_logger("relay.dispatcher")

class EventDispatcher:
    """Slack 이벤트 디스패처"""

    def __init__(self,
                 context: RelayContext,
                 agent: ConversationAgentPort,
                 replier: ReplySenderPort,
                 *,
                 bot_user_id: str = "",
                 shutdown_grace_sec: float = 5.0):
        """
        초기화합니다.

        Args:
            context: 중복 제거 집합과 세션 저장소를 가진 공유 상태
            agent: 대화 에이전트 포트
            replier: 응답 발송 포트
            bot_user_id: 자기 자신(봇)의 Slack 사용자 ID, 피드백 루프 방지용
            shutdown_grace_sec: 종료 시 처리 중 이벤트를 기다리는 시간 (초)
        """
        self.context = context
        self.agent = agent
        self.replier = replier
        self.bot_user_id = (bot_user_id or "").strip()
        self.shutdown_grace_sec = shutdown_grace_sec
        self._tasks: Set[asyncio.Task] = set()

    async def start(self) -> None:
        """아웃바운드 클라이언트 세션을 엽니다."""
        await self.agent.start()
        await self.replier.start()
        log.info("디스패처 시작됨")

    async def stop(self) -> None:
        """처리 중 이벤트를 잠시 기다린 뒤 클라이언트 세션을 닫습니다."""
        if self._tasks:
            log.info(f"처리 중 이벤트 대기 pending:{len(self._tasks)}")
            await self.drain(timeout=self.shutdown_grace_sec)
        leftover = set(self._tasks)
        if leftover:
            log.warning(f"유예 시간 초과, 처리 중 이벤트 포기 abandoned:{len(leftover)}")
            for task in leftover:
                task.cancel()
            await asyncio.gather(*leftover, return_exceptions=True)
        await self.agent.close()
        await self.replier.close()
        log.info("디스패처 종료됨")

    @property
    def pending(self) -> int:
        """처리 중인 이벤트 수"""
        return len(self._tasks)

    def handle_event(self, payload: Any) -> Union[str, Dict[str, bool]]:
        """
        인바운드 요청 본문을 처리합니다.

        challenge가 있으면 그 값을 그대로 반환하고, 그 외에는 즉시 ACK를
        반환합니다. 에이전트 호출과 응답 발송은 별도 태스크에서 진행됩니다.

        Args:
            payload: JSON 디코딩된 요청 본문

        Returns:
            challenge 문자열 또는 {"ok": True}
        """
        if isinstance(payload, dict):
            challenge = payload.get("challenge")
            if isinstance(challenge, str) and challenge:
                metrics.events_received.labels(kind="challenge").inc()
                log.info("URL 검증 challenge 응답")
                return challenge

        metrics.events_received.labels(kind="event").inc()
        outcome, event = self.admit(payload)
        if outcome is EventOutcome.DISPATCHED and event is not None:
            self._spawn(event)
        return {"ok": True}

    def admit(self, payload: Any) -> Tuple[EventOutcome, Optional[SlackMessageEvent]]:
        """
        중복 제거와 필터링을 수행하고 처리 대상 이벤트를 반환합니다.

        모든 단계가 메모리 내 연산이라 호출자를 막지 않습니다.

        Returns:
            (결과, 처리할 이벤트 또는 None)
        """
        try:
            envelope = SlackEnvelope.model_validate(payload)
        except ValidationError:
            log.warning("잘못된 요청 본문, 무시")
            metrics.events_filtered.labels(reason="malformed").inc()
            return EventOutcome.MALFORMED, None

        event_id = envelope.event_id
        if event_id:
            admitted = self.context.seen_events.add_if_absent(event_id)
            metrics.dedup_set_size.set(len(self.context.seen_events))
            if not admitted:
                metrics.events_duplicate.inc()
                log.info(f"중복 이벤트 무시 event_id:{event_id}")
                return EventOutcome.DEDUPED, None

        if envelope.event is None:
            metrics.events_filtered.labels(reason="malformed").inc()
            return EventOutcome.MALFORMED, None

        try:
            event = SlackMessageEvent.model_validate({**envelope.event, "event_id": event_id})
        except ValidationError:
            log.warning(f"잘못된 event 필드, 무시 event_id:{event_id}")
            metrics.events_filtered.labels(reason="malformed").inc()
            return EventOutcome.MALFORMED, None

        if self.bot_user_id and event.user == self.bot_user_id:
            log.debug(f"봇 자신의 메시지 무시 event_id:{event_id}")
            metrics.events_filtered.labels(reason="self_echo").inc()
            return EventOutcome.FILTERED, None

        if not event.text:
            metrics.events_filtered.labels(reason="empty_text").inc()
            return EventOutcome.FILTERED, None

        if not event.channel:
            log.warning(f"channel 없는 이벤트 무시 event_id:{event_id}")
            metrics.events_filtered.labels(reason="malformed").inc()
            return EventOutcome.MALFORMED, None

        return EventOutcome.DISPATCHED, event

    async def process(self, event: SlackMessageEvent) -> EventOutcome:
        """
        이벤트 하나를 에이전트에 전달하고 응답을 채널에 게시합니다.

        Returns:
            REPLIED 또는 FAILED
        """
        channel = event.channel
        token = self.context.sessions.get(channel)
        log.info(f"Home Assistant로 메시지 전달 event_id:{event.event_id} resumed:{token is not None}")

        t0 = time.perf_counter()
        try:
            response = await self.agent.process_conversation(event.text, token)
        except ConversationAgentError as e:
            metrics.agent_calls.labels(outcome="failure").inc()
            log.error(f"Home Assistant 호출 실패 event_id:{event.event_id} error:{str(e)}")
            return EventOutcome.FAILED
        finally:
            metrics.agent_call_seconds.observe(time.perf_counter() - t0)
        metrics.agent_calls.labels(outcome="success").inc()

        new_token = extract_conversation_id(response)
        if new_token:
            self.context.sessions.put(channel, new_token)
            metrics.conversation_sessions.set(len(self.context.sessions))

        reply = extract_reply_text(response)
        try:
            await self.replier.post_message(channel, reply)
        except ReplyDeliveryError as e:
            metrics.replies_sent.labels(outcome="failure").inc()
            log.error(f"Slack 응답 발송 실패 event_id:{event.event_id} channel:{channel} error:{str(e)}")
            return EventOutcome.FAILED

        metrics.replies_sent.labels(outcome="success").inc()
        log.info("Slack 응답 발송됨")
        return EventOutcome.REPLIED

    async def drain(self, timeout: Optional[float] = None) -> None:
        """처리 중인 이벤트 태스크가 끝날 때까지 기다립니다."""
        if not self._tasks:
            return
        await asyncio.wait(set(self._tasks), timeout=timeout)

    def _spawn(self, event: SlackMessageEvent) -> None:
        task = asyncio.create_task(self._run(event))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, event: SlackMessageEvent) -> EventOutcome:
        metrics.inflight_events.inc()
        try:
            with with_context(event_id=event.event_id, channel=event.channel):
                return await self.process(event)
        except Exception:
            log.exception(f"이벤트 처리 중 예기치 않은 오류 event_id:{event.event_id}")
            return EventOutcome.FAILED
        finally:
            metrics.inflight_events.dec()
