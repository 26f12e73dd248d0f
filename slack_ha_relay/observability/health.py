"""
HTTP endpoints for the relay.

This module builds the FastAPI application: the Slack Events API route,
plus health, readiness, metrics, and info endpoints for operational
visibility.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import Response, JSONResponse, PlainTextResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
import json
import time
from slack_ha_relay.settings import Settings
from slack_ha_relay.orchestrators.dispatcher import EventDispatcher
from slack_ha_relay.adapters.slack.signature import verify_slack_signature
from slack_ha_relay.observability.logging_setup import get_logger

log = get_logger("relay.http")

def create_app(settings: Settings, dispatcher: EventDispatcher) -> FastAPI:
    """FastAPI 애플리케이션을 생성합니다."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await dispatcher.start()
        yield
        await dispatcher.stop()

    app = FastAPI(
        title=settings.observability.service_name,
        version=settings.observability.build_version,
        description="Slack to Home Assistant conversation relay",
        lifespan=lifespan,
    )

    start_time = time.time()
    signing_secret = settings.slack.signing_secret

    @app.post(settings.slack.events_path)
    async def slack_events(request: Request):
        """Slack Events API 엔드포인트"""
        body = await request.body()
        if signing_secret and not verify_slack_signature(
            signing_secret,
            body,
            request.headers.get("X-Slack-Request-Timestamp"),
            request.headers.get("X-Slack-Signature"),
        ):
            log.warning("Slack 서명 검증 실패")
            return JSONResponse({"ok": False, "error": "invalid signature"}, status_code=401)

        try:
            payload = json.loads(body.decode("utf-8")) if body else {}
        except (UnicodeDecodeError, ValueError):
            log.warning("JSON 파싱 실패, ACK만 반환")
            payload = None

        result = dispatcher.handle_event(payload)
        if isinstance(result, str):
            return PlainTextResponse(result)
        return JSONResponse(result)

    @app.get("/health")
    async def health():
        """헬스 체크 엔드포인트"""
        return JSONResponse({
            "status": "ok",
            "service": settings.observability.service_name,
            "timestamp": time.time()
        })

    @app.get("/ready")
    async def ready():
        """레디니스 체크 엔드포인트"""
        return JSONResponse({
            "status": "ready",
            "service": settings.observability.service_name,
            "pending_events": dispatcher.pending,
            "timestamp": time.time()
        })

    @app.get("/metrics")
    async def metrics():
        """Prometheus 메트릭 엔드포인트"""
        if not settings.observability.metrics_enabled:
            raise HTTPException(status_code=503, detail="Metrics disabled")

        return Response(
            generate_latest(),
            media_type=CONTENT_TYPE_LATEST
        )

    @app.get("/info")
    async def info():
        """서비스 정보 엔드포인트"""
        uptime = time.time() - start_time
        return JSONResponse({
            "service": settings.observability.service_name,
            "version": settings.observability.build_version,
            "uptime_seconds": int(uptime),
            "metrics_enabled": settings.observability.metrics_enabled,
            "log_level": settings.observability.log_level,
            "dedup_ttl_sec": settings.relay.dedup_ttl_sec,
            "session_ttl_sec": settings.relay.session_ttl_sec,
        })

    @app.get("/")
    async def root():
        """루트 엔드포인트"""
        return JSONResponse({
            "service": settings.observability.service_name,
            "version": settings.observability.build_version,
            "endpoints": {
                "slack_events": settings.slack.events_path,
                "health": "/health",
                "ready": "/ready",
                "metrics": "/metrics",
                "info": "/info"
            }
        })

    return app
