from __future__ import annotations
import logging
import sys
from loguru import logger

# ---- stdlib logging → loguru 인터셉트 ----
class InterceptHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=6, exception=record.exc_info).log(level, record.getMessage())

def _hook_stdlib_logging() -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    # uvicorn/aiohttp 로그도 같은 sink로 모은다
    for noisy in ("uvicorn", "uvicorn.access", "uvicorn.error", "aiohttp", "asyncio"):
        l = logging.getLogger(noisy)
        l.handlers = [InterceptHandler()]
        l.propagate = False

# ---- 개발 콘솔 포맷(사람 친화, extra 미노출) ----
DEV_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level:<7}</level> | "
    "<cyan>{extra[name]}</cyan> | "
    "<cyan>{file}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

def setup_logging_dev(log_level: str = "INFO", json_logs: bool = False) -> None:
    """
    loguru 초기화.
    - 콘솔 컬러 출력 (json_logs=True면 한 줄 JSON)
    - stdlib logging 흡수
    """
    logger.remove()  # 기본 sink 제거
    logger.configure(extra={"name": "relay"})
    if json_logs:
        logger.add(sys.stdout, serialize=True, level=log_level.upper(), enqueue=False)
    else:
        logger.add(
            sink=sys.stdout,
            format=DEV_FORMAT,
            colorize=True,
            backtrace=True,
            diagnose=False,   # 토큰이 변수 덤프에 찍히지 않도록
            level=log_level.upper(),
            enqueue=False,
        )
    _hook_stdlib_logging()

def get_logger(name: str = "relay", **ctx):
    """선택적으로 컨텍스트를 바인딩한 logger 반환."""
    return logger.bind(name=name, **ctx)

def with_context(**ctx):
    """컨텍스트 매니저로 일시 컨텍스트 부여."""
    return logger.contextualize(**ctx)

setup_logger = setup_logging_dev
