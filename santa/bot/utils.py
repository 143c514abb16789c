from __future__ import annotations

from loguru import logger

from santa.core.config import get_settings
from santa.services.rate_limit import RateLimiter

SLOW_DOWN_MESSAGE = "You're doing that too often. Please slow down."

_settings = get_settings()
rate_limiter = RateLimiter(
    max_calls=_settings.rate_limit_calls,
    period_seconds=_settings.rate_limit_period,
)


def check_rate_limit(user_id: int, action: str) -> bool:
    result = rate_limiter.allow(user_id, action)
    if not result.allowed:
        logger.bind(user_id=user_id, action=action).debug(
            "Rate limited for {seconds:.1f}s", seconds=result.retry_after
        )
    return result.allowed


def decode_upload(payload: bytes) -> str:
    # utf-8-sig drops the BOM spreadsheet exports like to prepend
    return payload.decode("utf-8-sig")


def log_handler_exception(action: str, user_id: int | None, chat_id: int | None, error: Exception) -> None:
    logger.bind(action=action, user_id=user_id, chat_id=chat_id).exception(
        "Handler error: {error}", error=str(error)
    )
