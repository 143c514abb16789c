import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    bot_token: str
    log_level: str
    log_path: str
    max_attempts: int
    max_upload_bytes: int
    rate_limit_calls: int
    rate_limit_period: int


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}.") from exc
    if value < 1:
        raise ValueError(f"{name} must be positive, got {value}.")
    return value


def load_settings() -> Settings:
    bot_token = os.getenv("BOT_TOKEN")
    if not bot_token:
        raise ValueError("BOT_TOKEN is required. Set it in the environment or .env file.")

    return Settings(
        bot_token=bot_token,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_path=os.getenv("LOG_PATH", "logs/santa_bot.log"),
        max_attempts=_int_env("MAX_ATTEMPTS", 100),
        max_upload_bytes=_int_env("MAX_UPLOAD_BYTES", 1024 * 1024),
        rate_limit_calls=_int_env("RATE_LIMIT_CALLS", 5),
        rate_limit_period=_int_env("RATE_LIMIT_PERIOD", 10),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
