import pytest

from santa.core.config import load_settings


@pytest.fixture
def env(monkeypatch):
    for name in ("LOG_LEVEL", "LOG_PATH", "MAX_ATTEMPTS", "MAX_UPLOAD_BYTES", "RATE_LIMIT_CALLS", "RATE_LIMIT_PERIOD"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("BOT_TOKEN", "123:abc")
    return monkeypatch


def test_defaults(env):
    settings = load_settings()
    assert settings.bot_token == "123:abc"
    assert settings.log_level == "INFO"
    assert settings.max_attempts == 100
    assert settings.max_upload_bytes == 1024 * 1024
    assert settings.rate_limit_calls == 5


def test_overrides(env):
    env.setenv("MAX_ATTEMPTS", "250")
    env.setenv("LOG_LEVEL", "DEBUG")
    settings = load_settings()
    assert settings.max_attempts == 250
    assert settings.log_level == "DEBUG"


def test_bot_token_required(env):
    env.delenv("BOT_TOKEN")
    with pytest.raises(ValueError, match="BOT_TOKEN"):
        load_settings()


@pytest.mark.parametrize("value", ["lots", "0", "-3"])
def test_bad_numbers_are_rejected(env, value):
    env.setenv("MAX_ATTEMPTS", value)
    with pytest.raises(ValueError, match="MAX_ATTEMPTS"):
        load_settings()


def test_rate_limit_period_is_whole_seconds(env):
    env.setenv("RATE_LIMIT_PERIOD", "30")
    settings = load_settings()
    assert settings.rate_limit_period == 30
    assert isinstance(settings.rate_limit_period, int)

    env.setenv("RATE_LIMIT_PERIOD", "2.5")
    with pytest.raises(ValueError, match="RATE_LIMIT_PERIOD must be an integer"):
        load_settings()
