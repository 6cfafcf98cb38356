import os
from dataclasses import dataclass

from dotenv import load_dotenv
from loguru import logger


DEFAULT_MONGODB_URL = "mongodb://localhost:27017"
DEFAULT_MONGODB_DB = "marketplace"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_MESSAGE_MAX_LENGTH = 5000


@dataclass(frozen=True)
class Settings:

    mongodb_url: str
    mongodb_db: str
    mongodb_use_transactions: bool
    log_level: str
    message_max_length: int


def _get_env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Invalid integer for {}: {!r}, using {}", name, value, default)
        return default


def _get_env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y"}


def load_settings() -> Settings:
    """Read settings from the environment, loading .env when present."""
    load_dotenv()
    return Settings(
        mongodb_url=os.getenv("MONGODB_URL", DEFAULT_MONGODB_URL),
        mongodb_db=os.getenv("MONGODB_DB", DEFAULT_MONGODB_DB),
        mongodb_use_transactions=_get_env_bool("MONGODB_USE_TRANSACTIONS", False),
        log_level=os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        message_max_length=_get_env_int("MESSAGE_MAX_LENGTH", DEFAULT_MESSAGE_MAX_LENGTH),
    )


_settings = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings
