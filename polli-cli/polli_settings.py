import logging
import os
from typing import Optional, Union
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

from polli_errors import ConfigError

DEFAULT_BASE_URL = "https://gen.pollinations.ai/image"
DEFAULT_TIMEOUT = 300.0
DEFAULT_LOG_LEVEL = "WARNING"


class Settings(BaseModel):
    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    # seconds; None waits forever
    timeout: Optional[float] = DEFAULT_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL


def parse_timeout(value: Union[str, float, None]) -> Optional[float]:
    """'0', '' and None all mean no timeout."""
    if value is None or value == "":
        return None
    try:
        seconds = float(value)
    except ValueError:
        raise ConfigError(f"Invalid timeout: {value!r} (expected a number of seconds)") from None
    return seconds if seconds > 0 else None


def parse_log_level(value: Optional[str]) -> str:
    level = (value or DEFAULT_LOG_LEVEL).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"Invalid log level: {value!r}")
    return level


def load_settings(env_file: Union[str, Path] = ".env") -> Settings:
    """Read configuration once at start-up.

    Variables from ``env_file`` never replace ones already set in the process
    environment. Malformed values raise ConfigError.
    """
    load_dotenv(env_file, override=False)
    return Settings(
        api_key=os.getenv("POLLINATIONS_API_KEY") or None,
        base_url=os.getenv("POLLINATIONS_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        timeout=parse_timeout(os.getenv("POLLINATIONS_TIMEOUT", str(DEFAULT_TIMEOUT))),
        log_level=parse_log_level(os.getenv("POLLINATIONS_LOG_LEVEL")),
    )
