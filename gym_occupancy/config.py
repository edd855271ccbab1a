import logging
import os
from typing import List, Literal, Optional

from pydantic import BaseModel, PositiveFloat, PositiveInt, TypeAdapter, ValidationError

from gym_occupancy.errors import ConfigError
from gym_occupancy.models import Endpoint

logger = logging.getLogger(__name__)

# --- Endpoint configuration ---
CONFIG_ENV = "CONFIG"
CONFIG_FILE = os.environ.get("CONFIG_FILE", "config.json")

DEFAULT_TIMEZONE = "Europe/London"

# --- Fetching ---
# Read as raw strings; load_settings() validates them.
DEFAULT_REQUEST_TIMEOUT = 10.0
REQUEST_TIMEOUT = os.environ.get("REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT))
# Unset means one worker per endpoint.
MAX_WORKERS = os.environ.get("MAX_WORKERS") or None

# Which calendar day a bare "H:MM AM" is placed on: the UTC day of the
# process clock ("utc") or the day in the endpoint's own zone ("endpoint").
ANCHOR_UTC = "utc"
ANCHOR_ENDPOINT = "endpoint"
ANCHOR_DAY = os.environ.get("ANCHOR_DAY", ANCHOR_UTC)

USER_AGENT = os.environ.get(
    "SCRAPER_USER_AGENT",
    (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/129.0.0.0 Safari/537.36"
    ),
)

# --- Output ---
REPORT_FILE = os.environ.get("REPORT_FILE")

# --- Logging ---
LOGGER_CONFIG = os.environ.get("LOGGER_CONFIG")

_ENDPOINTS_ADAPTER = TypeAdapter(List[Endpoint])


def strip_whitespace(text: str) -> str:
    """Drops every whitespace character so raw documents fit on one log line."""
    return "".join(ch for ch in text if not ch.isspace())


def read_raw_config() -> str:
    """Returns the endpoint config from the CONFIG env var, falling back to CONFIG_FILE."""
    raw = os.environ.get(CONFIG_ENV, "")
    if raw:
        logger.debug(f"Got config from env: {strip_whitespace(raw)}")
        return raw

    logger.debug(f"Getting config from file {CONFIG_FILE}")
    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            raw = f.read()
    except OSError as e:
        raise ConfigError(f"could not read config {CONFIG_FILE}: {e}") from e
    logger.debug(f"Got config from file {CONFIG_FILE}: {strip_whitespace(raw)}")
    return raw


def load_endpoints(raw: Optional[str] = None) -> List[Endpoint]:
    """Parses the endpoint list. Reads it via read_raw_config() when raw is None."""
    if raw is None:
        raw = read_raw_config()
    try:
        return _ENDPOINTS_ADAPTER.validate_json(raw)
    except ValidationError as e:
        raise ConfigError(f"could not parse config: {e}") from e


class Settings(BaseModel):
    request_timeout: PositiveFloat = DEFAULT_REQUEST_TIMEOUT
    max_workers: Optional[PositiveInt] = None
    anchor_day: Literal["utc", "endpoint"] = ANCHOR_UTC


def load_settings() -> Settings:
    """Validates the fetch settings taken from the environment."""
    try:
        return Settings(
            request_timeout=REQUEST_TIMEOUT,
            max_workers=MAX_WORKERS,
            anchor_day=ANCHOR_DAY.strip().lower(),
        )
    except ValidationError as e:
        raise ConfigError(f"invalid settings: {e}") from e
