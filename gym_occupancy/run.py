import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

import requests

from gym_occupancy import config, persist, scraper
from gym_occupancy.errors import OccupancyError
from gym_occupancy.models import Endpoint, FetchOutcome

logger = logging.getLogger(__name__)


def _fetch_one(endpoint: Endpoint, session: requests.Session, settings: config.Settings) -> FetchOutcome:
    try:
        fetched = scraper.fetch_endpoint(
            endpoint, session, anchor=settings.anchor_day, timeout=settings.request_timeout
        )
        return FetchOutcome(endpoint=fetched)
    except OccupancyError as e:
        # already logged by fetch_endpoint
        return FetchOutcome(endpoint=endpoint, error=e)
    except Exception as e:
        logger.exception(f"Unexpected failure fetching {endpoint.name}")
        return FetchOutcome(endpoint=endpoint, error=e)


def fetch_all(
    endpoints: List[Endpoint],
    session: requests.Session,
    settings: Optional[config.Settings] = None,
) -> List[FetchOutcome]:
    """Fetches every endpoint concurrently and waits for all of them.

    A failing endpoint only affects its own outcome. Outcomes are returned in
    the same order as `endpoints`.
    """
    if not endpoints:
        return []

    if settings is None:
        settings = config.Settings()
    workers = settings.max_workers or len(endpoints)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fetch") as executor:
        futures = [executor.submit(_fetch_one, endpoint, session, settings) for endpoint in endpoints]
        return [future.result() for future in futures]


def log_summary(outcomes: List[FetchOutcome]):
    failed = [o for o in outcomes if not o.ok]
    logger.info(f"Fetched {len(outcomes) - len(failed)}/{len(outcomes)} endpoints")
    for outcome in failed:
        logger.warning(f"Endpoint {outcome.endpoint.name} left stale: {outcome.error}")


def run(raw_config: Optional[str] = None, session: Optional[requests.Session] = None) -> List[FetchOutcome]:
    """Core orchestration logic. Loads the endpoints, fetches them all, and
    optionally writes the resulting snapshot.

    Raises ConfigError when the settings or the endpoint list can't be loaded; every other
    failure is reported through the returned outcomes.
    """
    settings = config.load_settings()
    endpoints = config.load_endpoints(raw_config)
    logger.info(f"Loaded {len(endpoints)} endpoints: {', '.join(e.name for e in endpoints)}")

    if session is None:
        session = scraper.create_session()

    outcomes = fetch_all(endpoints, session, settings)
    log_summary(outcomes)

    if config.REPORT_FILE:
        persist.save_report(outcomes, config.REPORT_FILE)

    return outcomes
