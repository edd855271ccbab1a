import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

import cloudscraper
import requests
from cloudscraper.exceptions import CloudflareException
from requests.structures import CaseInsensitiveDict

from gym_occupancy import config
from gym_occupancy.errors import OccupancyError, TransportError, UnexpectedResponse
from gym_occupancy.extractor import extract_gym_records
from gym_occupancy.models import Endpoint, Gym, GymData, Header
from gym_occupancy.timeparse import load_zone, resolve_last_update

logger = logging.getLogger(__name__)


def create_session() -> requests.Session:
    """Builds the HTTP session shared by all endpoint fetches."""
    session = cloudscraper.create_scraper()
    session.headers["User-Agent"] = config.USER_AGENT
    return session


def build_url(endpoint: Endpoint) -> str:
    """Constructs the occupancy page URL for an endpoint."""
    url = f"{endpoint.url.rstrip('/')}/portal/public/{endpoint.id}/occupancy"
    logger.debug(f"Built URL: {url}")
    return url


def build_headers(headers: List[Header]) -> CaseInsensitiveDict:
    """Applies configured headers in order; a repeated key keeps the last value."""
    result = CaseInsensitiveDict()
    for header in headers:
        result[header.key] = header.value
    return result


def fetch_occupancy_page(
    endpoint: Endpoint,
    session: requests.Session,
    timeout: float = config.DEFAULT_REQUEST_TIMEOUT,
) -> str:
    """Fetches the occupancy page in a single attempt and returns its body."""
    url = build_url(endpoint)
    logger.info(f"Fetching occupancy for {endpoint.name} from {url}")

    try:
        response = session.get(url, headers=build_headers(endpoint.headers), timeout=timeout)
    except (requests.RequestException, CloudflareException) as e:
        raise TransportError(f"request to {url} failed: {e}") from e

    logger.debug(f"Response status: {response.status_code}")
    if response.status_code != 200:
        raise UnexpectedResponse(response.status_code, url)
    return response.text


def fetch_gym_data(
    endpoint: Endpoint,
    session: requests.Session,
    now: datetime,
    anchor: str = config.ANCHOR_UTC,
    timeout: float = config.DEFAULT_REQUEST_TIMEOUT,
) -> Dict[str, GymData]:
    """Fetches and normalizes the occupancy records for one endpoint, keyed by short code."""
    zone = load_zone(endpoint.timezone)
    body = fetch_occupancy_page(endpoint, session, timeout)

    data = {}
    for shortcode, record in extract_gym_records(body).items():
        data[shortcode] = GymData(
            capacity=record.capacity,
            count=record.count,
            last_update=resolve_last_update(record.last_update, zone, now, anchor),
        )
    return data


def merge_gym_data(gyms: List[Gym], data: Dict[str, GymData], brand: str) -> None:
    """Stamps the brand on every gym and replaces the data of gyms present in `data`.

    Gyms without a matching record keep what they had.
    """
    for gym in gyms:
        gym.brand = brand
        if gym.shortcode in data:
            gym.data = data[gym.shortcode]
            logger.info(f"Got gym data: {gym.model_dump(mode='json')}")


def fetch_endpoint(
    endpoint: Endpoint,
    session: requests.Session,
    now: Optional[datetime] = None,
    anchor: str = config.ANCHOR_UTC,
    timeout: float = config.DEFAULT_REQUEST_TIMEOUT,
) -> Endpoint:
    """Returns a copy of the endpoint with fresh occupancy attached to its gyms."""
    endpoint = endpoint.model_copy(deep=True)
    if not endpoint.timezone:
        endpoint.timezone = config.DEFAULT_TIMEZONE
    if now is None:
        now = datetime.now(timezone.utc)

    try:
        data = fetch_gym_data(endpoint, session, now, anchor, timeout)
    except OccupancyError as e:
        logger.error(f"Get endpoint {endpoint.name} failed: {e!r} | endpoint={endpoint.model_dump(mode='json')}")
        raise

    dumped = {shortcode: gym_data.model_dump(mode="json") for shortcode, gym_data in data.items()}
    logger.debug(f"Got endpoint {endpoint.name}: {endpoint.model_dump(mode='json')} | data={dumped}")
    merge_gym_data(endpoint.gyms, data, endpoint.brand)
    return endpoint
