import logging
import re
from datetime import datetime, tzinfo

import pytz

from gym_occupancy import config
from gym_occupancy.errors import ExtractionReason, TimeParseError, ZoneError

logger = logging.getLogger(__name__)

TIME_PATTERN = re.compile(r"(\d{1,2}):(\d{1,2}) (AM|PM)")


def load_zone(name: str) -> tzinfo:
    """Looks up an IANA timezone, raising ZoneError for unknown names.

    Names must match exactly; pytz alone would accept "europe/london".
    """
    if name not in pytz.all_timezones_set:
        raise ZoneError(f"unknown timezone: {name!r}")
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError as e:
        raise ZoneError(f"unknown timezone: {name!r}") from e


def anchor_date(reference: datetime, zone: tzinfo, anchor: str = config.ANCHOR_UTC):
    """Returns the calendar day a bare time of day gets placed on."""
    if reference.tzinfo is None:
        reference = pytz.utc.localize(reference)
    if anchor == config.ANCHOR_ENDPOINT:
        return reference.astimezone(zone).date()
    if anchor == config.ANCHOR_UTC:
        return reference.astimezone(pytz.utc).date()
    raise ValueError(f"unknown anchor: {anchor!r}")


def resolve_last_update(
    raw: str,
    zone: tzinfo,
    reference: datetime,
    anchor: str = config.ANCHOR_UTC,
) -> datetime:
    """Converts a free-text "last updated 2:30 PM" into a UTC instant.

    Upstream only reports the wall-clock time, always meaning "today", so the
    date comes from `reference`. The time is read as wall-clock time in
    `zone`. A zone-to-zone midnight crossing is not corrected.
    """
    match = TIME_PATTERN.search(raw)
    if not match:
        raise TimeParseError(ExtractionReason.TIME_NOT_FOUND, f"no time of day in {raw!r}")

    try:
        wall_clock = datetime.strptime(match.group(0), "%I:%M %p").time()
    except ValueError as e:
        raise TimeParseError(ExtractionReason.TIME_UNPARSEABLE, f"{match.group(0)!r}: {e}") from e

    day = anchor_date(reference, zone, anchor)
    local = zone.localize(datetime.combine(day, wall_clock))
    return local.astimezone(pytz.utc).replace(second=0, microsecond=0)
