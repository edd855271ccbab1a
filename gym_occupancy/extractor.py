import logging
import re
from typing import Dict

from pydantic import TypeAdapter, ValidationError

from gym_occupancy.errors import ExtractionError, ExtractionReason
from gym_occupancy.models import RawGymRecord

logger = logging.getLogger(__name__)

# Matches `var data = { ... , };` without crossing a statement terminator.
DATA_PATTERN = re.compile(r"var\s+data\s+=\s+\{([^;]+),\s+\};")

_RECORDS_ADAPTER = TypeAdapter(Dict[str, RawGymRecord])


def repair_quotes(object_body: str) -> str:
    """Turns the captured JS object body into a JSON document.

    The replacement is blind: an apostrophe inside a value (e.g. "St John's")
    corrupts the result and surfaces as a MALFORMED_RECORD error.
    """
    return "{" + object_body.replace("'", '"') + "}"


def extract_gym_records(body: str) -> Dict[str, RawGymRecord]:
    """Pulls the per-gym occupancy records out of an occupancy page.

    The page embeds them as a single-quoted JS object literal assigned to
    `data`. Exactly one such assignment must be present.
    """
    matches = DATA_PATTERN.findall(body)
    if len(matches) != 1:
        raise ExtractionError(ExtractionReason.NO_MATCH, f"expected one data assignment, found {len(matches)}")

    document = repair_quotes(matches[0])
    try:
        records = _RECORDS_ADAPTER.validate_json(document)
    except ValidationError as e:
        logger.debug(f"Unparseable data document: {document}")
        raise ExtractionError(ExtractionReason.MALFORMED_RECORD, str(e)) from e

    logger.debug(f"Extracted {len(records)} records: {sorted(records)}")
    return records
