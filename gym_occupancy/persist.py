import json
import logging
import os
from datetime import datetime, timezone
from typing import List

from gym_occupancy.models import FetchOutcome

logger = logging.getLogger(__name__)


def ensure_parent_dir(path: str):
    """Ensures the directory holding `path` exists."""
    parent = os.path.dirname(path)
    if parent and not os.path.exists(parent):
        os.makedirs(parent)


def save_report(outcomes: List[FetchOutcome], path: str):
    """Saves the current occupancy snapshot to a JSON file, replacing the previous one."""
    ensure_parent_dir(path)
    try:
        data = {
            "last_updated": datetime.now(timezone.utc).isoformat(),
            "endpoints": [o.endpoint.model_dump(mode="json") for o in outcomes if o.ok],
            "errors": [{"endpoint": o.endpoint.name, "error": str(o.error)} for o in outcomes if not o.ok],
        }
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
        logger.info(f"Saved report to {path}")
    except IOError as e:
        logger.error(f"Failed to save report: {e}")
