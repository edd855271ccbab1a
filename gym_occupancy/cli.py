import json
import logging
import logging.config
import sys

from gym_occupancy import config, run
from gym_occupancy.errors import ConfigError

logger = logging.getLogger(__name__)

DEV_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(threadName)s %(name)s:%(lineno)d | %(message)s"


def setup_logging():
    """Configures logging from LOGGER_CONFIG, or a verbose DEBUG logger on stderr."""
    if config.LOGGER_CONFIG:
        try:
            logging.config.dictConfig(json.loads(config.LOGGER_CONFIG))
        except (ValueError, TypeError) as e:
            raise ConfigError(f"could not parse logger config: {e}") from e
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(DEV_LOG_FORMAT))
    # force: a host runtime such as AWS Lambda has already put a handler on the root logger
    logging.basicConfig(level=logging.DEBUG, handlers=[handler], force=True)


def lambda_handler(event, context):
    """Scheduled entry point. A ConfigError propagates and fails the invocation."""
    setup_logging()
    outcomes = run.run()
    return {"endpoints": len(outcomes), "failed": sum(1 for o in outcomes if not o.ok)}


def main():
    try:
        setup_logging()
        run.run()
    except ConfigError as e:
        logger.critical(f"Could not load configuration: {e}")
        sys.exit(1)
