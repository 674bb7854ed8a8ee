import logging
import os
import sys

LOG_LEVEL_ENV = "SCIALG_LOG_LEVEL"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _level_from_env(default=logging.INFO):
    name = os.environ.get(LOG_LEVEL_ENV)
    if not name:
        return default
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else default


def setup_logging(level=None, format_string=LOG_FORMAT):
    """Send package records to stdout.

    The level defaults to ``$SCIALG_LOG_LEVEL`` (``INFO`` when unset or
    unrecognised). Rejected adaptive steps are logged at ``DEBUG``.
    """
    logging.basicConfig(
        level=_level_from_env() if level is None else level,
        format=format_string,
        stream=sys.stdout
    )


def set_level(level):
    """Change the verbosity of the ``scialg`` logger only."""
    logger.setLevel(level)


setup_logging()

logger = logging.getLogger("scialg")
