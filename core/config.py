# core/config.py

"""
Configuration constants for the academic ledger.

Centralizes the thresholds, import defaults, and storage locations used throughout the engine,
along with a small helper for wiring up console logging in an application entry point.
"""

import logging
import os

# =============================================================================
# STATUS RESOLUTION
# =============================================================================

# A not-started item due further out than this is displayed as "Available"
AVAILABLE_WINDOW_DAYS = 14

# Default term bounds (month, day) used when the ledger does not store its own
DEFAULT_TERM_START = (9, 1)
DEFAULT_TERM_END = (12, 20)

# =============================================================================
# IMPORT DEFAULTS
# =============================================================================

DEFAULT_COURSE_COLOR = "#4F46E5"
DEFAULT_TARGET_GRADE = 80.0
DEFAULT_CREDITS = 3

# =============================================================================
# WEIGHT REPORTING
# =============================================================================

# Weights are expected, never required, to sum to this
EXPECTED_WEIGHT_TOTAL = 100.0
WEIGHT_TOTAL_TOLERANCE = 0.01

# =============================================================================
# PERSISTENCE
# =============================================================================

SNAPSHOT_FILENAME = "ledger.json"

DATA_DIR_ENV_VAR = "ACADEMIC_LEDGER_DATA_DIR"
LOG_LEVEL_ENV_VAR = "ACADEMIC_LEDGER_LOG_LEVEL"


def get_data_dir() -> str:
    """
    Resolves the directory holding the ledger snapshot.

    Returns:
        The expanded value of `ACADEMIC_LEDGER_DATA_DIR` if set, otherwise `~/Documents/AcademicLedger`.
    """
    override = os.environ.get(DATA_DIR_ENV_VAR)

    if override and override.strip():
        return os.path.expanduser(override.strip())

    documents = os.path.join(os.path.expanduser("~"), "Documents")
    return os.path.join(documents, "AcademicLedger")


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_DATEFMT = "%H:%M:%S"


def configure_logging(level: str | None = None) -> None:
    """
    Attaches a console handler to the `core` and `models` loggers.

    Args:
        level (str | None): A logging level name. Defaults to `ACADEMIC_LEDGER_LOG_LEVEL`, then "INFO".

    Notes:
        - Intended for application entry points; library modules only ever call `logging.getLogger(__name__)`.
        - Calling it again only updates the level; no second handler is added.
    """
    level = (level or os.environ.get(LOG_LEVEL_ENV_VAR) or "INFO").upper()

    for name in ("core", "models"):
        logger = logging.getLogger(name)
        logger.setLevel(level)

        if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
            logger.addHandler(handler)
