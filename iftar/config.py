"""Runtime configuration: directories, cadences and environment overrides."""

import logging
import os

from iftar.models import CalculationMethod

logger = logging.getLogger(__name__)

CONFIG_DIR = os.environ.get(
    "IFTAR_CONFIG_DIR", os.path.join(os.path.expanduser("~"), ".iftar")
)
STORE_FILE = os.path.join(CONFIG_DIR, "store.json")

LOG_LEVEL = os.environ.get("IFTAR_LOG_LEVEL", "INFO").upper()

COUNTDOWN_INTERVAL_MS = 1000   # live digits
PHASE_INTERVAL_MS = 60_000     # theme phase
MIDNIGHT_BUFFER_MS = 1000      # re-resolve just after local midnight

REMINDER_MINUTES = (10,)

GEOLOCATION_TIMEOUT = 5


def _default_method() -> CalculationMethod:
    raw = os.environ.get("IFTAR_METHOD")
    if not raw:
        return CalculationMethod.ISNA
    try:
        return CalculationMethod.parse(raw)
    except ValueError:
        logger.warning("Ignoring IFTAR_METHOD=%r, falling back to ISNA", raw)
        return CalculationMethod.ISNA


DEFAULT_METHOD = _default_method()
