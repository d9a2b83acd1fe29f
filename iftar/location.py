"""Location detection via IP geolocation, and the persisted location/method store."""

import json
import logging
import os

import pytz
import requests

from iftar import config
from iftar.constants import STORAGE_KEYS
from iftar.errors import InvalidCoordinates
from iftar.models import CalculationMethod, City

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = City("Jakarta", "Indonesia", -6.2088, 106.8456, "Asia/Jakarta")

IPAPI_URL = "http://ip-api.com/json/"

_INVALID_CITY = (
    AttributeError,
    KeyError,
    TypeError,
    ValueError,
    InvalidCoordinates,
    pytz.UnknownTimeZoneError,
)


def get_location(timeout: int = config.GEOLOCATION_TIMEOUT) -> City:
    """
    Detect current location via IP geolocation.

    Falls back to DEFAULT_LOCATION on failure.
    """
    try:
        resp = requests.get(
            IPAPI_URL,
            params={"fields": "city,country,lat,lon,timezone,status,message"},
            timeout=timeout,
        )
        resp.raise_for_status()
        data = resp.json()
        if data.get("status") != "success":
            logger.warning("IP geolocation failed: %s", data.get("message", "unknown error"))
            return DEFAULT_LOCATION
        return City(
            name=data.get("city") or "Current Location",
            country=data.get("country", ""),
            lat=float(data["lat"]),
            lng=float(data["lon"]),
            timezone=data["timezone"],
        )
    except requests.RequestException as exc:
        logger.warning("IP geolocation request failed: %s", exc)
    except _INVALID_CITY as exc:
        logger.warning("IP geolocation returned unusable data: %s", exc)
    return DEFAULT_LOCATION


def _read_store() -> dict:
    if not os.path.isfile(config.STORE_FILE):
        return {}
    try:
        with open(config.STORE_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("Discarding unreadable store %s: %s", config.STORE_FILE, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Discarding store %s: not a JSON object", config.STORE_FILE)
        return {}
    return data


def _write_store(data: dict) -> None:
    os.makedirs(config.CONFIG_DIR, exist_ok=True)
    with open(config.STORE_FILE, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def save_location(city: City) -> None:
    """Persist the chosen location."""
    data = _read_store()
    data[STORAGE_KEYS["location"]] = city.to_dict()
    _write_store(data)
    logger.info("Saved location %s", city.name)


def load_location() -> City | None:
    """Load the saved location, or None when absent or invalid."""
    raw = _read_store().get(STORAGE_KEYS["location"])
    if raw is None:
        return None
    try:
        return City.from_dict(raw)
    except _INVALID_CITY as exc:
        logger.warning("Discarding invalid cached location %r: %s", raw, exc)
        return None


def clear_location() -> None:
    """Forget the saved location."""
    data = _read_store()
    if data.pop(STORAGE_KEYS["location"], None) is not None:
        _write_store(data)


def save_method(method: CalculationMethod) -> None:
    data = _read_store()
    data[STORAGE_KEYS["method"]] = method.value
    _write_store(data)


def load_method(default: CalculationMethod = config.DEFAULT_METHOD) -> CalculationMethod:
    """Load the saved calculation method, or ``default`` when absent or invalid."""
    raw = _read_store().get(STORAGE_KEYS["method"])
    if raw is None:
        return default
    try:
        return CalculationMethod.parse(raw)
    except ValueError as exc:
        logger.warning("Discarding cached method: %s", exc)
        return default
