"""Daily prayer schedules and next-iftar resolution for a location."""

import datetime
import logging

import pytz

from iftar import calculator
from iftar.models import (
    CalculationMethod,
    City,
    Coordinates,
    PrayerSchedule,
    ResolvedIftar,
)

logger = logging.getLogger(__name__)

PRAYER_DISPLAY = {
    "fajr": "Fajr (Suhoor ends)",
    "sunrise": "Sunrise",
    "dhuhr": "Dhuhr",
    "asr": "Asr",
    "maghrib": "Maghrib (Iftar)",
    "isha": "Isha",
}

ONE_DAY = datetime.timedelta(days=1)


def _as_tz(tz):
    if tz is None:
        return pytz.utc
    if isinstance(tz, str):
        return pytz.timezone(tz)
    return tz


def local_date(now: datetime.datetime, tz) -> datetime.date:
    """The civil date at ``now`` in ``tz``, not in UTC."""
    return now.astimezone(_as_tz(tz)).date()


def next_local_midnight(now: datetime.datetime, tz) -> datetime.datetime:
    """Start of the next civil day in ``tz`` after ``now``."""
    tz = _as_tz(tz)
    tomorrow = local_date(now, tz) + ONE_DAY
    return tz.localize(datetime.datetime.combine(tomorrow, datetime.time(0)))


def compute_schedule(
    coords: Coordinates,
    date: datetime.date,
    method: CalculationMethod = CalculationMethod.ISNA,
    tz=None,
) -> PrayerSchedule:
    """
    Prayer schedule for one civil date at ``coords``, rendered in ``tz``.

    Pure: identical arguments give identical schedules. InvalidCoordinates and
    ScheduleInvariantViolation propagate to the caller.
    """
    return calculator.calculate(coords, date, method, _as_tz(tz))


def today_schedule(
    city: City,
    now: datetime.datetime,
    method: CalculationMethod = CalculationMethod.ISNA,
) -> PrayerSchedule:
    """Schedule for the city's own civil date at ``now``."""
    tz = city.tz
    return compute_schedule(city.coordinates, local_date(now, tz), method, tz)


def resolve_next_iftar(
    coords: Coordinates,
    method: CalculationMethod,
    now: datetime.datetime,
    tz=None,
) -> ResolvedIftar:
    """
    Today's maghrib while it is still ahead of ``now``, otherwise tomorrow's.

    The comparison is strict: at the exact maghrib instant today's iftar
    already counts as passed.
    """
    tz = _as_tz(tz)
    today = local_date(now, tz)
    schedule = compute_schedule(coords, today, method, tz)
    if now < schedule.maghrib:
        return ResolvedIftar(instant=schedule.maghrib, is_today=True)

    tomorrow = compute_schedule(coords, today + ONE_DAY, method, tz)
    logger.debug("Iftar for %s has passed, using %s", today, tomorrow.date)
    return ResolvedIftar(instant=tomorrow.maghrib, is_today=False)


def format_time(instant: datetime.datetime, tz) -> str:
    """'6:15 PM' style time in ``tz``."""
    return instant.astimezone(_as_tz(tz)).strftime("%I:%M %p").lstrip("0")


def format_time_with_seconds(instant: datetime.datetime, tz) -> str:
    """'6:15:42 PM' style time in ``tz``."""
    return instant.astimezone(_as_tz(tz)).strftime("%I:%M:%S %p").lstrip("0")


def seconds_until(target: datetime.datetime, now: datetime.datetime) -> int:
    """Return seconds from now until target (negative if past)."""
    return int((target - now).total_seconds())
