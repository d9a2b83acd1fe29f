"""Solar prayer-time calculation backed by adhanpy."""

import datetime
import logging
from zoneinfo import ZoneInfo

import pytz
from adhanpy.PrayerTimes import PrayerTimes
from adhanpy.calculation.CalculationMethod import CalculationMethod as AdhanMethod

from iftar.errors import ScheduleInvariantViolation
from iftar.models import CalculationMethod, Coordinates, PrayerSchedule

logger = logging.getLogger(__name__)

# Fajr / Isha conventions:
#   ISNA 15/15, MWL 18/17, Egyptian 19.5/17.5, Umm al-Qura 18.5/+90min, Karachi 18/18
ADHAN_METHODS = {
    CalculationMethod.ISNA: AdhanMethod.NORTH_AMERICA,
    CalculationMethod.MUSLIM_WORLD_LEAGUE: AdhanMethod.MUSLIM_WORLD_LEAGUE,
    CalculationMethod.EGYPTIAN: AdhanMethod.EGYPTIAN,
    CalculationMethod.UMM_AL_QURA: AdhanMethod.UMM_AL_QURA,
    CalculationMethod.KARACHI: AdhanMethod.KARACHI,
}

_UTC = ZoneInfo("UTC")


def _prayer_times(coords: Coordinates, day: datetime.date, method: CalculationMethod):
    try:
        return PrayerTimes(
            coords.as_tuple(),
            datetime.datetime(day.year, day.month, day.day),
            ADHAN_METHODS[method],
            time_zone=_UTC,
        )
    except RuntimeError as exc:
        # adhanpy cannot place sunrise/sunset during polar day or night
        raise ScheduleInvariantViolation(
            f"undefined prayer events at {coords} on {day}"
        ) from exc


def calculate(
    coords: Coordinates,
    day: datetime.date,
    method: CalculationMethod = CalculationMethod.ISNA,
    tz=pytz.utc,
) -> PrayerSchedule:
    """
    Compute the six prayer instants for one civil date at one location.

    The result is expressed in ``tz`` (a pytz timezone) and scoped to ``day``.
    Raises InvalidCoordinates for out-of-range input and
    ScheduleInvariantViolation if the events are undefined (polar day or
    night) or come back out of order.
    """
    if not isinstance(coords, Coordinates):
        coords = Coordinates(*coords)
    method = CalculationMethod.parse(method)

    times = _prayer_times(coords, day, method)
    # adhanpy picks the solar day by UTC date; where the zone offset and the
    # longitude sit on opposite sides of the dateline (Apia, Kiritimati) that
    # lands on a neighbouring civil date, so shift the requested day to match
    local_noon = times.dhuhr.astimezone(tz).date()
    if local_noon != day:
        shifted = day + (day - local_noon)
        logger.debug("Solar day for %s in %s is %s, recomputing", day, tz.zone, shifted)
        times = _prayer_times(coords, shifted, method)
        if times.dhuhr.astimezone(tz).date() != day:
            raise ScheduleInvariantViolation(
                f"no solar day at {coords} falls on {day} in {tz.zone}"
            )

    logger.debug("Calculated %s prayer times for %s at %s", method.value, day, coords)
    return PrayerSchedule(
        date=day,
        timezone=tz.zone,
        fajr=times.fajr.astimezone(tz),
        sunrise=times.sunrise.astimezone(tz),
        dhuhr=times.dhuhr.astimezone(tz),
        asr=times.asr.astimezone(tz),
        maghrib=times.maghrib.astimezone(tz),
        isha=times.isha.astimezone(tz),
    )
