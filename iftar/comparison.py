"""Compare today's iftar time across popular cities."""

import datetime
from dataclasses import dataclass

from iftar.constants import POPULAR_CITIES
from iftar.models import CalculationMethod, City
from iftar.prayer_times import format_time, local_date, today_schedule


@dataclass(frozen=True)
class CityIftar:
    city: City
    iftar_time: datetime.datetime
    formatted: str
    diff_minutes: int
    is_tomorrow: bool


def compare_cities(
    current: City,
    now: datetime.datetime,
    method: CalculationMethod = CalculationMethod.ISNA,
    cities=POPULAR_CITIES,
    limit: int = 5,
) -> list:
    """
    Today's iftar in up to ``limit`` other cities, relative to ``current``.

    Each city is evaluated on its own civil date at ``now``. Results are
    sorted by the minute difference against the current city's maghrib.
    """
    current_iftar = today_schedule(current, now, method).maghrib
    current_date = local_date(now, current.tz)

    results = []
    for city in [c for c in cities if c.name != current.name][:limit]:
        maghrib = today_schedule(city, now, method).maghrib
        diff = maghrib - current_iftar
        results.append(
            CityIftar(
                city=city,
                iftar_time=maghrib,
                formatted=format_time(maghrib, city.tz),
                diff_minutes=round(diff.total_seconds() / 60),
                is_tomorrow=local_date(maghrib, city.tz) > current_date,
            )
        )
    results.sort(key=lambda r: r.diff_minutes)
    return results
