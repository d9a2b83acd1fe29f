"""Ramadan progress for a civil date."""

import datetime
from dataclasses import dataclass

from iftar.constants import RAMADAN_2026

BEFORE = "before"
DURING = "during"
AFTER = "after"


@dataclass(frozen=True)
class RamadanProgress:
    status: str
    current_day: int
    total_days: int
    percent: float
    days_until: int
    hijri_year: int


def ramadan_progress(today: datetime.date, period: dict = RAMADAN_2026) -> RamadanProgress:
    """
    Where ``today`` falls within the Ramadan period.

    ``today`` should be the location's civil date. current_day is clamped to
    [1, total_days]; days_until is only non-zero before the start.
    """
    start, end = period["start"], period["end"]
    total_days = (end - start).days
    current_day = max(1, min((today - start).days + 1, total_days))

    if today < start:
        status = BEFORE
    elif today > end:
        status = AFTER
    else:
        status = DURING

    return RamadanProgress(
        status=status,
        current_day=current_day,
        total_days=total_days,
        percent=current_day / total_days * 100,
        days_until=max(0, (start - today).days),
        hijri_year=period["hijri_year"],
    )


def describe(progress: RamadanProgress) -> str:
    if progress.status == BEFORE:
        return f"Ramadan {progress.hijri_year} begins in {progress.days_until} days"
    if progress.status == AFTER:
        return f"Ramadan {progress.hijri_year} has ended. See you next year!"
    return (
        f"Day {progress.current_day} of {progress.total_days} · "
        f"Ramadan {progress.hijri_year}"
    )
