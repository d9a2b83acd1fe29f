"""Time-of-day phase classification relative to a prayer schedule."""

import datetime

from iftar.constants import TIME_PHASE_THEMES
from iftar.models import PrayerSchedule, TimePhase

DEFAULT_PHASE = TimePhase.AFTERNOON

PRE_IFTAR_WINDOW = datetime.timedelta(hours=3)
NEAR_IFTAR_WINDOW = datetime.timedelta(minutes=30)


def classify(schedule: PrayerSchedule | None, now: datetime.datetime) -> TimePhase:
    """
    Pick the phase active at ``now``.

    Bounds are half-open and checked in order, first match wins. Civil noon
    and midnight come from the schedule's own date and timezone. When the
    three-hour pre-iftar window starts before noon (short winter days at high
    latitudes) the afternoon phase is skipped for that day.
    """
    if schedule is None:
        return DEFAULT_PHASE

    maghrib = schedule.maghrib
    if now < schedule.fajr:
        return TimePhase.LATE_NIGHT
    if now < schedule.noon():
        return TimePhase.MORNING
    if now < maghrib - PRE_IFTAR_WINDOW:
        return TimePhase.AFTERNOON
    if now < maghrib - NEAR_IFTAR_WINDOW:
        return TimePhase.PRE_IFTAR
    if now < maghrib:
        return TimePhase.NEAR_IFTAR
    if now < schedule.midnight():
        return TimePhase.AFTER_IFTAR
    return TimePhase.LATE_NIGHT


def theme_for(phase: TimePhase) -> dict:
    return TIME_PHASE_THEMES[phase]
