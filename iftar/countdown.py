"""Remaining-time breakdown towards a target instant."""

import datetime

from iftar.models import CountdownState

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE

PAST = CountdownState(hours=0, minutes=0, seconds=0, total_remaining_ms=0, is_past=True)

_ONE_MS = datetime.timedelta(milliseconds=1)


def tick(target, now: datetime.datetime) -> CountdownState:
    """
    Break the time left until ``target`` into hours, minutes and seconds.

    Hours are unbounded. A missing target, or less than one whole
    millisecond left, is reported as past.
    """
    if target is None:
        return PAST
    remaining = (target - now) // _ONE_MS
    if remaining <= 0:
        return PAST
    return CountdownState(
        hours=remaining // MS_PER_HOUR,
        minutes=remaining % MS_PER_HOUR // MS_PER_MINUTE,
        seconds=remaining % MS_PER_MINUTE // MS_PER_SECOND,
        total_remaining_ms=remaining,
        is_past=False,
    )


def format_countdown(state: CountdownState) -> str:
    """Format as H:MM:SS, e.g. '3:07:09'."""
    return f"{state.hours}:{state.minutes:02d}:{state.seconds:02d}"
