"""
Timer-driven re-evaluation of the iftar state for one location and method.

IftarTracker runs on any event loop that offers tkinter's pair of
``after(ms, callback) -> handle`` and ``after_cancel(handle)``. Every input
change cancels all pending timers and re-arms them; callbacks armed for an
earlier generation of inputs are dropped even if they still fire.
"""

import datetime
import logging
import threading

import pytz

from iftar import config
from iftar.countdown import tick
from iftar.errors import PrayerTimeError
from iftar.models import CalculationMethod
from iftar.phase import classify
from iftar.prayer_times import next_local_midnight, resolve_next_iftar, today_schedule

logger = logging.getLogger(__name__)


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(pytz.utc)


_ONE_MS = datetime.timedelta(milliseconds=1)


def _ms_until(target: datetime.datetime, now: datetime.datetime) -> int:
    """Whole milliseconds from now until target, rounded up, never negative."""
    return max(0, -((now - target) // _ONE_MS))


class ThreadingTimers:
    """``after`` / ``after_cancel`` on top of daemon threading.Timer objects."""

    def after(self, ms: int, callback):
        t = threading.Timer(ms / 1000.0, callback)
        t.daemon = True
        t.start()
        return t

    def after_cancel(self, handle) -> None:
        handle.cancel()


class IftarTracker:
    """Keeps schedule, next iftar, countdown and phase current for one city."""

    def __init__(
        self,
        after,
        after_cancel,
        clock=utc_now,
        on_schedule=None,
        on_countdown=None,
        on_phase=None,
        on_iftar=None,
        on_reminder=None,
        on_error=None,
        reminder_minutes=config.REMINDER_MINUTES,
    ):
        self._after = after
        self._after_cancel = after_cancel
        self._clock = clock
        self.on_schedule = on_schedule
        self.on_countdown = on_countdown
        self.on_phase = on_phase
        self.on_iftar = on_iftar
        self.on_reminder = on_reminder
        self.on_error = on_error
        self.reminder_minutes = tuple(reminder_minutes)

        self._handles: dict = {}
        self._generation = 0

        self.city = None
        self.method = config.DEFAULT_METHOD
        self.schedule = None
        self.resolved = None
        now = self._clock()
        self.countdown = tick(None, now)
        self.phase = classify(None, now)

    # ── inputs ────────────────────────────────────────────────────────────
    def configure(self, city, method: CalculationMethod | None = None) -> None:
        """Switch location (and optionally method) and restart every timer."""
        self.city = city
        if method is not None:
            self.method = CalculationMethod.parse(method)
        logger.info("Tracking iftar for %s (%s)", city.name, self.method.value)
        self._restart()

    def set_method(self, method: CalculationMethod) -> None:
        self.method = CalculationMethod.parse(method)
        if self.city is None:
            return
        logger.info("Calculation method changed to %s", self.method.value)
        self._restart()

    def stop(self) -> None:
        """Cancel every pending timer."""
        self._generation += 1
        self._cancel_all()

    @property
    def pending(self) -> tuple:
        """Names of the timers currently armed."""
        return tuple(sorted(self._handles))

    # ── timer plumbing ────────────────────────────────────────────────────
    def _cancel_all(self) -> None:
        for handle in self._handles.values():
            self._after_cancel(handle)
        self._handles.clear()

    def _arm(self, name: str, delay_ms: int, fn) -> None:
        generation = self._generation
        old = self._handles.pop(name, None)
        if old is not None:
            self._after_cancel(old)
        self._handles[name] = self._after(
            delay_ms, lambda: self._fire(generation, name, fn)
        )
        logger.debug("Armed %s in %d ms", name, delay_ms)

    def _fire(self, generation: int, name: str, fn) -> None:
        if generation != self._generation:
            logger.debug("Dropping stale %s timer", name)
            return
        self._handles.pop(name, None)
        fn()

    def _restart(self) -> None:
        self._generation += 1
        self._cancel_all()
        now = self._clock()
        self._refresh_schedule(now)
        self._refresh_countdown(now)
        self._refresh_phase(now)
        self._arm_loops(now)
        self._arm_iftar_alerts(now)

    def _arm_loops(self, now: datetime.datetime) -> None:
        self._arm("countdown", config.COUNTDOWN_INTERVAL_MS, self._on_countdown_timer)
        self._arm("phase", config.PHASE_INTERVAL_MS, self._on_phase_timer)
        midnight = next_local_midnight(now, self.city.tz)
        self._arm(
            "midnight",
            _ms_until(midnight, now) + config.MIDNIGHT_BUFFER_MS,
            self._on_midnight_timer,
        )

    def _recover(self, exc: PrayerTimeError) -> None:
        """Keep ticking on the last good state after a timer-driven recompute fails."""
        logger.exception("Could not recompute prayer times for %s", self.city.name)
        self._arm_loops(self._clock())
        if self.on_error:
            self.on_error(exc)

    def _arm_iftar_alerts(self, now: datetime.datetime) -> None:
        iftar = self.resolved.instant
        for minutes in self.reminder_minutes:
            at = iftar - datetime.timedelta(minutes=minutes)
            if at > now:
                self._arm(
                    f"reminder-{minutes}",
                    _ms_until(at, now),
                    lambda minutes=minutes: self._on_reminder_timer(minutes),
                )
        # +1 ms so the timer never lands before maghrib itself
        self._arm("iftar", _ms_until(iftar, now) + 1, self._on_iftar_timer)

    # ── recomputation ─────────────────────────────────────────────────────
    def _refresh_schedule(self, now: datetime.datetime) -> None:
        city = self.city
        self.schedule = today_schedule(city, now, self.method)
        self.resolved = resolve_next_iftar(city.coordinates, self.method, now, city.tz)
        logger.debug(
            "Next iftar for %s at %s (today=%s)",
            city.name, self.resolved.instant.isoformat(), self.resolved.is_today,
        )
        if self.on_schedule:
            self.on_schedule(self.schedule, self.resolved)

    def _refresh_countdown(self, now: datetime.datetime) -> None:
        self.countdown = tick(self.resolved.instant if self.resolved else None, now)
        if self.on_countdown:
            self.on_countdown(self.countdown)

    def _refresh_phase(self, now: datetime.datetime) -> None:
        phase = classify(self.schedule, now)
        if phase is not self.phase:
            logger.debug("Phase changed %s -> %s", self.phase.value, phase.value)
        self.phase = phase
        if self.on_phase:
            self.on_phase(phase)

    # ── timer callbacks ───────────────────────────────────────────────────
    def _on_countdown_timer(self) -> None:
        self._refresh_countdown(self._clock())
        self._arm("countdown", config.COUNTDOWN_INTERVAL_MS, self._on_countdown_timer)

    def _on_phase_timer(self) -> None:
        self._refresh_phase(self._clock())
        self._arm("phase", config.PHASE_INTERVAL_MS, self._on_phase_timer)

    def _on_midnight_timer(self) -> None:
        logger.info("Local midnight in %s, recomputing schedule", self.city.name)
        try:
            self._restart()
        except PrayerTimeError as exc:
            self._recover(exc)

    def _on_reminder_timer(self, minutes: int) -> None:
        if self.on_reminder:
            self.on_reminder(self.city, minutes, self.resolved)

    def _on_iftar_timer(self) -> None:
        arrived = self.resolved
        now = self._clock()
        if now < arrived.instant:
            self._arm("iftar", _ms_until(arrived.instant, now) + 1, self._on_iftar_timer)
            return
        if self.on_iftar:
            self.on_iftar(self.city, arrived)
        # today's maghrib has passed; move on to tomorrow's
        try:
            self._refresh_schedule(now)
        except PrayerTimeError as exc:
            self._recover(exc)
            return
        self._refresh_countdown(now)
        self._refresh_phase(now)
        self._arm_iftar_alerts(now)
