"""Value types shared by the schedule, countdown and phase modules."""

import datetime
from dataclasses import dataclass
from enum import Enum

import pytz

from iftar.errors import InvalidCoordinates, ScheduleInvariantViolation

PRAYER_NAMES = ("fajr", "sunrise", "dhuhr", "asr", "maghrib", "isha")


@dataclass(frozen=True)
class Coordinates:
    """A geographic point in decimal degrees."""

    lat: float
    lng: float

    def __post_init__(self):
        try:
            lat = float(self.lat)
            lng = float(self.lng)
        except (TypeError, ValueError):
            raise InvalidCoordinates(self.lat, self.lng) from None
        # NaN fails both range checks
        if not (-90.0 <= lat <= 90.0) or not (-180.0 <= lng <= 180.0):
            raise InvalidCoordinates(self.lat, self.lng)
        object.__setattr__(self, "lat", lat)
        object.__setattr__(self, "lng", lng)

    def as_tuple(self) -> tuple:
        return (self.lat, self.lng)


class CalculationMethod(Enum):
    """Named conventions fixing the dawn/dusk sun angles."""

    ISNA = "ISNA"
    MUSLIM_WORLD_LEAGUE = "MuslimWorldLeague"
    EGYPTIAN = "Egyptian"
    UMM_AL_QURA = "UmmAlQura"
    KARACHI = "Karachi"

    @classmethod
    def parse(cls, value) -> "CalculationMethod":
        """Accept a method or its stored string value ("ISNA", "UmmAlQura", ...)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown calculation method: {value!r}") from None


class TimePhase(Enum):
    """Time-of-day phases used to pick a theme."""

    LATE_NIGHT = "lateNight"
    MORNING = "morning"
    AFTERNOON = "afternoon"
    PRE_IFTAR = "preIftar"
    NEAR_IFTAR = "nearIftar"
    AFTER_IFTAR = "afterIftar"


@dataclass(frozen=True)
class PrayerSchedule:
    """
    The six daily prayer instants for one civil date at one location.

    All instants are timezone-aware and must be strictly increasing in the
    order fajr, sunrise, dhuhr, asr, maghrib, isha. Construction fails with
    ScheduleInvariantViolation otherwise.
    """

    date: datetime.date
    timezone: str
    fajr: datetime.datetime
    sunrise: datetime.datetime
    dhuhr: datetime.datetime
    asr: datetime.datetime
    maghrib: datetime.datetime
    isha: datetime.datetime

    def __post_init__(self):
        instants = [getattr(self, name) for name in PRAYER_NAMES]
        for name, instant in zip(PRAYER_NAMES, instants):
            if instant is None or instant.tzinfo is None or instant.utcoffset() is None:
                raise ScheduleInvariantViolation(
                    f"{name} for {self.date} is not a timezone-aware instant: {instant!r}"
                )
        for i in range(1, len(instants)):
            prev, cur = instants[i - 1], instants[i]
            if not prev < cur:
                raise ScheduleInvariantViolation(
                    f"{PRAYER_NAMES[i - 1]} ({prev.isoformat()}) is not before "
                    f"{PRAYER_NAMES[i]} ({cur.isoformat()}) on {self.date}"
                )

    @property
    def iftar_time(self) -> datetime.datetime:
        return self.maghrib

    @property
    def suhoor_end(self) -> datetime.datetime:
        return self.fajr

    @property
    def tz(self):
        return pytz.timezone(self.timezone)

    def items(self):
        """Yield (name, instant) pairs in canonical order."""
        for name in PRAYER_NAMES:
            yield name, getattr(self, name)

    def noon(self) -> datetime.datetime:
        """12:00 civil time on this schedule's date."""
        return self.tz.localize(datetime.datetime.combine(self.date, datetime.time(12)))

    def midnight(self) -> datetime.datetime:
        """Start of the civil day after this schedule's date."""
        next_day = self.date + datetime.timedelta(days=1)
        return self.tz.localize(datetime.datetime.combine(next_day, datetime.time(0)))


@dataclass(frozen=True)
class ResolvedIftar:
    """The next iftar a user should see: today's if not yet passed, else tomorrow's."""

    instant: datetime.datetime
    is_today: bool


@dataclass(frozen=True)
class CountdownState:
    hours: int
    minutes: int
    seconds: int
    total_remaining_ms: int
    is_past: bool


@dataclass(frozen=True)
class City:
    """A named location with the timezone used for its civil calendar."""

    name: str
    country: str
    lat: float
    lng: float
    timezone: str

    def __post_init__(self):
        coords = Coordinates(self.lat, self.lng)
        object.__setattr__(self, "lat", coords.lat)
        object.__setattr__(self, "lng", coords.lng)
        # raises pytz.UnknownTimeZoneError for names outside the tz database
        pytz.timezone(self.timezone)

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(self.lat, self.lng)

    @property
    def tz(self):
        return pytz.timezone(self.timezone)

    @classmethod
    def from_dict(cls, data: dict) -> "City":
        return cls(
            name=str(data["name"]),
            country=str(data.get("country", "")),
            lat=float(data["lat"]),
            lng=float(data["lng"]),
            timezone=str(data["timezone"]),
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "country": self.country,
            "lat": self.lat,
            "lng": self.lng,
            "timezone": self.timezone,
        }
