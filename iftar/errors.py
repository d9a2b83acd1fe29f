"""Exceptions raised by the prayer-time core."""


class PrayerTimeError(Exception):
    """Base class for prayer-time calculation errors."""


class InvalidCoordinates(PrayerTimeError, ValueError):
    """Latitude or longitude outside the valid range."""

    def __init__(self, lat, lng):
        self.lat = lat
        self.lng = lng
        super().__init__(
            f"Invalid coordinates lat={lat!r}, lng={lng!r}: "
            "latitude must be in [-90, 90] and longitude in [-180, 180]"
        )


class ScheduleInvariantViolation(PrayerTimeError):
    """The calculator returned prayer instants that are not strictly ordered."""
