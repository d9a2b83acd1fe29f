"""Tests for the prayer_times and calculator modules."""

import datetime
import unittest
from unittest.mock import MagicMock, patch

import pytz

from iftar.constants import POPULAR_CITIES
from iftar.errors import InvalidCoordinates, ScheduleInvariantViolation
from iftar.models import PRAYER_NAMES, CalculationMethod, City, Coordinates, TimePhase
from iftar.phase import classify
from iftar.prayer_times import (
    compute_schedule,
    format_time,
    format_time_with_seconds,
    local_date,
    next_local_midnight,
    resolve_next_iftar,
    seconds_until,
    today_schedule,
)

HOUSTON = Coordinates(29.7604, -95.3698)
CHICAGO_TZ = pytz.timezone("America/Chicago")
DAY = datetime.date(2026, 2, 20)
ONE_MS = datetime.timedelta(milliseconds=1)


class TestComputeSchedule(unittest.TestCase):
    def test_ordering_for_popular_cities_and_methods(self):
        for day in (DAY, datetime.date(2026, 3, 20)):
            for city in POPULAR_CITIES:
                for method in CalculationMethod:
                    with self.subTest(city=city.name, method=method.value, day=day):
                        s = compute_schedule(city.coordinates, day, method, city.tz)
                        instants = [getattr(s, name) for name in PRAYER_NAMES]
                        self.assertEqual(instants, sorted(set(instants)))

    def test_scoped_to_requested_date_and_timezone(self):
        s = compute_schedule(HOUSTON, DAY, CalculationMethod.ISNA, CHICAGO_TZ)
        self.assertEqual(s.date, DAY)
        self.assertEqual(s.timezone, "America/Chicago")
        self.assertEqual(s.maghrib.astimezone(CHICAGO_TZ).date(), DAY)
        self.assertEqual(s.dhuhr.astimezone(CHICAGO_TZ).hour, 12)

    def test_accepts_timezone_name(self):
        by_name = compute_schedule(HOUSTON, DAY, CalculationMethod.ISNA, "America/Chicago")
        by_tz = compute_schedule(HOUSTON, DAY, CalculationMethod.ISNA, CHICAGO_TZ)
        self.assertEqual(by_name, by_tz)

    def test_is_idempotent(self):
        first = compute_schedule(HOUSTON, DAY, CalculationMethod.KARACHI, CHICAGO_TZ)
        second = compute_schedule(HOUSTON, DAY, CalculationMethod.KARACHI, CHICAGO_TZ)
        self.assertEqual(first, second)

    def test_method_changes_fajr_but_not_dhuhr(self):
        isna = compute_schedule(HOUSTON, DAY, CalculationMethod.ISNA, CHICAGO_TZ)
        uaq = compute_schedule(HOUSTON, DAY, CalculationMethod.UMM_AL_QURA, CHICAGO_TZ)
        self.assertLessEqual(abs(isna.dhuhr - uaq.dhuhr), datetime.timedelta(minutes=2))
        # 18.5 degrees below the horizon is reached before 15 degrees
        self.assertLess(uaq.fajr, isna.fajr)
        self.assertNotEqual(uaq.isha, isna.isha)

    def test_longitude_shifts_solar_noon(self):
        # same timezone, 5 degrees further west: noon roughly 20 minutes later
        west = Coordinates(HOUSTON.lat, HOUSTON.lng - 5)
        east = compute_schedule(HOUSTON, DAY, CalculationMethod.ISNA, CHICAGO_TZ)
        later = compute_schedule(west, DAY, CalculationMethod.ISNA, CHICAGO_TZ)
        shift = later.dhuhr - east.dhuhr
        self.assertGreater(shift, datetime.timedelta(minutes=18))
        self.assertLess(shift, datetime.timedelta(minutes=22))

    def test_invalid_coordinates_propagate(self):
        with self.assertRaises(InvalidCoordinates):
            compute_schedule(Coordinates(91, 0), DAY)

    def test_invalid_coordinate_tuple_propagates(self):
        with self.assertRaises(InvalidCoordinates):
            compute_schedule((0.0, 200.0), DAY)

    @patch("iftar.calculator.PrayerTimes")
    def test_out_of_order_calculator_output_is_fatal(self, mock_times):
        base = pytz.utc.localize(datetime.datetime(2026, 2, 20, 0, 0))
        result = MagicMock()
        result.fajr = base + datetime.timedelta(hours=11)
        result.sunrise = base + datetime.timedelta(hours=12)
        result.dhuhr = base + datetime.timedelta(hours=18)
        result.asr = base + datetime.timedelta(hours=21)
        result.maghrib = base + datetime.timedelta(hours=20)
        result.isha = base + datetime.timedelta(hours=25)
        mock_times.return_value = result

        with self.assertRaises(ScheduleInvariantViolation):
            compute_schedule(HOUSTON, DAY, CalculationMethod.ISNA, CHICAGO_TZ)

    def test_polar_day_is_a_schedule_error(self):
        # midnight sun in Tromsø: no sunset, so no maghrib
        tromso = Coordinates(69.65, 18.96)
        with self.assertRaises(ScheduleInvariantViolation) as ctx:
            compute_schedule(
                tromso, datetime.date(2026, 6, 21), CalculationMethod.ISNA, "Europe/Oslo"
            )
        self.assertIsInstance(ctx.exception.__cause__, RuntimeError)

    @patch("iftar.calculator.PrayerTimes")
    def test_calculator_runtime_error_is_translated(self, mock_times):
        mock_times.side_effect = RuntimeError("no sunrise")
        with self.assertRaises(ScheduleInvariantViolation):
            compute_schedule(HOUSTON, DAY, CalculationMethod.ISNA, CHICAGO_TZ)


class TestDatelineZones(unittest.TestCase):
    # zone offset east of UTC, longitude west of Greenwich
    APIA = City("Apia", "Samoa", -13.8333, -171.7667, "Pacific/Apia")
    KIRITIMATI = City("Kiritimati", "Kiribati", 1.8721, -157.4278, "Pacific/Kiritimati")

    def test_schedule_stays_on_requested_civil_date(self):
        for city in (self.APIA, self.KIRITIMATI):
            with self.subTest(city=city.name):
                s = compute_schedule(city.coordinates, DAY, CalculationMethod.ISNA, city.tz)
                for name, instant in s.items():
                    self.assertEqual(instant.astimezone(city.tz).date(), DAY, name)
                self.assertIn(s.dhuhr.astimezone(city.tz).hour, (11, 12, 13))

    def test_afternoon_resolves_todays_iftar(self):
        for city in (self.APIA, self.KIRITIMATI):
            with self.subTest(city=city.name):
                now = city.tz.localize(datetime.datetime(2026, 2, 20, 14, 0))
                s = today_schedule(city, now)
                self.assertEqual(s.date, DAY)
                self.assertIs(classify(s, now), TimePhase.AFTERNOON)
                resolved = resolve_next_iftar(
                    city.coordinates, CalculationMethod.ISNA, now, city.tz
                )
                self.assertTrue(resolved.is_today)
                self.assertEqual(resolved.instant, s.maghrib)
                self.assertEqual(resolved.instant.astimezone(city.tz).date(), DAY)

    def test_consecutive_days_are_a_day_apart(self):
        first = compute_schedule(self.APIA.coordinates, DAY, CalculationMethod.ISNA, self.APIA.tz)
        second = compute_schedule(
            self.APIA.coordinates, DAY + datetime.timedelta(days=1),
            CalculationMethod.ISNA, self.APIA.tz,
        )
        gap = second.maghrib - first.maghrib
        self.assertLess(abs(gap - datetime.timedelta(days=1)), datetime.timedelta(minutes=2))


class TestLocalCalendar(unittest.TestCase):
    def test_local_date_follows_location_not_utc(self):
        now = pytz.utc.localize(datetime.datetime(2026, 2, 20, 20, 0))
        self.assertEqual(local_date(now, "Asia/Jakarta"), datetime.date(2026, 2, 21))
        self.assertEqual(local_date(now, "America/Los_Angeles"), datetime.date(2026, 2, 20))

    def test_today_schedule_uses_city_date(self):
        jakarta = next(c for c in POPULAR_CITIES if c.name == "Jakarta")
        now = pytz.utc.localize(datetime.datetime(2026, 2, 20, 20, 0))
        self.assertEqual(today_schedule(jakarta, now).date, datetime.date(2026, 2, 21))

    def test_next_local_midnight(self):
        now = CHICAGO_TZ.localize(datetime.datetime(2026, 2, 20, 23, 59, 30))
        self.assertEqual(
            next_local_midnight(now, CHICAGO_TZ),
            CHICAGO_TZ.localize(datetime.datetime(2026, 2, 21, 0, 0)),
        )

    def test_next_local_midnight_across_dst_change(self):
        tz = pytz.timezone("America/New_York")
        now = pytz.utc.localize(datetime.datetime(2026, 3, 8, 5, 30))
        self.assertEqual(
            next_local_midnight(now, tz).astimezone(pytz.utc),
            pytz.utc.localize(datetime.datetime(2026, 3, 9, 4, 0)),
        )


class TestResolveNextIftar(unittest.TestCase):
    def setUp(self):
        self.today = compute_schedule(HOUSTON, DAY, CalculationMethod.ISNA, CHICAGO_TZ)
        self.tomorrow = compute_schedule(
            HOUSTON, DAY + datetime.timedelta(days=1), CalculationMethod.ISNA, CHICAGO_TZ
        )

    def resolve(self, now):
        return resolve_next_iftar(HOUSTON, CalculationMethod.ISNA, now, CHICAGO_TZ)

    def test_before_maghrib_is_today(self):
        resolved = self.resolve(CHICAGO_TZ.localize(datetime.datetime(2026, 2, 20, 12, 0)))
        self.assertTrue(resolved.is_today)
        self.assertEqual(resolved.instant, self.today.maghrib)

    def test_one_millisecond_before_maghrib_is_today(self):
        resolved = self.resolve(self.today.maghrib - ONE_MS)
        self.assertTrue(resolved.is_today)
        self.assertEqual(resolved.instant, self.today.maghrib)

    def test_exactly_at_maghrib_rolls_over(self):
        resolved = self.resolve(self.today.maghrib)
        self.assertFalse(resolved.is_today)
        self.assertEqual(resolved.instant, self.tomorrow.maghrib)

    def test_after_maghrib_rolls_over(self):
        resolved = self.resolve(self.today.maghrib + ONE_MS)
        self.assertFalse(resolved.is_today)
        self.assertEqual(resolved.instant, self.tomorrow.maghrib)

    def test_just_after_local_midnight_is_today_again(self):
        now = CHICAGO_TZ.localize(datetime.datetime(2026, 2, 21, 0, 0, 1))
        resolved = self.resolve(now)
        self.assertTrue(resolved.is_today)
        self.assertEqual(resolved.instant, self.tomorrow.maghrib)

    def test_maghrib_after_utc_midnight(self):
        # Los Angeles maghrib falls on the next UTC day
        la_tz = pytz.timezone("America/Los_Angeles")
        la = Coordinates(34.0522, -118.2437)
        now = la_tz.localize(datetime.datetime(2026, 2, 20, 17, 0))
        resolved = resolve_next_iftar(la, CalculationMethod.ISNA, now, la_tz)
        self.assertTrue(resolved.is_today)
        self.assertEqual(resolved.instant.astimezone(la_tz).date(), DAY)
        self.assertEqual(resolved.instant.astimezone(pytz.utc).date(), datetime.date(2026, 2, 21))

    def test_invalid_coordinates_propagate(self):
        with self.assertRaises(InvalidCoordinates):
            resolve_next_iftar((95.0, 0.0), CalculationMethod.ISNA, self.today.dhuhr)


class TestFormatting(unittest.TestCase):
    def test_format_time_in_location_timezone(self):
        instant = pytz.utc.localize(datetime.datetime(2026, 2, 21, 0, 20, 5))
        self.assertEqual(format_time(instant, CHICAGO_TZ), "6:20 PM")
        self.assertEqual(format_time(instant, "Asia/Dubai"), "4:20 AM")

    def test_format_time_with_seconds(self):
        instant = pytz.utc.localize(datetime.datetime(2026, 2, 21, 0, 20, 5))
        self.assertEqual(format_time_with_seconds(instant, CHICAGO_TZ), "6:20:05 PM")

    def test_seconds_until(self):
        now = pytz.utc.localize(datetime.datetime(2026, 2, 20, 10, 0))
        self.assertEqual(seconds_until(now + datetime.timedelta(seconds=300), now), 300)
        self.assertLess(seconds_until(now - datetime.timedelta(seconds=60), now), 0)


if __name__ == "__main__":
    unittest.main()
