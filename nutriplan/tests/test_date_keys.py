import unittest
from datetime import date, datetime, timedelta, timezone

from nutriplan.domain.errors import ValidationError
from nutriplan.utilities.date_keys import (
    date_to_key,
    is_past,
    key_to_date,
    month_keys,
    normalize_key,
    range_keys,
    shift_month,
    today_key,
)


class TestDateKeys(unittest.TestCase):

    def test_local_midnight_keeps_its_day(self):
        self.assertEqual(date_to_key(datetime(2024, 3, 15, 0, 0)), "2024-03-15")
        # far-east and far-west offsets must not shift the day
        east = datetime(2024, 3, 15, 0, 0, tzinfo=timezone(timedelta(hours=14)))
        west = datetime(2024, 3, 15, 0, 0, tzinfo=timezone(timedelta(hours=-12)))
        self.assertEqual(date_to_key(east), "2024-03-15")
        self.assertEqual(date_to_key(west), "2024-03-15")

    def test_key_is_zero_padded(self):
        self.assertEqual(date_to_key(date(2024, 1, 5)), "2024-01-05")

    def test_key_to_date(self):
        self.assertEqual(key_to_date("2024-02-29"), date(2024, 2, 29))

    def test_invalid_keys_rejected(self):
        for bad in ("2024-2-29", "2023-02-29", "15/03/2024", "", None):
            with self.assertRaises(ValidationError):
                key_to_date(bad)

    def test_normalize_accepts_dates_and_keys(self):
        self.assertEqual(normalize_key(date(2024, 6, 1)), "2024-06-01")
        self.assertEqual(normalize_key("2024-06-01"), "2024-06-01")

    def test_keys_sort_chronologically(self):
        keys = ["2024-10-01", "2024-02-15", "2023-12-31"]
        self.assertEqual(sorted(keys), ["2023-12-31", "2024-02-15", "2024-10-01"])

    def test_past_is_relative_to_today(self):
        today = date(2024, 6, 10)
        self.assertEqual(today_key(today), "2024-06-10")
        self.assertTrue(is_past("2024-06-09", today))
        self.assertFalse(is_past("2024-06-10", today))
        self.assertFalse(is_past("2024-06-11", today))

    def test_month_keys_april_has_thirty_days(self):
        keys = month_keys(2024, 4)
        self.assertEqual(len(keys), 30)
        self.assertEqual(keys[0], "2024-04-01")
        self.assertEqual(keys[-1], "2024-04-30")

    def test_month_keys_leap_february(self):
        self.assertEqual(len(month_keys(2024, 2)), 29)
        self.assertEqual(len(month_keys(2023, 2)), 28)

    def test_range_keys_inclusive(self):
        self.assertEqual(range_keys("2024-06-29", "2024-07-02"),
                         ["2024-06-29", "2024-06-30", "2024-07-01", "2024-07-02"])
        self.assertEqual(range_keys("2024-06-05", "2024-06-05"), ["2024-06-05"])

    def test_range_start_after_end_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            range_keys("2024-06-10", "2024-06-01")
        self.assertEqual(ctx.exception.details["field"], "start")

    def test_shift_month_wraps_years(self):
        self.assertEqual(shift_month(2024, 12, 1), (2025, 1))
        self.assertEqual(shift_month(2024, 1, -1), (2023, 12))
        self.assertEqual(shift_month(2024, 6, 0), (2024, 6))
        self.assertEqual(shift_month(2024, 6, -18), (2022, 12))


if __name__ == '__main__':
    unittest.main()
