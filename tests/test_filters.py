"""Tests for date windows and record filters."""

import datetime
import unittest

from runbike.errors import ValidationError
from runbike.stats.filters import (
    DateRange,
    active_people,
    exclude_hidden,
    filter_by_range,
    filter_by_series,
    filter_by_timing,
    filter_by_type,
    quick_range,
    search_events,
    sort_events_desc,
    subtract_months,
)
from tests.helpers import make_attempt, make_event, make_person

TODAY = datetime.date(2024, 6, 1)


class TestDateWindows(unittest.TestCase):
    def test_one_week(self):
        self.assertEqual(
            quick_range("1W", TODAY), DateRange(datetime.date(2024, 5, 25), TODAY)
        )

    def test_calendar_months(self):
        self.assertEqual(quick_range("1M", TODAY).start, datetime.date(2024, 5, 1))
        self.assertEqual(quick_range("3M", TODAY).start, datetime.date(2024, 3, 1))

    def test_month_end_is_clamped(self):
        self.assertEqual(
            subtract_months(datetime.date(2024, 3, 31), 1), datetime.date(2024, 2, 29)
        )
        self.assertEqual(
            subtract_months(datetime.date(2024, 1, 15), 3), datetime.date(2023, 10, 15)
        )

    def test_unknown_code(self):
        with self.assertRaises(ValidationError):
            quick_range("1Y", TODAY)

    def test_custom_range_validates_order(self):
        with self.assertRaises(ValidationError):
            DateRange.custom(TODAY, datetime.date(2024, 1, 1))
        self.assertEqual(DateRange.custom(TODAY, TODAY), DateRange(TODAY, TODAY))

    def test_range_is_inclusive(self):
        attempts = [
            make_attempt(1, "2024-04-30", "a", 8.0),
            make_attempt(2, "2024-05-01", "a", 8.0),
            make_attempt(3, "2024-06-01", "a", 8.0),
            make_attempt(4, "2024-06-02", "a", 8.0),
        ]

        kept = filter_by_range(attempts, quick_range("1M", TODAY))

        self.assertEqual([a.id for a in kept], ["2", "3"])


class TestRecordFilters(unittest.TestCase):
    def test_filter_by_type(self):
        attempts = [
            make_attempt(1, "2024-05-01", "a", 8.0),
            make_attempt(2, "2024-05-01", "a", 8.0, type_name="100m"),
        ]
        self.assertEqual([a.id for a in filter_by_type(attempts, "100m")], ["2"])
        self.assertEqual(len(filter_by_type(attempts, None)), 2)

    def test_hidden_filters(self):
        people = [make_person("a"), make_person("h", hidden=True)]
        attempts = [
            make_attempt(1, "2024-05-01", "h", 8.0),
            make_attempt(2, "2024-05-01", "a", 8.0),
        ]
        self.assertEqual([p.id for p in active_people(people)], ["a"])
        self.assertEqual([a.id for a in exclude_hidden(attempts, people)], ["2"])


class TestEventFilters(unittest.TestCase):
    def setUp(self):
        self.events = [
            make_event(1, "2024-05-01", "Park Dash", series_name="Spring Cup"),
            make_event(2, "2024-07-01", "River Run", series_name="Summer League"),
            make_event(3, "2024-06-01", "Hill Climb", series_name="Spring Cup"),
        ]

    def test_search_matches_name_or_series(self):
        self.assertEqual([e.id for e in search_events(self.events, "river")], ["2"])
        kept = search_events(self.events, "SPRING")
        self.assertEqual([e.id for e in kept], ["1", "3"])
        self.assertEqual(len(search_events(self.events, "")), 3)

    def test_filter_by_series(self):
        kept = filter_by_series(self.events, "Summer League")
        self.assertEqual([e.id for e in kept], ["2"])

    def test_filter_by_timing(self):
        self.assertEqual(
            [e.id for e in filter_by_timing(self.events, "future", TODAY)], ["2", "3"]
        )
        past = filter_by_timing(self.events, "past", TODAY)
        self.assertEqual([e.id for e in past], ["1"])
        self.assertEqual(len(filter_by_timing(self.events, "all", TODAY)), 3)
        with self.assertRaises(ValidationError):
            filter_by_timing(self.events, "someday", TODAY)

    def test_sort_events_desc(self):
        self.assertEqual([e.id for e in sort_events_desc(self.events)], ["2", "3", "1"])


if __name__ == "__main__":
    unittest.main()
