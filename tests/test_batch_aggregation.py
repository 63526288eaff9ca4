"""Tests for batch bucketing by day and hour of day."""

import random
from datetime import date

from aggregation_api.aggregation import aggregate_readings
from aggregation_api.core.domain import Reading
from aggregation_api.core.validation import parse_records

from conftest import utc


def _readings(records):
    return parse_records(records).readings


class TestAggregateReadings:

    def test_concrete_scenario(self, sample_records):
        result = aggregate_readings(_readings(sample_records))
        day = date(2024, 1, 1)

        assert result.hourly == {day: {5: 15.0, 23: 2.0}}
        assert result.daily == {day: 17.0}

    def test_rows_are_labelled_and_sorted(self, sample_records):
        result = aggregate_readings(_readings(list(reversed(sample_records))))

        hourly = result.hourly_rows()
        assert [(r.date_label, r.hour_label, r.value) for r in hourly] == [
            ("01/01", "05:00", 15.0),
            ("01/01", "23:00", 2.0),
        ]
        daily = result.daily_rows()
        assert [(r.date_label, r.value) for r in daily] == [("01/01", 17.0)]

    def test_sorted_chronologically_across_months(self):
        readings = [
            Reading(utc(2024, 2, 1, 3), 1.0),
            Reading(utc(2024, 1, 15, 7), 2.0),
            Reading(utc(2024, 1, 15, 1), 4.0),
        ]
        result = aggregate_readings(readings)

        assert [r.date_label for r in result.daily_rows()] == ["15/01", "01/02"]
        assert [(r.date_label, r.hour) for r in result.hourly_rows()] == [
            ("15/01", 1),
            ("15/01", 7),
            ("01/02", 3),
        ]

    def test_independent_of_insertion_order(self):
        # Integer-valued floats so every summation order is exact.
        readings = [Reading(utc(2024, 3, d, h, m), float(d + h + m)) for d in (1, 2) for h in range(24) for m in (0, 20, 40)]
        expected = aggregate_readings(readings)

        shuffled = readings[:]
        random.Random(7).shuffle(shuffled)
        result = aggregate_readings(shuffled)

        assert result.hourly == expected.hourly
        assert result.daily == expected.daily

    def test_hourly_and_daily_sums_agree(self):
        readings = [Reading(utc(2024, 3, 1, h), 1.5) for h in range(24)]
        result = aggregate_readings(readings)
        day = date(2024, 3, 1)

        assert sum(result.hourly[day].values()) == result.daily[day] == 36.0

    def test_idempotent(self, sample_records):
        readings = _readings(sample_records)
        first = aggregate_readings(readings)
        second = aggregate_readings(readings)

        assert [round(r.value, 2) for r in first.hourly_rows()] == [round(r.value, 2) for r in second.hourly_rows()]
        assert first.daily == second.daily

    def test_window_is_half_open(self):
        readings = [
            Reading(utc(2024, 1, 1, 5, 59, 59), 1.0),
            Reading(utc(2024, 1, 1, 6, 0, 0), 2.0),
            Reading(utc(2024, 1, 2, 0, 0, 0), 4.0),
        ]
        result = aggregate_readings(readings)

        assert result.hourly[date(2024, 1, 1)] == {5: 1.0, 6: 2.0}
        assert result.daily == {date(2024, 1, 1): 3.0, date(2024, 1, 2): 4.0}

    def test_malformed_record_excluded_everywhere(self, sample_records):
        records = sample_records + [{"timestamp": "2024/01/01 05:15", "kWh_value": 100.0}]
        result = aggregate_readings(_readings(records))

        assert result.daily == {date(2024, 1, 1): 17.0}
        assert result.hourly[date(2024, 1, 1)][5] == 15.0

    def test_partial_day_has_no_padding(self):
        result = aggregate_readings([Reading(utc(2024, 1, 1, 12), 3.0)])
        assert result.hourly == {date(2024, 1, 1): {12: 3.0}}

    def test_empty_input(self):
        result = aggregate_readings([])
        assert result.hourly == {}
        assert result.daily == {}
        assert result.hourly_rows() == []
