"""Tests for RFC3339 parsing and per-record validation."""

from datetime import datetime, timezone

import pytest

from aggregation_api.core.validation import parse_records, parse_timestamp
from common.errors import TimestampParseError


# =============================================================================
# parse_timestamp
# =============================================================================

class TestParseTimestamp:

    def test_utc_designator(self):
        ts = parse_timestamp("2024-01-01T05:30:00Z")
        assert ts == datetime(2024, 1, 1, 5, 30, tzinfo=timezone.utc)
        assert ts.tzinfo == timezone.utc

    def test_offset_is_converted_to_utc(self):
        ts = parse_timestamp("2024-01-01T07:00:00+02:00")
        assert ts == datetime(2024, 1, 1, 5, 0, tzinfo=timezone.utc)
        assert ts.hour == 5

    def test_negative_offset_crosses_date(self):
        ts = parse_timestamp("2024-01-01T23:30:00-02:00")
        assert ts.date().isoformat() == "2024-01-02"
        assert ts.hour == 1

    def test_fraction_truncated_to_microseconds(self):
        ts = parse_timestamp("2024-01-01T05:00:00.123456789Z")
        assert ts.microsecond == 123456

    def test_lowercase_separators_accepted(self):
        assert parse_timestamp("2024-01-01t05:00:00z").hour == 5

    @pytest.mark.parametrize(
        "raw",
        [
            "2024-01-01T05:00:00",        # no offset
            "2024-01-01",                 # date only
            "2024-01-01 05:00:00Z",       # space separator
            "2024-13-01T00:00:00Z",       # month out of range
            "2024-01-01T05:00:00+25:00",  # offset out of range
            "not-a-timestamp",
            "",
        ],
    )
    def test_rejects_other_profiles(self, raw):
        with pytest.raises(TimestampParseError):
            parse_timestamp(raw)

    @pytest.mark.parametrize("raw", [None, 1704085200, 12.5])
    def test_rejects_non_strings(self, raw):
        with pytest.raises(TimestampParseError):
            parse_timestamp(raw)

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_timestamp("bad")


# =============================================================================
# parse_records
# =============================================================================

class TestParseRecords:

    def test_keeps_input_order(self, sample_records):
        outcome = parse_records(sample_records)
        assert [r.value for r in outcome.readings] == [10.0, 5.0, 2.0]
        assert outcome.rejected == []

    def test_bad_timestamp_skipped_not_fatal(self, sample_records):
        records = [sample_records[0], {"timestamp": "yesterday", "kWh_value": 99.0}, sample_records[1]]
        outcome = parse_records(records)

        assert outcome.accepted_count == 2
        assert outcome.rejected_count == 1
        assert outcome.rejected[0].index == 1
        assert "yesterday" in outcome.rejected[0].reason

    def test_bad_value_skipped(self):
        records = [
            {"timestamp": "2024-01-01T05:00:00Z", "kWh_value": "ten"},
            {"timestamp": "2024-01-01T05:00:00Z", "kWh_value": True},
            {"timestamp": "2024-01-01T05:00:00Z"},
            "not-an-object",
        ]
        outcome = parse_records(records)
        assert outcome.accepted_count == 0
        assert outcome.rejected_count == 4

    def test_value_field_fallback(self):
        outcome = parse_records([{"timestamp": "2024-01-01T05:00:00Z", "value": 3}])
        assert outcome.readings[0].value == 3.0
