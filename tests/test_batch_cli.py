"""Tests for the batch CLI: JSON in, two CSV files out."""

import json

import pytest

from jobs.batch import BatchConfig, main, run_once
from common.errors import InputError


@pytest.fixture
def input_file(tmp_path, sample_records):
    path = tmp_path / "data.json"
    path.write_text(json.dumps(sample_records))
    return path


def _run(input_path, output_dir, *extra):
    return main(["--input", str(input_path), "--output-dir", str(output_dir), *extra])


class TestBatchCli:

    def test_writes_both_csv_files(self, input_file, tmp_path):
        out = tmp_path / "output_data"
        assert _run(input_file, out) == 0

        assert (out / "hourly_data.csv").read_text() == (
            "Date,Hour,kWh Value\n"
            "01/01,05:00,15.00\n"
            "01/01,23:00,2.00\n"
        )
        assert (out / "daily_data.csv").read_text() == (
            "Date,kWh Value\n"
            "01/01,17.00\n"
        )

    def test_rerun_is_identical(self, input_file, tmp_path):
        out = tmp_path / "out"
        _run(input_file, out)
        first = (out / "hourly_data.csv").read_text(), (out / "daily_data.csv").read_text()
        _run(input_file, out)
        second = (out / "hourly_data.csv").read_text(), (out / "daily_data.csv").read_text()
        assert first == second

    def test_bad_timestamp_does_not_abort(self, tmp_path, sample_records):
        path = tmp_path / "data.json"
        path.write_text(json.dumps(sample_records + [{"timestamp": "05:00 yesterday", "kWh_value": 50.0}]))
        out = tmp_path / "out"

        assert _run(path, out) == 0
        assert (out / "daily_data.csv").read_text().splitlines()[1] == "01/01,17.00"

    def test_rounds_to_two_decimals(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps([
            {"timestamp": "2024-01-01T05:00:00Z", "kWh_value": 0.125},
            {"timestamp": "2024-01-01T05:10:00Z", "kWh_value": 1.0 / 3.0},
        ]))
        out = tmp_path / "out"

        assert _run(path, out) == 0
        assert (out / "hourly_data.csv").read_text().splitlines()[1] == "01/01,05:00,0.46"

    def test_empty_document_writes_headers_only(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("[]")
        out = tmp_path / "out"

        assert _run(path, out) == 0
        assert (out / "hourly_data.csv").read_text() == "Date,Hour,kWh Value\n"
        assert (out / "daily_data.csv").read_text() == "Date,kWh Value\n"

    def test_print_tables(self, input_file, tmp_path, capsys):
        assert _run(input_file, tmp_path / "out", "--print") == 0
        stdout = capsys.readouterr().out
        assert "Hourly Data:" in stdout
        assert "Daily Data:" in stdout
        assert "15.00" in stdout
        assert "Data saved successfully." in stdout

    def test_missing_input_aborts(self, tmp_path):
        out = tmp_path / "out"
        assert _run(tmp_path / "missing.json", out) == 1
        assert not (out / "hourly_data.csv").exists()

    def test_invalid_json_aborts(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("{not json")
        assert _run(path, tmp_path / "out") == 1

    def test_non_array_document_aborts(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({"timestamp": "2024-01-01T05:00:00Z", "kWh_value": 1.0}))
        with pytest.raises(InputError):
            run_once(BatchConfig(input_path=path, output_dir=tmp_path / "out"))


class TestRunOnceSummary:

    def test_summary_counts(self, tmp_path, sample_records):
        path = tmp_path / "data.json"
        path.write_text(json.dumps(sample_records + [{"timestamp": "bad", "kWh_value": 1.0}]))

        summary = run_once(BatchConfig(input_path=path, output_dir=tmp_path / "out"))

        assert summary.total_records == 4
        assert summary.accepted == 3
        assert summary.rejected == 1
        assert summary.hourly_rows == 2
        assert summary.daily_rows == 1
