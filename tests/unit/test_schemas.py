"""Tests for the JSON report schema."""

import json
from pathlib import Path
from tempfile import TemporaryDirectory

from rdapval.schemas import SCHEMA_FILE_NAME, generate_report_schema, save_report_schema, validate_report
from rdapval.validation import RDAPValidator, ResultCollector


def sample_report():
    collector = ResultCollector()
    RDAPValidator(sink=collector).validate(
        {"rdapConformance": ["rdap_level_0"], "objectClassName": "domain", "status": ["sleeping"]},
        "domain",
        "vanilla",
    )
    return collector.to_dict()


class TestReportSchema:
    """Test schema generation and report validation."""

    def test_schema_shape(self):
        schema = generate_report_schema()

        assert schema["$schema"] == "https://json-schema.org/draft/2020-12/schema"
        assert set(schema["required"]) == {"status", "exit_code", "error_count", "counters", "results"}

    def test_collector_report_is_valid(self):
        report = sample_report()

        assert report["status"] == "fail"
        assert report["exit_code"] == 1
        assert validate_report(report) == []

    def test_report_round_trips_through_json(self):
        report = json.loads(json.dumps(sample_report()))
        assert validate_report(report) == []

    def test_invalid_report(self):
        report = sample_report()
        report["status"] = "maybe"
        del report["counters"]

        errors = validate_report(report)
        assert len(errors) == 2
        assert any("counters" in error for error in errors)
        assert any(error.startswith("$.status") for error in errors)

    def test_unknown_result_member(self):
        report = sample_report()
        report["results"][0]["severity"] = "high"

        assert validate_report(report)

    def test_save_report_schema(self):
        with TemporaryDirectory() as temp_dir:
            out_dir = Path(temp_dir) / "schemas"
            schema_file = save_report_schema(out_dir)

            assert schema_file == out_dir / SCHEMA_FILE_NAME
            assert json.loads(schema_file.read_text(encoding="utf-8")) == generate_report_schema()
