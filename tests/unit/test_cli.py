"""Unit tests for the rdapval CLI."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from rdapval import __version__
from rdapval.cli import app
from rdapval.fetch import FetchedResponse, FetchError

URL = "https://rdap.example/domain/example.com"
DOMAIN = {
    "rdapConformance": ["rdap_level_0"],
    "objectClassName": "domain",
    "ldhName": "example.com",
}


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def response_file(tmp_path):
    path = tmp_path / "response.json"
    path.write_text(json.dumps(DOMAIN), encoding="utf-8")
    return path


def fetched(document=DOMAIN, status_code=200):
    return FetchedResponse(URL, status_code, {"content-type": "application/rdap+json"}, json.dumps(document))


class TestGeneralCommands:
    """Test version and listing commands."""

    def test_version(self, runner):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"rdapval version {__version__}" in result.stdout

    def test_types(self, runner):
        result = runner.invoke(app, ["types"])

        assert result.exit_code == 0
        assert "domain-search" in result.stdout
        assert "gtld-registrar" in result.stdout


class TestCheckCommand:
    """Test validating saved response bodies."""

    def test_valid_file(self, runner, response_file):
        result = runner.invoke(app, ["check", str(response_file), "--format", "json"])

        assert result.exit_code == 0
        report = json.loads(result.stdout)
        assert report["status"] == "pass"
        assert report["error_count"] == 0

    def test_failures_set_exit_code(self, runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({**DOMAIN, "status": ["sleeping"]}), encoding="utf-8")

        result = runner.invoke(app, ["check", str(path), "-f", "json", "--errors-only"])

        assert result.exit_code == 1
        report = json.loads(result.stdout)
        assert report["error_count"] == 1
        assert all(r["status"] != "pass" for r in report["results"])
        assert any(r["path"] == "$.status[0]" for r in report["results"])

    def test_invalid_json_body(self, runner, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("<html></html>", encoding="utf-8")

        result = runner.invoke(app, ["check", str(path), "-f", "json"])

        assert result.exit_code == 1
        assert "Response body MUST be valid JSON" in result.stdout

    def test_status_enables_protocol_checks(self, runner, response_file):
        result = runner.invoke(app, [
            "check", str(response_file), "-f", "json",
            "--status", "200", "--header", "Content-Type: text/html",
        ])

        assert result.exit_code == 1
        assert "Media type 'text/html'" in result.stdout

    def test_header_without_status_warns(self, runner, response_file):
        result = runner.invoke(app, ["check", str(response_file), "-H", "Content-Type: text/html"])

        assert result.exit_code == 0
        assert "--header is ignored without --status" in result.stdout

    def test_malformed_header(self, runner, response_file):
        result = runner.invoke(app, ["check", str(response_file), "--status", "200", "-H", "no-colon"])

        assert result.exit_code == 1
        assert "Invalid header" in result.stdout

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(app, ["check", str(tmp_path / "missing.json")])

        assert result.exit_code == 1
        assert "File not found" in result.stdout

    @pytest.mark.parametrize("args,message", [
        (["--type", "domian"], "Invalid response type 'domian'"),
        (["--server-type", "cctld"], "Invalid server type 'cctld'"),
        (["--format", "xml"], "Invalid format 'xml'"),
    ])
    def test_invalid_choices(self, runner, response_file, args, message):
        result = runner.invoke(app, ["check", str(response_file), *args])

        assert result.exit_code == 1
        assert message in result.stdout

    def test_markdown_output(self, runner, response_file):
        result = runner.invoke(app, ["check", str(response_file), "-f", "markdown"])

        assert result.exit_code == 0
        assert result.stdout.startswith("# RDAP Validation Report")
        assert "**Status:** pass" in result.stdout

    def test_table_output(self, runner, response_file):
        result = runner.invoke(app, ["check", str(response_file)])

        assert result.exit_code == 0
        assert "Validation Status: PASS" in result.stdout
        assert "Errors: 0" in result.stdout

    def test_config_file(self, runner, response_file, tmp_path):
        config_file = tmp_path / "rdapval.json"
        config_file.write_text(json.dumps({
            "validation": {"defaultServerType": "gtld-registry"},
            "output": {"format": "json"},
        }))

        result = runner.invoke(app, ["check", str(response_file), "--config", str(config_file)])

        # The gTLD registry profile requires a handle, entities and more
        assert result.exit_code == 1
        report = json.loads(result.stdout)
        assert any("gTLD registry profile" in r["message"] for r in report["results"])

    def test_invalid_config_file(self, runner, response_file, tmp_path):
        config_file = tmp_path / "rdapval.json"
        config_file.write_text(json.dumps({"fetch": {"timeout": 0}}))

        result = runner.invoke(app, ["check", str(response_file), "--config", str(config_file)])

        assert result.exit_code == 1
        assert "Error:" in result.stdout


class TestValidateCommand:
    """Test fetching and validating a URL."""

    def test_validate_url(self, runner):
        with patch("rdapval.validation.framework.fetch_url", return_value=fetched()) as mock_fetch:
            result = runner.invoke(app, ["validate", URL, "-f", "json", "--timeout", "5"])

        assert result.exit_code == 0
        assert mock_fetch.call_args.kwargs["config"].timeout == 5
        report = json.loads(result.stdout)
        assert report["results"][2]["message"] == f"Testing URL is '{URL}'."

    def test_error_status(self, runner):
        with patch("rdapval.validation.framework.fetch_url", return_value=fetched(status_code=404)):
            result = runner.invoke(app, ["validate", URL, "-f", "json"])

        assert result.exit_code == 1

    def test_fetch_failure(self, runner):
        with patch("rdapval.validation.framework.fetch_url", side_effect=FetchError("connection refused")):
            result = runner.invoke(app, ["validate", URL, "-f", "json"])

        assert result.exit_code == 1
        assert "Error performing HTTP request: connection refused" in result.stdout

    def test_invalid_timeout(self, runner):
        result = runner.invoke(app, ["validate", URL, "--timeout", "0"])

        assert result.exit_code == 1
        assert "--timeout must be > 0" in result.stdout


class TestSchemaCommand:
    """Test the report schema command."""

    def test_print_schema(self, runner):
        result = runner.invoke(app, ["schema"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["title"] == "ValidationReport"

    def test_write_schema(self, runner, tmp_path):
        result = runner.invoke(app, ["schema", "--out", str(tmp_path)])

        assert result.exit_code == 0
        assert (tmp_path / "report.schema.json").exists()

    def test_validate_report(self, runner, response_file, tmp_path):
        check = runner.invoke(app, ["check", str(response_file), "-f", "json"])
        report_file = tmp_path / "report.json"
        report_file.write_text(check.stdout, encoding="utf-8")

        result = runner.invoke(app, ["schema", "--validate", str(report_file)])

        assert result.exit_code == 0
        assert "Report is valid!" in result.stdout

    def test_validate_invalid_report(self, runner, tmp_path):
        report_file = tmp_path / "report.json"
        report_file.write_text(json.dumps({"status": "pass"}), encoding="utf-8")

        result = runner.invoke(app, ["schema", "--validate", str(report_file)])

        assert result.exit_code == 1
        assert "schema violations" in result.stdout

    def test_unreadable_report(self, runner, tmp_path):
        result = runner.invoke(app, ["schema", "--validate", str(tmp_path / "missing.json")])

        assert result.exit_code == 1
        assert "Cannot read report" in result.stdout
