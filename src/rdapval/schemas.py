"""JSON Schema for rdapval's JSON report, generated from Pydantic models."""

import json
import logging
from pathlib import Path
from typing import Any

import jsonschema
from pydantic import BaseModel, ConfigDict

from rdapval.validation.context import ResultStatus

logger = logging.getLogger(__name__)

SCHEMA_FILE_NAME = "report.schema.json"


class ReportResult(BaseModel):
    """One assertion outcome in a report."""
    status: ResultStatus
    message: str
    path: str
    reference: str | None = None

    model_config = ConfigDict(extra="forbid")


class ValidationReport(BaseModel):
    """Report written by ``rdapval validate --format json``."""
    status: ResultStatus
    exit_code: int
    error_count: int
    counters: dict[str, int]
    results: list[ReportResult]

    model_config = ConfigDict(extra="forbid")


def generate_report_schema() -> dict[str, Any]:
    """JSON schema describing the JSON report format."""
    schema = ValidationReport.model_json_schema()
    schema["$schema"] = "https://json-schema.org/draft/2020-12/schema"
    return schema


def save_report_schema(output_dir: Path) -> Path:
    """Write the report schema into ``output_dir``."""
    output_dir.mkdir(parents=True, exist_ok=True)
    schema_file = output_dir / SCHEMA_FILE_NAME

    with open(schema_file, "w", encoding="utf-8") as f:
        json.dump(generate_report_schema(), f, indent=2, ensure_ascii=False)

    logger.debug(f"Saved schema: {schema_file}")
    return schema_file


def validate_report(data: Any) -> list[str]:
    """Validate a parsed JSON report.

    Returns:
        List of error descriptions (empty if valid)
    """
    validator = jsonschema.Draft202012Validator(generate_report_schema())
    return [
        f"{error.json_path}: {error.message}"
        for error in sorted(validator.iter_errors(data), key=lambda e: e.json_path)
    ]
