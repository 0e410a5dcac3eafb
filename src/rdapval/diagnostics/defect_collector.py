"""Run-scoped collection of validator defects.

A defect is a bug in the validator rather than a problem with the document
under test. Defects never count as document errors and never abort a run.
"""

import logging
import traceback
import uuid
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class DefectSeverity(str, Enum):
    """Defect severity levels."""
    ERROR = "error"      # exception escaped a validator
    WARNING = "warning"  # recoverable inconsistency, e.g. path stack mismatch


@dataclass
class DefectContext:
    """Where in the validator a defect occurred."""
    component: str                  # e.g. "ValidationContext"
    operation: str                  # e.g. "pop_path"
    path: str | None = None         # document location at the time
    additional_context: dict[str, Any] | None = None


@dataclass
class ValidatorDefect:
    """A single defect occurrence."""
    defect_id: str
    run_id: str
    timestamp: str
    severity: DefectSeverity
    defect_type: str
    message: str
    context: dict[str, Any]
    traceback_lines: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "defect_id": self.defect_id,
            "run_id": self.run_id,
            "timestamp": self.timestamp,
            "severity": self.severity.value,
            "defect_type": self.defect_type,
            "message": self.message,
            "context": self.context,
            "traceback_lines": self.traceback_lines,
        }


@dataclass
class DefectSummary:
    """Summary of defects for a complete validation run."""
    run_id: str
    started_at: str
    total_defects: int
    defects_by_severity: dict[str, int]
    defects: list[ValidatorDefect]

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "started_at": self.started_at,
            "total_defects": self.total_defects,
            "defects_by_severity": self.defects_by_severity,
            "defects": [defect.to_dict() for defect in self.defects],
        }


class DefectCollector:
    """Collects validator defects during a single validation run."""

    def __init__(self):
        self.start_time = datetime.now(UTC)
        self.run_id = self._generate_run_id()
        self.defects: list[ValidatorDefect] = []

        logger.debug(f"Initialized defect collector for run {self.run_id}")

    def collect_error(self, error: Exception, context: DefectContext,
                      severity: DefectSeverity = DefectSeverity.ERROR) -> str:
        """Record an exception raised inside the validator.

        Args:
            error: Exception that occurred
            context: Where it occurred
            severity: Defect severity

        Returns:
            Defect ID for reference
        """
        defect_id = str(uuid.uuid4())[:8]

        if error.__traceback__ is not None:
            traceback_lines = traceback.format_exception(type(error), error, error.__traceback__)
        else:
            traceback_lines = []

        defect = ValidatorDefect(
            defect_id=defect_id,
            run_id=self.run_id,
            timestamp=datetime.now(UTC).isoformat(),
            severity=severity,
            defect_type=type(error).__name__,
            message=str(error),
            context=asdict(context),
            traceback_lines=[line.rstrip("\n") for line in traceback_lines],
        )
        self.defects.append(defect)

        logger.debug(f"Collected defect {defect_id}: {defect.defect_type} - {defect.message}")
        return defect_id

    def collect_warning(self, message: str, context: DefectContext) -> str:
        """Record a recoverable inconsistency in the validator."""
        logger.warning(f"Validator defect in {context.component}.{context.operation}: {message}")
        return self.collect_error(RuntimeWarning(message), context, DefectSeverity.WARNING)

    def has_defects(self) -> bool:
        return len(self.defects) > 0

    def get_defect_counts(self) -> dict[str, int]:
        """Get defect counts by severity."""
        counts = {severity.value: 0 for severity in DefectSeverity}
        for defect in self.defects:
            counts[defect.severity.value] += 1
        return counts

    def summary(self) -> DefectSummary:
        return DefectSummary(
            run_id=self.run_id,
            started_at=self.start_time.isoformat(),
            total_defects=len(self.defects),
            defects_by_severity=self.get_defect_counts(),
            defects=list(self.defects),
        )

    def _generate_run_id(self) -> str:
        # Format: run-YYYYMMDD-HHMMSS-{short_uuid}
        timestamp_part = self.start_time.strftime("run-%Y%m%d-%H%M%S")
        uuid_part = str(uuid.uuid4())[:8]
        return f"{timestamp_part}-{uuid_part}"
