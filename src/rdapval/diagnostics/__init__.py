"""Validator-internal diagnostics.

Collects defects in the validator itself (path stack mismatches, exceptions
escaping a validator) separately from the results describing the document.
"""

from .defect_collector import (
    DefectCollector,
    DefectContext,
    DefectSeverity,
    DefectSummary,
    ValidatorDefect,
)

__all__ = [
    "DefectCollector",
    "DefectContext",
    "DefectSeverity",
    "DefectSummary",
    "ValidatorDefect",
]
