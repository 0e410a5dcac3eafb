"""RDAP response validation engine.

Walks a parsed RDAP response depth-first, emitting one pass/fail/info result
per assertion with the JSON path it concerns and a citation link into the
specification in force at that point.
"""

from .context import (
    CallbackSink,
    PathHandle,
    Result,
    ResultCollector,
    ResultSink,
    ResultStatus,
    ValidationContext,
)
from .framework import RDAPValidator, validate
from .profiles import GTLDRegistrarProfile, GTLDRegistryProfile, ProfileRule, RIRProfile
from .references import SPECIFICATIONS, Specification, SpecificationRegistry

__all__ = [
    "RDAPValidator",
    "validate",
    "ValidationContext",
    "PathHandle",
    "Result",
    "ResultStatus",
    "ResultSink",
    "ResultCollector",
    "CallbackSink",
    "ProfileRule",
    "GTLDRegistryProfile",
    "GTLDRegistrarProfile",
    "RIRProfile",
    "Specification",
    "SpecificationRegistry",
    "SPECIFICATIONS",
]
