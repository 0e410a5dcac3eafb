"""Run-scoped validation context.

Holds the JSON path stack, the specification stack, the error counter and
the sink that receives every result. One context is created per validation
run and threaded through every validator function.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from ..diagnostics import DefectCollector, DefectContext
from .references import FragmentStyle, SpecificationRegistry

logger = logging.getLogger(__name__)

ROOT_SEGMENT = "$"
DEFAULT_SPECIFICATION = "rfc9083"


class ResultStatus(str, Enum):
    """Outcome of a single assertion."""
    PASS = "pass"
    FAIL = "fail"
    INFO = "info"


@dataclass(frozen=True)
class Result:
    """A single emitted assertion outcome."""
    status: ResultStatus
    message: str
    path: str
    reference: str | None = None

    def __str__(self) -> str:
        text = f"[{self.status.value.upper()}] {self.path}: {self.message}"
        if self.reference:
            text += f" ({self.reference})"
        return text

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "message": self.message,
            "path": self.path,
            "reference": self.reference,
        }


class ResultSink(Protocol):
    """Receives results in traversal order, then a completion signal."""

    def add_result(self, result: Result) -> None: ...

    def complete(self, error_count: int) -> None: ...


@dataclass
class ResultCollector:
    """Sink that keeps every result of a run for later rendering."""
    results: list[Result] = field(default_factory=list)
    error_count: int = 0
    completed: bool = False

    def add_result(self, result: Result) -> None:
        self.results.append(result)

    def complete(self, error_count: int) -> None:
        self.error_count = error_count
        self.completed = True

    @property
    def failures(self) -> list[Result]:
        return [r for r in self.results if r.status == ResultStatus.FAIL]

    @property
    def status(self) -> ResultStatus:
        """FAIL if any assertion failed, PASS otherwise."""
        return ResultStatus.FAIL if self.failures else ResultStatus.PASS

    @property
    def exit_code(self) -> int:
        """Exit code for CI: 0 = no failures, 1 = failures."""
        return 0 if self.status == ResultStatus.PASS else 1

    def filtered(self, errors_only: bool = False, show_info: bool = True) -> list[Result]:
        """Results selected for display."""
        selected = []
        for result in self.results:
            if errors_only and result.status == ResultStatus.PASS:
                continue
            if not show_info and result.status == ResultStatus.INFO:
                continue
            selected.append(result)
        return selected

    def to_dict(self) -> dict:
        counts = {status.value: 0 for status in ResultStatus}
        for result in self.results:
            counts[result.status.value] += 1

        return {
            "status": self.status.value,
            "exit_code": self.exit_code,
            "error_count": self.error_count,
            "counters": counts,
            "results": [result.to_dict() for result in self.results],
        }


class CallbackSink:
    """Sink that forwards results to plain callables."""

    def __init__(self, on_result: Callable[[Result], None],
                 on_complete: Callable[[int], None] | None = None):
        self.on_result = on_result
        self.on_complete = on_complete

    def add_result(self, result: Result) -> None:
        self.on_result(result)

    def complete(self, error_count: int) -> None:
        if self.on_complete is not None:
            self.on_complete(error_count)


class PathHandle:
    """Releasable handle for a pushed path segment.

    Use as a context manager so the segment is popped on every exit route,
    including early returns and exceptions.
    """

    def __init__(self, context: "ValidationContext", segment: str):
        self.context = context
        self.segment = segment
        self.released = False

    def release(self) -> None:
        if not self.released:
            self.released = True
            self.context.pop_path(self.segment)

    def __enter__(self) -> "PathHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.release()
        return False


class ValidationContext:
    """Mutable state for a single validation run."""

    def __init__(
        self,
        sink: ResultSink | None = None,
        registry: SpecificationRegistry | None = None,
        defects: DefectCollector | None = None,
        base_url: str | None = None,
    ):
        self.sink = sink if sink is not None else ResultCollector()
        self.registry = registry or SpecificationRegistry()
        self.defects = defects or DefectCollector()
        self.base_url = base_url

        self.path: list[str] = [ROOT_SEGMENT]
        self.spec_stack: list[str] = [DEFAULT_SPECIFICATION]
        self.error_count = 0
        self.push_count = 0
        self.pop_count = 0

    @property
    def current_path(self) -> str:
        return "".join(self.path)

    @property
    def depth(self) -> int:
        """Number of segments below the root marker."""
        return len(self.path) - 1

    @property
    def current_specification(self) -> str:
        return self.spec_stack[-1]

    def push_path(self, segment: str) -> PathHandle:
        """Append a path segment (``.name`` or ``[n]``)."""
        self.path.append(segment)
        self.push_count += 1
        return PathHandle(self, segment)

    def pop_path(self, expected: str | None = None) -> None:
        """Remove the last path segment.

        A mismatch between ``expected`` and the actual last segment is a
        validator defect; it is reported but never raised.
        """
        if self.depth == 0:
            self.defects.collect_warning(
                "attempt to pop the root path segment",
                DefectContext("ValidationContext", "pop_path", self.current_path),
            )
            return

        if expected is not None and expected != self.path[-1]:
            self.defects.collect_warning(
                f"last item in path is '{self.path[-1]}', not '{expected}'",
                DefectContext("ValidationContext", "pop_path", self.current_path,
                              {"expected": expected}),
            )

        self.path.pop()
        self.pop_count += 1

    @contextmanager
    def specification(self, key: str) -> Iterator[str]:
        """Make ``key`` the specification in force for the enclosed checks."""
        if key not in self.registry:
            raise KeyError(f"Unknown specification: {key}")

        self.spec_stack.append(key)
        try:
            yield key
        finally:
            self.spec_stack.pop()

    def reference(self, fragment: str | int | None, spec: str | None = None) -> str | None:
        """Citation URL, or None when no fragment is given.

        Documents without addressable fragments are always cited as a whole.
        """
        key = spec or self.current_specification
        if fragment is None and self.registry.get(key).fragment_style != FragmentStyle.NONE:
            return None
        return self.registry.reference(key, fragment)

    def add(self, condition: Any, message: str,
            fragment: str | int | None = None, spec: str | None = None) -> bool:
        """Record an assertion and return its outcome.

        ``None`` records an informational message and returns True, so that
        ``if not ctx.add(...): return`` guards work uniformly.
        """
        if condition is None:
            status = ResultStatus.INFO
        elif condition:
            status = ResultStatus.PASS
        else:
            status = ResultStatus.FAIL
            self.error_count += 1

        result = Result(status, message, self.current_path, self.reference(fragment, spec))
        logger.debug(str(result))
        self.sink.add_result(result)

        return status != ResultStatus.FAIL

    def msg(self, message: str) -> None:
        """Record an informational message."""
        self.add(None, message)

    def iterate(self, values: list, callback: Callable[[Any], Any]) -> None:
        """Invoke ``callback`` on every item, tracking ``[i]`` path segments."""
        for i, item in enumerate(values):
            with self.push_path(f"[{i}]"):
                callback(item)

    def complete(self) -> None:
        """Signal the end of the run to the sink."""
        if self.depth != 0:
            self.defects.collect_warning(
                f"path stack not empty at end of run: {self.current_path}",
                DefectContext("ValidationContext", "complete", self.current_path),
            )
        self.sink.complete(self.error_count)
