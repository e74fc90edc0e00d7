"""Structured error objects for the xcheck instrumentation pass.

Every failure is fatal to the whole pass and carries a machine-readable
kind, the offending declaration's source location and the detail values
needed to report it (the unknown keyword, the out-of-range id, ...).
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ErrorKind(Enum):
    SYNTAX_ERROR = "syntax_error"
    UNKNOWN_OPTION = "unknown_option"
    ID_OUT_OF_RANGE = "id_out_of_range"
    INVALID_VALUE = "invalid_value"
    UNSUPPORTED_PATTERN = "unsupported_pattern"
    SHAPE_ERROR = "shape_error"
    MACRO_ERROR = "macro_error"
    CONFIG_FILE_ERROR = "config_file_error"


@dataclass
class SourceLocation:
    line: int
    column: int
    file: str = "<stdin>"

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"


@dataclass
class XCheckError:
    kind: ErrorKind
    message: str
    location: Optional[SourceLocation] = None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "kind": self.kind.value,
            "message": self.message,
        }
        if self.location:
            d["location"] = {
                "file": self.location.file,
                "line": self.location.line,
                "column": self.location.column,
            }
        if self.details:
            d["details"] = self.details
        return d

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def __str__(self) -> str:
        loc = f" at {self.location}" if self.location else ""
        return f"[{self.kind.value}]{loc}: {self.message}"


def syntax_error(
    message: str,
    location: Optional[SourceLocation] = None,
) -> XCheckError:
    return XCheckError(
        kind=ErrorKind.SYNTAX_ERROR,
        message=message,
        location=location,
    )


def unknown_option(
    keyword: str,
    location: Optional[SourceLocation] = None,
) -> XCheckError:
    return XCheckError(
        kind=ErrorKind.UNKNOWN_OPTION,
        message=f"Unknown cross_check option '{keyword}'",
        location=location,
        details={"keyword": keyword},
    )


def id_out_of_range(
    value: int,
    location: Optional[SourceLocation] = None,
) -> XCheckError:
    return XCheckError(
        kind=ErrorKind.ID_OUT_OF_RANGE,
        message=f"Invalid u32 for cross_check id: {value}",
        location=location,
        details={"value": value},
    )


def invalid_value(
    keyword: str,
    expected: str,
    actual: str,
    location: Optional[SourceLocation] = None,
) -> XCheckError:
    return XCheckError(
        kind=ErrorKind.INVALID_VALUE,
        message=f"Invalid literal for cross_check {keyword}: expected {expected}, got {actual}",
        location=location,
        details={"keyword": keyword, "expected": expected, "actual": actual},
    )


def unsupported_pattern(
    function: str,
    parameter: str,
    location: Optional[SourceLocation] = None,
) -> XCheckError:
    return XCheckError(
        kind=ErrorKind.UNSUPPORTED_PATTERN,
        message=(
            f"Cannot cross-check argument '{parameter}' of '{function}': "
            f"only parameters bound to a plain name are supported"
        ),
        location=location,
        details={"function": function, "parameter": parameter},
    )


def shape_error(
    declaration: str,
    reason: str,
    location: Optional[SourceLocation] = None,
) -> XCheckError:
    return XCheckError(
        kind=ErrorKind.SHAPE_ERROR,
        message=f"Cannot cross-check '{declaration}': {reason}",
        location=location,
        details={"declaration": declaration, "reason": reason},
    )


def macro_error(
    message: str,
    location: Optional[SourceLocation] = None,
) -> XCheckError:
    return XCheckError(
        kind=ErrorKind.MACRO_ERROR,
        message=message,
        location=location,
    )


class CompileError(Exception):
    """Exception wrapping one or more XCheckErrors."""

    def __init__(self, errors: list[XCheckError] | XCheckError):
        if isinstance(errors, XCheckError):
            errors = [errors]
        self.errors = errors
        super().__init__(self._format())

    @property
    def kind(self) -> ErrorKind:
        return self.errors[0].kind

    def _format(self) -> str:
        return "\n".join(str(e) for e in self.errors)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps([e.to_dict() for e in self.errors], indent=indent)


class ConfigError(CompileError):
    """A cross_check annotation could not be resolved."""


class UnsupportedPatternError(CompileError):
    """Argument checks were requested for a destructuring parameter."""


class ShapeError(CompileError):
    """An annotation sits on a declaration that cannot be instrumented."""
