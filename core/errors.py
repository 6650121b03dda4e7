"""Typed stage failures.

Every stage call yields a ``StageResult``: either one complete value or a
``StageError`` of a closed set of kinds. Expected failures are returned, not
raised, so the caller decides whether to retry, degrade or abort.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    MODE_MISMATCH = "mode_mismatch"
    UNSUPPORTED_ARTIFACT_TYPE = "unsupported_artifact_type"
    CLIENT_FAILURE = "client_failure"
    STRUCTURED_RESPONSE_PARSE_FAILURE = "structured_response_parse_failure"


@dataclass(frozen=True)
class StageError:
    kind: ErrorKind
    message: str
    cause: Any = None       # underlying exception, if any

    def __str__(self):
        return f"{self.kind.value}: {self.message}"


class StageFailed(Exception):
    """Raised by ``StageResult.unwrap()`` for callers that prefer exceptions."""

    def __init__(self, error: StageError):
        super().__init__(str(error))
        self.error = error


@dataclass(frozen=True)
class StageResult:
    value: Any = None
    error: StageError | None = None

    @classmethod
    def success(cls, value) -> StageResult:
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str, cause=None) -> StageResult:
        return cls(error=StageError(kind=kind, message=message, cause=cause))

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self):
        if self.error is not None:
            raise StageFailed(self.error)
        return self.value
