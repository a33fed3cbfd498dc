"""Collection of failure reasons and diagnostics for one evaluation run."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Generic, Protocol, TypeVar

T = TypeVar("T")
T_contra = TypeVar("T_contra", contravariant=True)


class FailReason(StrEnum):
    """Why a coverage gate run did not pass."""

    UNDER_THRESHOLD = "underThreshold"
    INVALID_COVERAGE_FORMAT = "invalidFormat"
    REPORT_NOT_FOUND = "reportNotFound"
    INVALID_THRESHOLD_CONFIG = "invalidThresholdConfig"


class FailureSink(Protocol[T_contra]):
    """Anything the engine can report a failure reason to."""

    def add(self, item: T_contra) -> None: ...


@dataclass(frozen=True, slots=True)
class CollectedData(Generic[T]):
    """Snapshot of everything a :class:`DataCollector` has received."""

    data: tuple[T, ...]
    info: tuple[str, ...]
    errors: tuple[Exception, ...]


@dataclass(slots=True)
class DataCollector(Generic[T]):
    """Accumulates items, info messages and errors.

    The caller owns the collector; create a fresh one per evaluation run.
    """

    _data: list[T] = field(default_factory=list)
    _info: list[str] = field(default_factory=list)
    _errors: list[Exception] = field(default_factory=list)

    def add(self, item: T) -> None:
        self._data.append(item)

    def info(self, message: str) -> None:
        self._info.append(message)

    def error(self, error: Exception) -> None:
        self._errors.append(error)

    def get(self) -> CollectedData[T]:
        return CollectedData(data=tuple(self._data), info=tuple(self._info), errors=tuple(self._errors))


__all__ = ["CollectedData", "DataCollector", "FailReason", "FailureSink"]
