"""Centralised exception hierarchy for covgate."""

from __future__ import annotations


class CovgateError(Exception):
    """Base class for all custom covgate exceptions."""


class CoverageReportError(CovgateError):
    """Base class for errors related to coverage report handling."""


class CoverageReportNotFoundError(CoverageReportError):
    """Coverage report file could not be located on disk."""


class InvalidCoverageReportError(CoverageReportError):
    """Coverage report was found but does not contain a usable report."""


class ThresholdConfigError(CovgateError, ValueError):
    """Threshold configuration or a threshold expression is malformed."""


__all__ = [
    "CoverageReportError",
    "CoverageReportNotFoundError",
    "CovgateError",
    "InvalidCoverageReportError",
    "ThresholdConfigError",
]
