"""Custom exceptions for the intake package."""
from __future__ import annotations


class IntakeError(RuntimeError):
    """Base error for loading scan inputs."""


class ScanInputError(IntakeError):
    """Raised when a results file or side table cannot be read."""


class SourceShapeError(IntakeError):
    """Raised when a source is not a mapping where one is required."""
