"""
mathcoach/core/errors.py
Error taxonomy shared by the pipeline. Routes translate these into HTTP errors.
"""
from typing import Optional


class MathCoachError(Exception):
    """Base class for every pipeline failure surfaced to the UI."""


class UpstreamError(MathCoachError):
    """Transport failure, non-2xx response, or malformed envelope from the generation service."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ParseError(MathCoachError):
    """Problem/solution markers missing or empty in the model text."""


class ValidationError(MathCoachError):
    """Analysis JSON missing required fields or carrying non-numeric values."""


class StorageError(MathCoachError):
    """Local key-value store could not be read or written."""
