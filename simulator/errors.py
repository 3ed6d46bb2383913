"""
simulator/errors.py
-------------------
Error taxonomy for the allocation engine.

All errors derive from ``ValueError`` so existing ``except ValueError``
call sites keep working.
"""

from typing import Optional


class AllocationError(ValueError):
    """Base class for every error raised by the allocation engine."""


class InvalidInputError(AllocationError):
    """
    Preferences are malformed or out of range.

    ``field`` names the offending preference so a form can highlight it.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class DegenerateWeightsError(AllocationError):
    """Category weights sum to zero or less after adjustments."""
