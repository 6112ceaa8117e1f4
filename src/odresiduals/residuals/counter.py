"""Defines the :class:`.EvaluationCounter` used when reporting estimator iterations."""

from __future__ import annotations

# Standard Library Imports
from typing import TYPE_CHECKING

# Local Imports
from .record import MeasurementStatus

# Type Checking Imports
if TYPE_CHECKING:
    # Local Imports
    from .record import ResidualRecord


class EvaluationCounter:
    """Count evaluations of one measurement type, and how many of them the estimator kept."""

    def __init__(self) -> None:
        """Create a counter with no evaluation."""
        self.total = 0
        self.processed = 0

    def add(self, record: ResidualRecord) -> None:
        """Count one evaluation."""
        self.total += 1
        if record.status is MeasurementStatus.PROCESSED:
            self.processed += 1

    def format(self, size: int) -> str:
        """Return ``"<processed>/<total>"``, right-justified on `size` characters."""
        return f"{self.processed}/{self.total}".rjust(size)
