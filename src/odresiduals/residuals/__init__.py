"""Accumulate, summarize and dump estimated-vs-observed measurement residuals.

A :class:`.ResidualLog` is created per measurement kind for an orbit determination run. The
estimator feeds it one :class:`.ResidualRecord` per processed measurement, and once the run ends
the log displays summary statistics, writes a chronological residual table, and is closed.
"""

from __future__ import annotations

# Local Imports
from .counter import EvaluationCounter
from .kinds import (
    RESIDUAL_KIND_MAP,
    AzimuthKind,
    ElevationKind,
    PositionKind,
    RangeKind,
    RangeRateKind,
    ResidualKind,
    VelocityKind,
    getResidualKind,
)
from .log_set import MEASUREMENT_ROUTES, ResidualLogSet
from .record import MeasurementStatus, ResidualRecord
from .residual_log import ResidualLog
from .statistics import StreamingStatistics

__all__ = [
    "EvaluationCounter",
    "RESIDUAL_KIND_MAP",
    "AzimuthKind",
    "ElevationKind",
    "PositionKind",
    "RangeKind",
    "RangeRateKind",
    "ResidualKind",
    "VelocityKind",
    "getResidualKind",
    "MEASUREMENT_ROUTES",
    "ResidualLogSet",
    "MeasurementStatus",
    "ResidualRecord",
    "ResidualLog",
    "StreamingStatistics",
]
