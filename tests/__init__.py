"""Configure importable things that aren't pytest fixtures."""

from __future__ import annotations

# Standard Library Imports
from datetime import datetime, timedelta

# odresiduals Imports
from odresiduals.residuals.record import MeasurementStatus, ResidualRecord

# Common epochs
TEST_START_DATETIME = datetime(2016, 2, 13, 16)

TEST_STATION = "Kourou"


def makeRecord(
    seconds: float,
    observed: tuple[float, ...],
    estimated: tuple[float, ...],
    source_label: str | None = TEST_STATION,
    status: MeasurementStatus = MeasurementStatus.PROCESSED,
) -> ResidualRecord:
    """Build a :class:`.ResidualRecord` dated `seconds` after :data:`.TEST_START_DATETIME`."""
    return ResidualRecord(
        TEST_START_DATETIME + timedelta(seconds=seconds),
        observed,
        estimated,
        source_label=source_label,
        status=status,
    )


def makeScalarRecord(seconds: float, residual: float, observed: float = 1000.0, **kwargs) -> ResidualRecord:
    """Build a single-valued :class:`.ResidualRecord` with a known residual."""
    return makeRecord(seconds, (observed,), (observed + residual,), **kwargs)


def makePVRecord(seconds: float, position_offset: float, velocity_offset: float, **kwargs) -> ResidualRecord:
    """Build a PV :class:`.ResidualRecord` whose position and velocity residuals are known."""
    observed = (7000.0e3, 0.0, 0.0, 0.0, 7.5e3, 0.0)
    estimated = (
        observed[0] + position_offset,
        *observed[1:4],
        observed[4] + velocity_offset,
        observed[5],
    )
    return makeRecord(seconds, observed, estimated, source_label=None, **kwargs)


def summaryValues(text: str) -> dict[str, str]:
    """Parse a residual summary block into ``{field: value}``."""
    values = {}
    for line in text.splitlines():
        if line.startswith("Measurements type:"):
            values["type"] = line.split(":", 1)[1].strip()
        elif ":" in line:
            field, value = line.rsplit(":", 1)
            values[" ".join(field.split())] = value.strip()
    return values
