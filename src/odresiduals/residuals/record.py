"""Defines the immutable :class:`.ResidualRecord` comparing one observation to its estimate."""

from __future__ import annotations

# Standard Library Imports
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

# Third Party Imports
from numpy import asarray

# Local Imports
from ..common import toNaiveUTC
from ..common.exceptions import DimensionMismatchError

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from collections.abc import Iterable
    from datetime import datetime

    # Third Party Imports
    from numpy import ndarray


class MeasurementStatus(str, Enum):
    """Estimator verdict on an evaluated measurement."""

    PROCESSED = "PROCESSED"
    REJECTED = "REJECTED"


def _toComponents(values: Iterable[float] | ndarray | float) -> tuple[float, ...]:
    """Flatten `values` into a tuple of python floats."""
    return tuple(float(value) for value in asarray(values, dtype=float).ravel())


@dataclass(frozen=True)
class ResidualRecord:
    r"""One comparison between an observed measurement and its estimated counterpart.

    Records are hashable, and two records are equal only when they describe the same logical
    observation: same epoch, same source and identical observed/estimated components. The
    :attr:`.status` is not part of this identity.
    """

    timestamp: datetime
    """``datetime``: epoch of the observation, stored as naive UTC."""

    observed: tuple[float, ...]
    """``tuple``: observed measurement components."""

    estimated: tuple[float, ...]
    """``tuple``: components predicted by the estimator, same length as :attr:`.observed`."""

    source_label: str | None = None
    """``str``: identifying context, like a ground station name. Only used for display."""

    status: MeasurementStatus = field(default=MeasurementStatus.PROCESSED, compare=False)
    """:class:`.MeasurementStatus`: whether the estimator kept this measurement."""

    def __post_init__(self) -> None:
        """Normalize the epoch and measurement vectors, and check the vectors have the same size.

        Timezone-aware epochs are converted to naive UTC, naive epochs are taken as UTC.

        Raises:
            :class:`.DimensionMismatchError`: if the vectors are empty or have different sizes.
        """
        observed = _toComponents(self.observed)
        estimated = _toComponents(self.estimated)
        if not observed:
            raise DimensionMismatchError("Residual records need at least one measurement component")
        if len(observed) != len(estimated):
            raise DimensionMismatchError(
                f"Observed ({len(observed)}) and estimated ({len(estimated)}) sizes differ",
            )

        # Frozen dataclass: bypass __setattr__ to store the normalized values
        object.__setattr__(self, "timestamp", toNaiveUTC(self.timestamp))
        object.__setattr__(self, "observed", observed)
        object.__setattr__(self, "estimated", estimated)
        object.__setattr__(self, "status", MeasurementStatus(self.status))

    @property
    def dimension(self) -> int:
        """``int``: number of measurement components."""
        return len(self.observed)
