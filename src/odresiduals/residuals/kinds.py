"""Classes defining how each measurement kind computes and displays its residuals."""

from __future__ import annotations

# Standard Library Imports
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

# Third Party Imports
from numpy import array, degrees
from numpy.linalg import norm

# Local Imports
from ..common import formatEpoch
from ..common.exceptions import DimensionMismatchError, UnknownMeasurementTypeError

# Type Checking Imports
if TYPE_CHECKING:
    # Local Imports
    from .record import ResidualRecord


SEP: str = "  "
"""``str``: column separator."""

DATE_FORMAT: str = "%-25s"
"""``str``: epoch column format."""

STATION_FORMAT: str = "%-10s"
"""``str``: station column format."""

NB_TAG_FORMAT: str = "%20s"
"""``str``: numeric column header format."""

NB_FORMAT: str = "%20.9f"
"""``str``: numeric column format."""

STATION_HEADER_FORMAT: str = SEP.join(
    (DATE_FORMAT, STATION_FORMAT, NB_TAG_FORMAT, NB_TAG_FORMAT, NB_TAG_FORMAT)
)
"""``str``: header of single-valued station measurements: date, station, estimated, observed, residual."""

STATION_LINE_FORMAT: str = SEP.join((DATE_FORMAT, STATION_FORMAT, NB_FORMAT, NB_FORMAT, NB_FORMAT))
"""``str``: line of single-valued station measurements: date, station, estimated, observed, residual."""

CARTESIAN_HEADER_FORMAT: str = SEP.join((DATE_FORMAT, *([NB_TAG_FORMAT] * 7)))
"""``str``: header of Cartesian measurements: date, estimated xyz, observed xyz, residual."""

CARTESIAN_LINE_FORMAT: str = SEP.join((DATE_FORMAT, *([NB_FORMAT] * 7)))
"""``str``: line of Cartesian measurements: date, estimated xyz, observed xyz, residual."""


class ResidualKind(ABC):
    r"""Base class for the measurement kinds whose residuals can be logged.

    Each kind defines how a :class:`.ResidualRecord` reduces to one scalar residual, and how the
    detailed residual table is laid out. Everything else is shared by :class:`.ResidualLog`.
    """

    LABEL: str = "notset"
    """``str``: name of the kind, used in summaries and residual file names.

    Note:
        This must be overridden by subclasses.
    """

    MEASUREMENT_TYPE: str = "notset"
    """``str``: estimator measurement type whose evaluations feed this kind.

    Note:
        This must be overridden by subclasses.
    """

    COMPONENTS: int = 1
    """``int``: minimum number of measurement components a record must have."""

    def checkRecord(self, record: ResidualRecord) -> None:
        """Ensure `record` carries enough components for this kind.

        Raises:
            :class:`.DimensionMismatchError`: if the record is too small.
        """
        if record.dimension < self.COMPONENTS:
            raise DimensionMismatchError(
                f"{self.LABEL!r} residuals need {self.COMPONENTS} components, got {record.dimension}",
            )

    @abstractmethod
    def residual(self, record: ResidualRecord) -> float:
        """Reduce the estimated/observed values of `record` to a single residual.

        Args:
            record (:class:`.ResidualRecord`): evaluation to consider.

        Returns:
            ``float``: residual value
        """
        raise NotImplementedError

    @abstractmethod
    def headerText(self) -> str:
        """``str``: column names of the detailed residual table."""
        raise NotImplementedError

    @abstractmethod
    def formatLine(self, record: ResidualRecord) -> str:
        """Format one line of the detailed residual table.

        Args:
            record (:class:`.ResidualRecord`): evaluation to display.

        Returns:
            ``str``: formatted line, without trailing newline
        """
        raise NotImplementedError


class StationResidualKind(ResidualKind):
    """Shared layout of single-valued measurements taken by a ground station."""

    HEADER_TAGS: tuple[str, str, str] = ("", "", "")
    """``tuple``: estimated, observed and residual column names."""

    INDEX: int = 0
    """``int``: measurement component logged by this kind."""

    def displayValue(self, value: float) -> float:
        """Convert a raw component to its displayed unit."""
        return value

    def residual(self, record: ResidualRecord) -> float:
        """Signed difference between estimated and observed component."""
        self.checkRecord(record)
        return self.displayValue(record.estimated[self.INDEX] - record.observed[self.INDEX])

    def headerText(self) -> str:
        """``str``: epoch, station, estimated, observed and residual column names."""
        return STATION_HEADER_FORMAT % ("Epoch_UTC", "Station", *self.HEADER_TAGS)

    def formatLine(self, record: ResidualRecord) -> str:
        """Format epoch, station, estimated, observed and residual values of `record`."""
        return STATION_LINE_FORMAT % (
            formatEpoch(record.timestamp),
            record.source_label or "",
            self.displayValue(record.estimated[self.INDEX]),
            self.displayValue(record.observed[self.INDEX]),
            self.residual(record),
        )


class RangeKind(StationResidualKind):
    """Range residuals, meters."""

    LABEL: str = "range"
    MEASUREMENT_TYPE: str = "Range"
    HEADER_TAGS: tuple[str, str, str] = ("Estimated_Range_m", "Observed_Range_m", "Range_Residual_m")


class RangeRateKind(StationResidualKind):
    """Range rate residuals, meters per second."""

    LABEL: str = "range-rate"
    MEASUREMENT_TYPE: str = "RangeRate"
    HEADER_TAGS: tuple[str, str, str] = (
        "Estimated_RangeRate_m/s",
        "Observed_RangeRate_m/s",
        "RangeRate_Residual_m/s",
    )


class AngularResidualKind(StationResidualKind):
    """Components of azimuth/elevation pairs, stored in radians and displayed in degrees."""

    MEASUREMENT_TYPE: str = "AngularAzEl"
    COMPONENTS: int = 2

    def displayValue(self, value: float) -> float:
        """Convert radians to degrees."""
        return float(degrees(value))


class AzimuthKind(AngularResidualKind):
    """Azimuth residuals, degrees."""

    LABEL: str = "azimuth"
    HEADER_TAGS: tuple[str, str, str] = ("Estimated_AZ_deg", "Observed_AZ_deg", "AZ_Residual_deg")
    INDEX: int = 0


class ElevationKind(AngularResidualKind):
    """Elevation residuals, degrees."""

    LABEL: str = "elevation"
    HEADER_TAGS: tuple[str, str, str] = ("Estimated_EL_deg", "Observed_EL_deg", "EL_Residual_deg")
    INDEX: int = 1


class CartesianResidualKind(ResidualKind):
    """Distance between estimated and observed vectors of position/velocity measurements."""

    MEASUREMENT_TYPE: str = "PV"
    COMPONENTS: int = 6

    HEADER_TAGS: tuple[str, ...] = ()
    """``tuple``: seven column names: estimated xyz, observed xyz and residual."""

    SLICE: slice = slice(0, 3)
    """``slice``: components of the PV vector logged by this kind."""

    def residual(self, record: ResidualRecord) -> float:
        """Euclidean norm of the difference of the logged sub-vectors."""
        self.checkRecord(record)
        estimated = array(record.estimated[self.SLICE])
        observed = array(record.observed[self.SLICE])
        return float(norm(estimated - observed))

    def headerText(self) -> str:
        """``str``: epoch, estimated, observed and residual column names."""
        return CARTESIAN_HEADER_FORMAT % ("Epoch_UTC", *self.HEADER_TAGS)

    def formatLine(self, record: ResidualRecord) -> str:
        """Format epoch, estimated vector, observed vector and residual of `record`."""
        return CARTESIAN_LINE_FORMAT % (
            formatEpoch(record.timestamp),
            *record.estimated[self.SLICE],
            *record.observed[self.SLICE],
            self.residual(record),
        )


class PositionKind(CartesianResidualKind):
    """Position residuals, meters."""

    LABEL: str = "position"
    HEADER_TAGS: tuple[str, ...] = (
        "Estimated_X",
        "Estimated_Y",
        "Estimated_Z",
        "Observed_X",
        "Observed_Y",
        "Observed_Z",
        "DP_m",
    )
    SLICE: slice = slice(0, 3)


class VelocityKind(CartesianResidualKind):
    """Velocity residuals, meters per second."""

    LABEL: str = "velocity"
    HEADER_TAGS: tuple[str, ...] = (
        "Estimated_VX",
        "Estimated_VY",
        "Estimated_VZ",
        "Observed_VX",
        "Observed_VY",
        "Observed_VZ",
        "ΔV_m/s",
    )
    SLICE: slice = slice(3, 6)


RESIDUAL_KIND_MAP: dict[str, type[ResidualKind]] = {
    kind.LABEL: kind
    for kind in (RangeKind, RangeRateKind, AzimuthKind, ElevationKind, PositionKind, VelocityKind)
}
"""``dict``: maps residual kind labels to their classes, in display order."""


def getResidualKind(kind: str | type[ResidualKind] | ResidualKind) -> ResidualKind:
    """Return a :class:`.ResidualKind` instance from a label, class or instance.

    Raises:
        :class:`.UnknownMeasurementTypeError`: if `kind` is an unknown label.
    """
    if isinstance(kind, ResidualKind):
        return kind
    if isinstance(kind, type) and issubclass(kind, ResidualKind):
        return kind()
    if kind not in RESIDUAL_KIND_MAP:
        raise UnknownMeasurementTypeError(kind)
    return RESIDUAL_KIND_MAP[kind]()
