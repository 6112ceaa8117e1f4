"""Observers reporting estimator progress while feeding the residual logs.

Estimators call these once per batch least squares evaluation, or once per measurement processed
by a sequential (Kalman) filter. Progress tables go to ``sys.stdout`` and, if given, to the
run-wide log stream.
"""

from __future__ import annotations

# Standard Library Imports
import sys
from typing import TYPE_CHECKING

# Third Party Imports
from numpy import asarray
from numpy.linalg import norm

# Local Imports
from .common import formatEpoch
from .common.logger import odLogWarning
from .residuals.counter import EvaluationCounter
from .residuals.log_set import MEASUREMENT_ROUTES

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from collections.abc import Iterable, Sequence
    from datetime import datetime
    from typing import TextIO

    # Third Party Imports
    from numpy import ndarray

    # Local Imports
    from .residuals.log_set import ResidualLogSet
    from .residuals.record import ResidualRecord


BATCH_HEADER: str = (
    "iteration evaluations      ΔP(m)        ΔV(m/s)           RMS"
    "          nb Range    nb Range-rate  nb Angular     nb PV  "
)
"""``str``: header of the batch iteration table."""

BATCH_FIRST_LINE: str = "    %2d         %2d                                 %16.12f     %s       %s     %s     %s"
"""``str``: first evaluation line, without position/velocity changes."""

BATCH_LINE: str = "    %2d         %2d      %13.6f %12.9f %16.12f     %s       %s     %s     %s"
"""``str``: evaluation line."""

BATCH_PARAMETER_NAME: str = "  %22s"
"""``str``: header format of an estimated parameter in the batch iteration table."""

BATCH_PARAMETER_VALUE: str = "  %22.9f"
"""``str``: format of an estimated parameter value in the batch iteration table."""

COUNTER_SIZE: int = 8
"""``int``: width of the evaluation counter columns."""

SEQUENTIAL_HEADER: str = "%-4s\t%-25s\t%15s\t%-10s\t%-10s\t%-20s\t%20s\t%20s"
"""``str``: header format of the sequential filter table."""

SEQUENTIAL_LINE: str = "%4d\t%-25s\t%15.3f\t%-10s\t%-10s\t%-20s\t%20.9e\t%20.9e"
"""``str``: line format of the sequential filter table."""

SEQUENTIAL_PARAMETER_NAME: str = "\t%20s"
"""``str``: header format of an estimated parameter, and of its standard deviation."""

SEQUENTIAL_PARAMETER_VALUE: str = "\t%20.9f"
"""``str``: format of an estimated parameter value in the sequential filter table."""

SEQUENTIAL_PARAMETER_SIGMA: str = "\t%20.9e"
"""``str``: format of an estimated parameter standard deviation in the sequential filter table."""

MEASUREMENT_TAGS: dict[str, str] = {
    "Range": "RANGE",
    "RangeRate": "RANGE_RATE",
    "AngularAzEl": "AZ_EL",
    "PV": "PV",
}
"""``dict``: short measurement type names shown in the sequential filter table."""

STATION_MEASUREMENT_TYPES: tuple[str, ...] = ("Range", "RangeRate", "AngularAzEl")
"""``tuple``: measurement types taken by a ground station."""


def _emit(line: str, log_stream: TextIO | None) -> None:
    """Print `line` to stdout and to `log_stream`, if any."""
    sys.stdout.write(f"{line}\n")
    if log_stream is not None:
        log_stream.write(f"{line}\n")


def _splitPV(pv: ndarray) -> tuple[ndarray, ndarray]:
    """Split a 6x1 position/velocity vector."""
    pv = asarray(pv, dtype=float).ravel()
    return pv[:3], pv[3:6]


class BatchIterationObserver:
    """Report each evaluation of a batch least squares estimator."""

    def __init__(
        self,
        initial_position: ndarray,
        initial_velocity: ndarray,
        log_stream: TextIO | None = None,
        parameter_names: Iterable[str] = (),
    ) -> None:
        """Print the iteration table header.

        Args:
            initial_position (``ndarray``): 3x1 position of the initial guess (m).
            initial_velocity (``ndarray``): 3x1 velocity of the initial guess (m/s).
            log_stream (``TextIO``, optional): run-wide log stream.
            parameter_names (``Iterable``, optional): names of the estimated parameters, whose
                values are appended to each line.
        """
        self._previous_position = asarray(initial_position, dtype=float)
        self._previous_velocity = asarray(initial_velocity, dtype=float)
        self._log_stream = log_stream
        header = BATCH_HEADER + "".join(BATCH_PARAMETER_NAME % name for name in parameter_names)
        _emit(header, self._log_stream)

    def evaluationPerformed(
        self,
        iterations: int,
        evaluations: int,
        position: ndarray,
        velocity: ndarray,
        rms: float,
        evaluated: Iterable[tuple[str, ResidualRecord]],
        parameter_values: Iterable[float] = (),
    ) -> str:
        """Report one estimator evaluation.

        Args:
            iterations (``int``): iteration number.
            evaluations (``int``): evaluation number.
            position (``ndarray``): 3x1 position of the current estimate (m).
            velocity (``ndarray``): 3x1 velocity of the current estimate (m/s).
            rms (``float``): normalized root mean square of the residuals.
            evaluated (``Iterable``): ``(measurement_type, record)`` pairs of this evaluation.
            parameter_values (``Iterable``, optional): current values of the estimated parameters,
                in the order of their names.

        Returns:
            ``str``: the reported line.
        """
        counters = {meas_type: EvaluationCounter() for meas_type in MEASUREMENT_ROUTES}
        for measurement_type, record in evaluated:
            if measurement_type in counters:
                counters[measurement_type].add(record)
            else:
                odLogWarning(f"Not counting unsupported measurement type: {measurement_type!r}")

        counts = tuple(counters[meas_type].format(COUNTER_SIZE) for meas_type in MEASUREMENT_TAGS)
        position = asarray(position, dtype=float)
        velocity = asarray(velocity, dtype=float)
        if evaluations == 1:
            line = BATCH_FIRST_LINE % (iterations, evaluations, rms, *counts)
        else:
            line = BATCH_LINE % (
                iterations,
                evaluations,
                norm(self._previous_position - position),
                norm(self._previous_velocity - velocity),
                rms,
                *counts,
            )
        line += "".join(BATCH_PARAMETER_VALUE % value for value in parameter_values)

        _emit(line, self._log_stream)
        self._previous_position = position
        self._previous_velocity = velocity
        return line


class SequentialObserver:
    """Report each measurement processed by a sequential filter, and log its residuals."""

    def __init__(self, log_set: ResidualLogSet, log_stream: TextIO | None = None) -> None:
        """Bind the observer to the residual logs of the run.

        Args:
            log_set (:class:`.ResidualLogSet`): residual logs receiving each evaluation.
            log_stream (``TextIO``, optional): run-wide log stream. Defaults to the one of
                `log_set`.
        """
        self._log_set = log_set
        self._log_stream = log_stream if log_stream is not None else log_set.log_stream
        self._first_epoch: datetime | None = None

    def evaluationPerformed(
        self,
        number: int,
        measurement_type: str,
        record: ResidualRecord,
        predicted_pv: ndarray,
        corrected_pv: ndarray,
        parameters: Sequence[tuple[str, float, float]] = (),
    ) -> str:
        """Log one corrected measurement and report the filter correction.

        Args:
            number (``int``): 1-based number of the processed measurement.
            measurement_type (``str``): estimator measurement type.
            record (:class:`.ResidualRecord`): corrected evaluation of the measurement.
            predicted_pv (``ndarray``): 6x1 predicted position/velocity (m; m/s).
            corrected_pv (``ndarray``): 6x1 corrected position/velocity (m; m/s).
            parameters (``Sequence``, optional): ``(name, value, sigma)`` of each estimated
                parameter, sigma being its standard deviation from the filter covariance.

        Returns:
            ``str``: the reported line.
        """
        self._log_set.logEvaluation(measurement_type, record)

        if number == 1 or self._first_epoch is None:
            self._first_epoch = record.timestamp
            header = SEQUENTIAL_HEADER % ("Nb", "Epoch", "Dt[s]", "Status", "Type", "Station", "DP Corr", "DV Corr")
            for name, _, _ in parameters:
                header += SEQUENTIAL_PARAMETER_NAME % name + SEQUENTIAL_PARAMETER_NAME % f"D{name}"
            sys.stdout.write(f"{header}\n")

        predicted_p, predicted_v = _splitPV(predicted_pv)
        corrected_p, corrected_v = _splitPV(corrected_pv)
        station = (record.source_label or "") if measurement_type in STATION_MEASUREMENT_TYPES else ""
        line = SEQUENTIAL_LINE % (
            number,
            formatEpoch(record.timestamp),
            (record.timestamp - self._first_epoch).total_seconds(),
            record.status.value,
            MEASUREMENT_TAGS[measurement_type],
            station,
            norm(predicted_p - corrected_p),
            norm(predicted_v - corrected_v),
        )
        for _, value, sigma in parameters:
            line += SEQUENTIAL_PARAMETER_VALUE % value + SEQUENTIAL_PARAMETER_SIGMA % sigma

        _emit(line, self._log_stream)
        return line
