"""Defines the :class:`.ResidualLogSet` grouping every residual log of one orbit determination run."""

from __future__ import annotations

# Standard Library Imports
import os
import sys
from typing import TYPE_CHECKING

# Local Imports
from ..common.behavioral_config import BehavioralConfig
from ..common.exceptions import ArtifactCleanupError, UnknownMeasurementTypeError
from ..common.logger import odLogDebug, odLogError
from .kinds import RESIDUAL_KIND_MAP
from .residual_log import ResidualLog

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    import logging
    from typing import TextIO

    # Local Imports
    from ..common.logger import Logger
    from .record import ResidualRecord


LOG_SUFFIX: str = "-log.out"
"""``str``: suffix of the run-wide log file, ``<base_name>-log.out``."""


MEASUREMENT_ROUTES: dict[str, tuple[str, ...]] = {
    meas_type: tuple(
        label for label, kind in RESIDUAL_KIND_MAP.items() if kind.MEASUREMENT_TYPE == meas_type
    )
    for meas_type in dict.fromkeys(kind.MEASUREMENT_TYPE for kind in RESIDUAL_KIND_MAP.values())
}
"""``dict``: maps estimator measurement types to the residual kinds they feed.

Azimuth/elevation pairs feed both angular logs, and PV measurements feed both Cartesian logs.
"""


class ResidualLogSet:
    """Own the residual logs of every measurement kind, and the run-wide log of one run.

    Without a base name, no file is created and only summaries can be displayed.
    """

    def __init__(
        self,
        output_directory: str | os.PathLike | None = None,
        base_name: str | None = None,
    ) -> None:
        """Create one :class:`.ResidualLog` per measurement kind.

        Args:
            output_directory (``str``, optional): directory receiving the output files. Defaults
                to the ``residuals.OutputDirectory`` config value.
            base_name (``str``, optional): run-wide output base name. Defaults to ``None``,
                which disables every output file.

        Raises:
            ``OSError``: if an output file cannot be created. Files created so far are closed, and
                a failure to delete them is logged without replacing the creation error.
        """
        config = BehavioralConfig.getConfig()
        if output_directory is None:
            output_directory = config.residuals.OutputDirectory

        self._closed = False
        self._log_stream: TextIO | None = None
        self._logs: dict[str, ResidualLog] = {}
        try:
            if base_name is not None:
                log_filepath = os.path.abspath(os.path.join(output_directory, base_name + LOG_SUFFIX))
                self._log_stream = open(  # noqa: SIM115
                    log_filepath, "w", encoding=config.residuals.Encoding
                )
                odLogDebug(f"Opened run log file: {log_filepath}")

            for label in RESIDUAL_KIND_MAP:
                self._logs[label] = ResidualLog(output_directory, base_name, label)

        except OSError:
            # The creation error takes precedence over a cleanup failure
            try:
                self.close()
            except ArtifactCleanupError as cleanup_err:
                odLogError(f"Cleanup after failed creation also failed: {cleanup_err}")
            raise

    @property
    def logs(self) -> dict[str, ResidualLog]:
        """``dict``: residual logs, keyed by measurement kind name."""
        return self._logs

    @property
    def log_stream(self) -> TextIO | None:
        """``TextIO``: run-wide log stream, ``None`` without base name."""
        return self._log_stream

    def __getitem__(self, label: str) -> ResidualLog:
        """Return the residual log of measurement kind `label`."""
        return self._logs[label]

    def __enter__(self) -> ResidualLogSet:
        """Use the set as a context manager, closing every log on exit."""
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        """Close every log, whether or not an exception occurred."""
        self.close()

    def logEvaluation(self, measurement_type: str, record: ResidualRecord) -> None:
        """Register an evaluation in the residual logs of its measurement type.

        Args:
            measurement_type (``str``): estimator measurement type, like ``"Range"`` or ``"PV"``.
            record (:class:`.ResidualRecord`): evaluation to log.

        Raises:
            :class:`.UnknownMeasurementTypeError`: if `measurement_type` is not supported.
        """
        if measurement_type not in MEASUREMENT_ROUTES:
            raise UnknownMeasurementTypeError(measurement_type)

        for label in MEASUREMENT_ROUTES[measurement_type]:
            self._logs[label].add(record)

    def displaySummary(self, sink: TextIO | logging.Logger | Logger | None = None) -> None:
        """Display residual statistics of every measurement kind.

        Args:
            sink (optional): text stream or logger. Defaults to ``sys.stdout``. Summaries are
                also written to the run-wide log, if any.
        """
        if sink is None:
            sink = sys.stdout

        for log in self._logs.values():
            log.displaySummary(sink)

        if self._log_stream is not None:
            for log in self._logs.values():
                log.displaySummary(self._log_stream)

    def displayResiduals(self) -> None:
        """Write the detailed residuals of every measurement kind."""
        for log in self._logs.values():
            log.displayResiduals()

    def close(self) -> None:
        """Close the run-wide log, then every residual log.

        The first failure aborts the sequence and propagates. Calling this more than once has no
        further effect.

        Raises:
            :class:`.ArtifactCleanupError`: if an unused residual file cannot be deleted.
        """
        if self._closed:
            return
        self._closed = True

        if self._log_stream is not None:
            self._log_stream.close()

        for log in self._logs.values():
            log.close()
