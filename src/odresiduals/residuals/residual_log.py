"""Defines the :class:`.ResidualLog` accumulating residuals of one measurement kind."""

from __future__ import annotations

# Standard Library Imports
import logging
import os
from bisect import insort
from itertools import count
from typing import TYPE_CHECKING

# Local Imports
from ..common.behavioral_config import BehavioralConfig
from ..common.exceptions import ArtifactCleanupError, ResidualLogClosedError
from ..common.logger import odLogDebug, odLogError, odLogInfo
from .kinds import getResidualKind
from .statistics import StreamingStatistics

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from collections.abc import Iterator
    from typing import TextIO

    # Local Imports
    from ..common.logger import Logger
    from .kinds import ResidualKind
    from .record import ResidualRecord


RESIDUALS_FILE_SUFFIX: str = "-residuals.out"
"""``str``: suffix of the detailed residual files, ``<base_name>-<kind>-residuals.out``."""


def residualsFilename(base_name: str, name: str) -> str:
    """Return the residual file name of measurement kind `name` for a run named `base_name`."""
    return f"{base_name}-{name}{RESIDUALS_FILE_SUFFIX}"


def writeLines(sink: TextIO | logging.Logger | Logger, lines: list[str]) -> None:
    """Write `lines` to a text stream, or log them one by one if `sink` is a logger.

    Args:
        sink: text stream (anything with ``write()``) or logger receiving the lines.
        lines (``list``): lines to output, without trailing newlines.
    """
    if isinstance(sink, logging.Logger) or hasattr(sink, "logger"):
        for line in lines:
            sink.info(line)
    else:
        sink.write("".join(f"{line}\n" for line in lines))


class ResidualLog:
    """Accumulate the residuals of one measurement kind during an orbit determination run.

    Records are kept sorted chronologically, with ties between distinct records sharing an epoch
    kept in insertion order. Adding a record equal to one already logged does nothing.

    If a `base_name` is given, the detailed residuals are written to
    ``<output_directory>/<base_name>-<kind>-residuals.out``. That file is created as soon as the
    log is, and deleted by :meth:`.close` if no residual was ever added. Callers must make sure
    :meth:`.close` is called on every exit path, which using the log as a context manager does.
    """

    def __init__(
        self,
        output_directory: str | os.PathLike | None,
        base_name: str | None,
        kind: str | type[ResidualKind] | ResidualKind,
    ) -> None:
        """Create the log, and its residual file if `base_name` is set.

        Args:
            output_directory (``str``): directory receiving the residual file. Defaults to the
                ``residuals.OutputDirectory`` config value if ``None``.
            base_name (``str``): run-wide output base name. ``None`` disables the residual file,
                only summaries are available.
            kind (:class:`.ResidualKind`): measurement kind, as an instance, class or label.

        Raises:
            ``OSError``: if the residual file cannot be created.
        """
        self._kind = getResidualKind(kind)
        self._records: list[tuple[tuple, ResidualRecord]] = []
        self._seen: set[ResidualRecord] = set()
        self._sequence = count()
        self._closed = False

        self._filepath: str | None = None
        self._stream: TextIO | None = None
        if base_name is not None:
            config = BehavioralConfig.getConfig()
            if output_directory is None:
                output_directory = config.residuals.OutputDirectory
            self._filepath = os.path.abspath(
                os.path.join(output_directory, residualsFilename(base_name, self.name)),
            )
            self._stream = open(  # noqa: SIM115
                self._filepath, "w", encoding=config.residuals.Encoding
            )
            odLogDebug(f"Opened {self.name} residuals file: {self._filepath}")

    @property
    def name(self) -> str:
        """``str``: measurement kind name."""
        return self._kind.LABEL

    @property
    def kind(self) -> ResidualKind:
        """:class:`.ResidualKind`: measurement kind of this log."""
        return self._kind

    @property
    def filepath(self) -> str | None:
        """``str``: absolute path of the residual file, ``None`` in summary-only mode."""
        return self._filepath

    @property
    def closed(self) -> bool:
        """``bool``: whether :meth:`.close` was called."""
        return self._closed

    def __len__(self) -> int:
        """``int``: number of logged records."""
        return len(self._records)

    def __iter__(self) -> Iterator[ResidualRecord]:
        """Iterate over logged records in chronological order."""
        return (record for _, record in self._records)

    def __enter__(self) -> ResidualLog:
        """Use the log as a context manager, closing it on exit."""
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        """Close the log, whether or not an exception occurred."""
        self.close()

    def add(self, record: ResidualRecord) -> None:
        """Add an evaluation to the log.

        Args:
            record (:class:`.ResidualRecord`): evaluation to add.

        Raises:
            :class:`.ResidualLogClosedError`: if the log is closed.
            :class:`.DimensionMismatchError`: if `record` is too small for this kind.
        """
        if self._closed:
            raise ResidualLogClosedError(f"Cannot add to closed {self.name!r} residual log")
        self._kind.checkRecord(record)
        if record in self._seen:
            return

        self._seen.add(record)
        insort(self._records, ((record.timestamp, next(self._sequence)), record), key=lambda x: x[0])

    def residuals(self) -> list[float]:
        """``list``: residual values, in chronological order."""
        return [self._kind.residual(record) for record in self]

    def computeStatistics(self) -> StreamingStatistics:
        """Compute residual statistics over every logged record.

        Returns:
            :class:`.StreamingStatistics`: accumulated residual statistics.
        """
        stats = StreamingStatistics()
        for record in self:
            stats.addValue(self._kind.residual(record))
        return stats

    def displaySummary(self, sink: TextIO | logging.Logger | Logger) -> None:
        """Display summary statistics of the residuals.

        Nothing is displayed if no residual was added.

        Args:
            sink: text stream or logger receiving the summary.
        """
        if not self._records:
            return

        stats = self.computeStatistics()
        writeLines(
            sink,
            [
                f"Measurements type: {self.name}",
                f"   number of measurements: {stats.count}",
                f"   residuals min  value  : {stats.min}",
                f"   residuals max  value  : {stats.max}",
                f"   residuals mean value  : {stats.mean}",
                f"   residuals σ           : {stats.standard_deviation}",
            ],
        )

    def displayResiduals(self) -> None:
        """Write the detailed residuals to the residual file.

        Nothing is written in summary-only mode, or if no residual was added.

        Raises:
            :class:`.ResidualLogClosedError`: if the log is closed.
        """
        if self._closed:
            raise ResidualLogClosedError(f"Cannot write residuals of closed {self.name!r} residual log")
        if self._stream is None or not self._records:
            return

        writeLines(self._stream, [self._kind.headerText()])
        writeLines(self._stream, [self._kind.formatLine(record) for record in self])

    def close(self) -> None:
        """Close the residual file, deleting it if no residual was ever added.

        Calling this more than once has no further effect.

        Raises:
            :class:`.ArtifactCleanupError`: if the unused residual file cannot be deleted.
        """
        if self._closed:
            return
        self._closed = True

        if self._stream is None:
            return

        self._stream.close()
        if not self._records:
            try:
                os.remove(self._filepath)
            except OSError as err:
                odLogError(f"Unable to delete unused residuals file: {self._filepath}")
                raise ArtifactCleanupError(self._filepath) from err
            odLogInfo(f"Deleted unused {self.name} residuals file: {self._filepath}")
