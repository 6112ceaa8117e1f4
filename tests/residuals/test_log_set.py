from __future__ import annotations

# Standard Library Imports
import io
import os
from typing import TYPE_CHECKING

# Third Party Imports
import pytest

# odresiduals Imports
from odresiduals.common.exceptions import ArtifactCleanupError, UnknownMeasurementTypeError
from odresiduals.residuals.log_set import LOG_SUFFIX, MEASUREMENT_ROUTES, ResidualLogSet
from odresiduals.residuals.residual_log import ResidualLog, residualsFilename

# Local Imports
from .. import makePVRecord, makeRecord, makeScalarRecord

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from pathlib import Path


ALL_KINDS: tuple[str, ...] = ("range", "range-rate", "azimuth", "elevation", "position", "velocity")


def testRoutes():
    """Test each measurement type feeds the right residual logs."""
    assert MEASUREMENT_ROUTES == {
        "Range": ("range",),
        "RangeRate": ("range-rate",),
        "AngularAzEl": ("azimuth", "elevation"),
        "PV": ("position", "velocity"),
    }


def testCreatedFiles(tmp_path: Path):
    """Test a set with base name creates the run log and every residual file."""
    log_set = ResidualLogSet(tmp_path, "od1")
    expected = {"od1" + LOG_SUFFIX} | {residualsFilename("od1", label) for label in ALL_KINDS}
    assert {path.name for path in tmp_path.iterdir()} == expected
    assert tuple(log_set.logs) == ALL_KINDS
    log_set.close()

    # Only the run log survives, residual logs were empty
    assert [path.name for path in tmp_path.iterdir()] == ["od1-log.out"]


def testLogEvaluation():
    """Test evaluations are dispatched to their residual logs."""
    log_set = ResidualLogSet(None, None)
    log_set.logEvaluation("Range", makeScalarRecord(0, 1.0))
    log_set.logEvaluation("RangeRate", makeScalarRecord(0, 0.1))
    log_set.logEvaluation("AngularAzEl", makeRecord(0, (0.0, 0.25), (0.1, 0.2)))
    log_set.logEvaluation("PV", makePVRecord(0, 1.0, 0.1))
    log_set.logEvaluation("PV", makePVRecord(60, 2.0, 0.2))

    assert {label: len(log) for label, log in log_set.logs.items()} == {
        "range": 1,
        "range-rate": 1,
        "azimuth": 1,
        "elevation": 1,
        "position": 2,
        "velocity": 2,
    }
    assert log_set["velocity"].residuals() == pytest.approx([0.1, 0.2])

    with pytest.raises(UnknownMeasurementTypeError):
        log_set.logEvaluation("Phase", makeScalarRecord(0, 1.0))

    log_set.close()


def testRunOutputs(tmp_path: Path):
    """Test summaries go to the sink and run log, and unused residual files are removed."""
    with ResidualLogSet(tmp_path, "od1") as log_set:
        log_set.logEvaluation("Range", makeScalarRecord(60, -2.0))
        log_set.logEvaluation("Range", makeScalarRecord(0, 1.0))
        sink = io.StringIO()
        log_set.displaySummary(sink)
        log_set.displayResiduals()

    assert sink.getvalue().startswith("Measurements type: range\n")
    assert "Measurements type: position" not in sink.getvalue()
    with open(tmp_path / "od1-log.out", encoding="utf-8") as run_log:
        assert run_log.read() == sink.getvalue()

    names = sorted(path.name for path in tmp_path.iterdir())
    assert names == ["od1-log.out", "od1-range-residuals.out"]
    with open(tmp_path / "od1-range-residuals.out", encoding="utf-8") as residual_file:
        assert len(residual_file.read().splitlines()) == 3


def testDefaultSink(capsys: pytest.CaptureFixture):
    """Test summaries default to stdout."""
    log_set = ResidualLogSet(None, None)
    assert log_set.log_stream is None
    log_set.logEvaluation("AngularAzEl", makeRecord(0, (0.0, 0.25), (0.1, 0.2)))
    log_set.displaySummary()
    out = capsys.readouterr().out
    assert "Measurements type: azimuth" in out
    assert "Measurements type: elevation" in out
    log_set.close()


def testCloseOnError(tmp_path: Path):
    """Test every log is closed when the run fails."""
    with pytest.raises(RuntimeError), ResidualLogSet(tmp_path, "od1") as log_set:
        log_set.logEvaluation("PV", makePVRecord(0, 1.0, 0.1))
        raise RuntimeError("estimation diverged")

    assert all(log.closed for log in log_set.logs.values())
    assert log_set.log_stream.closed
    names = sorted(path.name for path in tmp_path.iterdir())
    assert names == ["od1-log.out", "od1-position-residuals.out", "od1-velocity-residuals.out"]


def testCleanupFailureAborts(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Test the first cleanup failure stops the closing sequence."""

    def failingRemove(path):
        raise PermissionError(path)

    log_set = ResidualLogSet(tmp_path, "od1")
    with monkeypatch.context() as m_patch:
        m_patch.setattr("odresiduals.residuals.residual_log.os.remove", failingRemove)
        with pytest.raises(ArtifactCleanupError):
            log_set.close()

    assert log_set["range"].closed
    assert not log_set["range-rate"].closed
    # The set is not closed twice
    log_set.close()
    assert not log_set["range-rate"].closed


def testConstructionFailure(tmp_path: Path):
    """Test files cannot be created in a missing directory."""
    with pytest.raises(OSError):
        ResidualLogSet(tmp_path / "missing", "od1")
    assert not os.path.exists(tmp_path / "missing")


def testConstructionFailureWithCleanupFailure(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Test the creation error propagates even when cleaning up created files fails."""

    def failingRemove(path):
        raise PermissionError(path)

    def failingLog(output_directory, base_name, kind):
        if kind == "position":
            raise FileNotFoundError(kind)
        return ResidualLog(output_directory, base_name, kind)

    monkeypatch.setattr("odresiduals.residuals.residual_log.os.remove", failingRemove)
    monkeypatch.setattr("odresiduals.residuals.log_set.ResidualLog", failingLog)
    with pytest.raises(FileNotFoundError):
        ResidualLogSet(tmp_path, "od1")
