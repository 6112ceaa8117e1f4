"""Contains all the custom-defined exceptions used in odresiduals."""

from __future__ import annotations


class ResidualLogError(Exception):
    """Exception indicating a residual log could not complete an operation."""


class ArtifactCleanupError(ResidualLogError):
    """An unused, empty residual file could not be deleted."""

    def __init__(self, filepath: str) -> None:
        """Instantiate an exception for a residual file that survived cleanup.

        Args:
            filepath (``str``): absolute path of the file that could not be deleted.
        """
        super().__init__(f"cannot delete {filepath}")
        self.filepath = filepath


class ResidualLogClosedError(ResidualLogError):
    """Exception indicating a residual log was used after being closed."""


class DimensionMismatchError(ValueError):
    """Exception indicating measurement vectors have incompatible sizes."""


class UnknownMeasurementTypeError(KeyError):
    """Exception that occurs for unsupported measurement types or residual kinds."""
