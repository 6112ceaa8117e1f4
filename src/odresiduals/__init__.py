"""Main Module Documentation.

Residual logging for orbit determination runs: per measurement kind accumulation of
estimated-vs-observed residuals, summary statistics and detailed residual files.
"""

from __future__ import annotations

__version__ = "1.0.0"
