from __future__ import annotations


class PlotDataError(ValueError):
    """Raised when the host cannot range, lay out or ingest series data."""


class TrackConfigError(ValueError):
    """Raised when a plot configuration file is malformed."""
