from __future__ import annotations

import copy
import logging
from typing import Any, Protocol

from statetrack.reducer import hide_axis_ticks, reduce_series
from statetrack.renderer import DEFAULT_TRACK_STYLE, PixelOffset, TrackAxis, TrackStyle, draw_state_track
from statetrack.series import Datapoints, Series, is_state_series
from statetrack.surface import DrawingSurface

LOGGER = logging.getLogger(__name__)

DEFAULT_OPTIONS: dict[str, Any] = {"series": {"state": False}}


class HostPlot(Protocol):
    @property
    def xaxis(self) -> TrackAxis:
        ...

    def plot_offset(self) -> PixelOffset:
        ...


class StateTrackPlugin:
    """Draws state series as coloured bars in the area of their own x-axis.

    A state series should be assigned an otherwise unused x-axis: its ticks are
    hidden and its box becomes the track. Range and pixel mapping come from the
    plot's main x-axis so the track lines up with the chart above it.
    """

    name = "state"
    version = "0.2"

    def __init__(self, style: TrackStyle | None = None) -> None:
        self.style = style or DEFAULT_TRACK_STYLE

    @property
    def options(self) -> dict[str, Any]:
        return copy.deepcopy(DEFAULT_OPTIONS)

    def process_datapoints(self, plot: HostPlot, series: Series, datapoints: Datapoints) -> None:
        reduced = reduce_series(series)
        if reduced is None:
            return
        LOGGER.debug(
            "state series %r: %d samples reduced to %d state changes",
            series.label or series.state_label,
            len(series.data),
            len(reduced.points),
        )
        datapoints.points = list(reduced.points)
        datapoints.format = reduced.format
        datapoints.pointsize = len(reduced.format)
        series.data = datapoints.points
        if reduced.hide_ticks and series.xaxis is not None:
            hide_axis_ticks(series.xaxis)
            LOGGER.debug("hid ticks on %s for state track", series.xaxis.name)

    def draw_series(self, plot: HostPlot, surface: DrawingSurface, series: Series) -> None:
        if not is_state_series(series):
            return
        if series.xaxis is None or series.xaxis.box is None:
            return
        draw_state_track(surface, series, plot.xaxis, series.xaxis.box, plot.plot_offset(), self.style)
