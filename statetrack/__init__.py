from statetrack.errors import PlotDataError, TrackConfigError
from statetrack.host import Axis, Box, Plot, PlotOffset
from statetrack.plugin import DEFAULT_OPTIONS, StateTrackPlugin
from statetrack.reducer import ReducedTrack, hide_axis_ticks, reduce_samples, reduce_series
from statetrack.renderer import TrackRect, TrackStyle, draw_state_track, hit_test, layout_track
from statetrack.series import Sample, Series
from statetrack.surface import DrawingSurface, RasterSurface

__all__ = [
    "Axis",
    "Box",
    "DEFAULT_OPTIONS",
    "DrawingSurface",
    "Plot",
    "PlotDataError",
    "PlotOffset",
    "RasterSurface",
    "ReducedTrack",
    "Sample",
    "Series",
    "StateTrackPlugin",
    "TrackConfigError",
    "TrackRect",
    "TrackStyle",
    "draw_state_track",
    "hide_axis_ticks",
    "hit_test",
    "layout_track",
    "reduce_samples",
    "reduce_series",
]
