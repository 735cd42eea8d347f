from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, replace
import logging
from typing import Any, Literal, Protocol

import numpy as np

from statetrack.colors import RGBA, parse_color
from statetrack.errors import PlotDataError
from statetrack.raster import draw_hline, draw_polyline, draw_vline, fill_rect
from statetrack.scales import AxisRange, format_ticks_for_axis, generate_nice_ticks, padded_range
from statetrack.series import NUMERIC_RECORD_FORMAT, Datapoints, Series
from statetrack.surface import DrawingSurface, RasterSurface

LOGGER = logging.getLogger(__name__)

ProcessDatapointsHook = Callable[["Plot", Series, Datapoints], None]
DrawSeriesHook = Callable[["Plot", DrawingSurface, Series], None]


class PlotPlugin(Protocol):
    name: str

    @property
    def options(self) -> Mapping[str, Any]:
        ...

    def process_datapoints(self, plot: "Plot", series: Series, datapoints: Datapoints) -> None:
        ...

    def draw_series(self, plot: "Plot", surface: DrawingSurface, series: Series) -> None:
        ...


@dataclass(frozen=True)
class Box:
    left: int
    top: int
    width: int
    height: int


@dataclass(frozen=True)
class PlotOffset:
    left: int
    top: int


@dataclass
class AxisOptions:
    ticks: list[float] | None = None
    min: float | None = None
    max: float | None = None


@dataclass
class Axis:
    direction: Literal["x", "y"]
    n: int = 1
    options: AxisOptions = field(default_factory=AxisOptions)
    min: float = 0.0
    max: float = 1.0
    box: Box | None = None
    _scale: float = 1.0
    _length_px: int = 0

    @property
    def name(self) -> str:
        return f"{self.direction}axis" if self.n == 1 else f"{self.direction}{self.n}axis"

    @property
    def ticks_hidden(self) -> bool:
        return self.options.ticks is not None and len(self.options.ticks) == 0

    def set_range(self, vmin: float, vmax: float, length_px: int) -> None:
        if vmax <= vmin:
            raise PlotDataError(f"{self.name} range must be increasing: [{vmin}, {vmax}]")
        self.min = float(vmin)
        self.max = float(vmax)
        self._length_px = int(length_px)
        self._scale = length_px / (self.max - self.min)

    def p2c(self, value: float) -> float:
        """Map a domain value to a pixel offset from the plot area origin."""
        if self.direction == "x":
            return (value - self.min) * self._scale
        return (self.max - value) * self._scale

    def c2p(self, pixel: float) -> float:
        if self.direction == "x":
            return self.min + pixel / self._scale
        return self.max - pixel / self._scale

    def tick_values(self) -> np.ndarray:
        if self.options.ticks:
            return np.asarray(self.options.ticks, dtype=np.float64)
        target = max(2, self._length_px // (90 if self.direction == "x" else 60))
        return generate_nice_ticks(self.min, self.max, target)


@dataclass(frozen=True)
class PlotStyle:
    background: RGBA = (255, 255, 255, 255)
    plot_bg_color: RGBA = (250, 251, 253, 255)
    frame_color: RGBA = (170, 176, 186, 255)
    grid_color: RGBA = (228, 231, 236, 255)
    text_color: RGBA = (60, 66, 76, 255)
    font_size_px: float = 11.0
    gutter_left: int = 72
    gutter_right: int = 16
    gutter_top: int = 12
    x_tick_band: int = 20
    track_height: int = 16
    track_gap: int = 6
    tick_mark_len: int = 4


@dataclass
class Hooks:
    process_datapoints: list[ProcessDatapointsHook] = field(default_factory=list)
    draw_series: list[DrawSeriesHook] = field(default_factory=list)


class Plot:
    """Single-panel chart host that dispatches data and paint hooks to plugins.

    Every x-axis after the first is laid out as a strip under the plot area;
    plugins such as the state track paint into those strips.
    """

    def __init__(
        self,
        series: Sequence[Series | Mapping[str, Any]],
        *,
        width: int = 800,
        height: int = 300,
        title: str = "",
        plugins: Sequence[PlotPlugin] = (),
        options: Mapping[str, Any] | None = None,
        style: PlotStyle | None = None,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be > 0")
        self.width = width
        self.height = height
        self.title = title
        self.style = style or PlotStyle()
        self.hooks = Hooks()
        self.plugins = tuple(plugins)
        options = dict(options or {})
        series_defaults: dict[str, Any] = {}
        for plugin in self.plugins:
            series_defaults.update(plugin.options.get("series", {}))
            self.hooks.process_datapoints.append(plugin.process_datapoints)
            self.hooks.draw_series.append(plugin.draw_series)
        series_defaults.update(options.get("series", {}))
        self._series_defaults = series_defaults
        self._axis_options = {
            "xaxis": AxisOptions(**options.get("xaxis", {})),
            "yaxis": AxisOptions(**options.get("yaxis", {})),
        }
        self._plot_rect: tuple[int, int, int, int] | None = None
        self._data_processed = False
        self.series: list[Series] = []
        self._xaxes: dict[int, Axis] = {}
        self._yaxes: dict[int, Axis] = {}
        self.set_data(series)

    def set_data(self, series: Sequence[Series | Mapping[str, Any]]) -> None:
        self.series = [
            s if isinstance(s, Series) else Series.from_options(s, self._series_defaults) for s in series
        ]
        # each data set starts from the configured axis options
        self._xaxes = {1: Axis("x", 1, options=replace(self._axis_options["xaxis"]))}
        self._yaxes = {1: Axis("y", 1, options=replace(self._axis_options["yaxis"]))}
        for s in self.series:
            if s.xaxis_index < 1 or s.yaxis_index < 1:
                raise PlotDataError("axis numbers start at 1")
            s.xaxis = self._xaxes.setdefault(s.xaxis_index, Axis("x", s.xaxis_index))
            s.yaxis = self._yaxes.setdefault(s.yaxis_index, Axis("y", s.yaxis_index))
        self._data_processed = False

    @property
    def xaxis(self) -> Axis:
        return self._xaxes[1]

    @property
    def yaxis(self) -> Axis:
        return self._yaxes[1]

    def get_axes(self) -> dict[str, Axis]:
        axes = [*self._xaxes.values(), *self._yaxes.values()]
        return {axis.name: axis for axis in axes}

    def plot_offset(self) -> PlotOffset:
        x0, y0, _, _ = self._laid_out_rect()
        return PlotOffset(left=x0, top=y0)

    def plot_rect(self) -> tuple[int, int, int, int] | None:
        return self._plot_rect

    def _laid_out_rect(self) -> tuple[int, int, int, int]:
        if self._plot_rect is None:
            raise PlotDataError("plot has not been laid out yet")
        return self._plot_rect

    def process_data(self) -> None:
        for s in self.series:
            s.datapoints = Datapoints(points=list(s.data), pointsize=2, format=NUMERIC_RECORD_FORMAT)
            for hook in self.hooks.process_datapoints:
                hook(self, s, s.datapoints)
        self._data_processed = True
        LOGGER.debug("processed %d series through %d data hooks", len(self.series), len(self.hooks.process_datapoints))

    def draw(self, surface: DrawingSurface | None = None) -> DrawingSurface:
        if not self._data_processed:
            self.process_data()
        if surface is None:
            surface = self.new_surface()
        self._layout()
        if isinstance(surface, RasterSurface):
            self._draw_frame(surface)
        self._draw_tick_labels(surface)
        if isinstance(surface, RasterSurface):
            self._draw_lines(surface)
        for s in self.series:
            for hook in self.hooks.draw_series:
                hook(self, surface, s)
        return surface

    def new_surface(self) -> RasterSurface:
        return RasterSurface(
            width=self.width,
            height=self.height,
            background=self.style.background,
            font_size_px=self.style.font_size_px,
        )

    def to_rgba(self) -> np.ndarray:
        surface = self.new_surface()
        self.draw(surface)
        return surface.rgba

    def _layout(self) -> None:
        st = self.style
        extra_x = sorted(n for n in self._xaxes if n != 1)
        title_h = int(st.font_size_px * 1.6) if self.title else 0
        left = st.gutter_left
        top = st.gutter_top + title_h
        bottom = st.x_tick_band + len(extra_x) * (st.track_height + st.track_gap) + st.track_gap
        plot_w = self.width - left - st.gutter_right
        plot_h = self.height - top - bottom
        if plot_w <= 1 or plot_h <= 1:
            raise PlotDataError("figure too small for plotting viewport")
        self._plot_rect = (left, top, plot_w, plot_h)

        for n, axis in self._xaxes.items():
            vrange = self._axis_range(axis, self._x_values(n), fallback=self._all_x_values())
            axis.set_range(vrange.vmin, vrange.vmax, plot_w)
        for n, axis in self._yaxes.items():
            vrange = self._axis_range(axis, self._y_values(n), buffer_ratio=0.05)
            axis.set_range(vrange.vmin, vrange.vmax, plot_h)

        self.xaxis.box = Box(left=left, top=top + plot_h, width=plot_w, height=st.x_tick_band)
        track_top = top + plot_h + st.x_tick_band + st.track_gap
        for k, n in enumerate(extra_x):
            self._xaxes[n].box = Box(
                left=left,
                top=track_top + k * (st.track_height + st.track_gap),
                width=plot_w,
                height=st.track_height,
            )
        for axis in self._yaxes.values():
            axis.box = Box(left=0, top=top, width=left, height=plot_h)

    def _axis_range(
        self,
        axis: Axis,
        values: np.ndarray,
        *,
        fallback: np.ndarray | None = None,
        buffer_ratio: float = 0.0,
    ) -> AxisRange:
        if values.size == 0 and fallback is not None:
            values = fallback
        if values.size == 0 or not np.any(np.isfinite(values)):
            auto = AxisRange(0.0, 1.0)
        else:
            auto = padded_range(values, buffer_ratio=buffer_ratio)
        vmin = axis.options.min if axis.options.min is not None else auto.vmin
        vmax = axis.options.max if axis.options.max is not None else auto.vmax
        return AxisRange(float(vmin), float(vmax))

    def _x_values(self, n: int) -> np.ndarray:
        chunks = [_column(s.datapoints.points, 0) for s in self.series if s.xaxis_index == n]
        return np.concatenate(chunks) if chunks else np.asarray([], dtype=np.float64)

    def _all_x_values(self) -> np.ndarray:
        chunks = [_column(s.datapoints.points, 0) for s in self.series]
        return np.concatenate(chunks) if chunks else np.asarray([], dtype=np.float64)

    def _y_values(self, n: int) -> np.ndarray:
        chunks = [
            _column(s.datapoints.points, 1)
            for s in self.series
            if s.yaxis_index == n and s.datapoints.is_numeric
        ]
        return np.concatenate(chunks) if chunks else np.asarray([], dtype=np.float64)

    def _draw_frame(self, surface: RasterSurface) -> None:
        x0, y0, w, h = self._laid_out_rect()
        st = self.style
        fill_rect(surface.rgba, x0, y0, x0 + w, y0 + h, st.plot_bg_color)
        if not self.yaxis.ticks_hidden:
            for value in self.yaxis.tick_values():
                py = y0 + int(round(self.yaxis.p2c(float(value))))
                draw_hline(surface.rgba, x0, x0 + w - 1, py, st.grid_color)
        draw_hline(surface.rgba, x0, x0 + w - 1, y0, st.frame_color)
        draw_hline(surface.rgba, x0, x0 + w - 1, y0 + h - 1, st.frame_color)
        draw_vline(surface.rgba, x0, y0, y0 + h - 1, st.frame_color)
        draw_vline(surface.rgba, x0 + w - 1, y0, y0 + h - 1, st.frame_color)
        for axis in self._xaxes.values():
            if axis.ticks_hidden or axis.box is None:
                continue
            for value in axis.tick_values():
                px = x0 + int(round(axis.p2c(float(value))))
                draw_vline(surface.rgba, px, axis.box.top, axis.box.top + st.tick_mark_len, st.frame_color)

    def _draw_tick_labels(self, surface: DrawingSurface) -> None:
        x0, y0, w, _ = self._laid_out_rect()
        st = self.style
        surface.save()
        try:
            surface.fill_style = st.text_color
            if self.title:
                surface.text_align = "left"
                title_w = surface.measure_text(self.title)
                surface.fill_text(self.title, x0 + (w - title_w) / 2, y0 - 4)
            for axis in self._xaxes.values():
                if axis.ticks_hidden or axis.box is None:
                    continue
                ticks = axis.tick_values()
                surface.text_align = "left"
                baseline = axis.box.top + axis.box.height - 2
                for value, label in zip(ticks.tolist(), format_ticks_for_axis(ticks), strict=False):
                    label_w = surface.measure_text(label)
                    surface.fill_text(label, x0 + axis.p2c(value) - label_w / 2, baseline)
            if not self.yaxis.ticks_hidden:
                ticks = self.yaxis.tick_values()
                surface.text_align = "right"
                for value, label in zip(ticks.tolist(), format_ticks_for_axis(ticks), strict=False):
                    surface.fill_text(label, x0 - st.tick_mark_len - 2, y0 + self.yaxis.p2c(value) + st.font_size_px / 2)
        finally:
            surface.restore()

    def _draw_lines(self, surface: RasterSurface) -> None:
        x0, y0, _, _ = self._laid_out_rect()
        for s in self.series:
            if not s.datapoints.is_numeric or s.xaxis is None or s.yaxis is None:
                continue
            xs = _column(s.datapoints.points, 0)
            ys = _column(s.datapoints.points, 1)
            live = np.isfinite(xs) & np.isfinite(ys)
            if np.count_nonzero(live) < 2:
                continue
            order = np.argsort(xs[live], kind="stable")
            pixels = [
                (x0 + int(round(s.xaxis.p2c(float(x)))), y0 + int(round(s.yaxis.p2c(float(y)))))
                for x, y in zip(xs[live][order].tolist(), ys[live][order].tolist(), strict=True)
            ]
            draw_polyline(surface.rgba, pixels, parse_color(s.color), width=s.line_width)


def _column(points: Sequence[Sequence[Any]], index: int) -> np.ndarray:
    if not points:
        return np.asarray([], dtype=np.float64)
    out = np.empty(len(points), dtype=np.float64)
    for i, p in enumerate(points):
        try:
            out[i] = float(p[index])
        except (IndexError, TypeError, ValueError):
            out[i] = np.nan
    return out