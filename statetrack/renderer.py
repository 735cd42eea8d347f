from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from statetrack.colors import ColorSpec
from statetrack.series import StateSeriesLike, is_state_series
from statetrack.surface import DrawingSurface


class TrackAxis(Protocol):
    min: float
    max: float

    def p2c(self, value: float) -> float:
        ...


class TrackBox(Protocol):
    left: float
    top: float
    width: float
    height: float


class PixelOffset(Protocol):
    left: float
    top: float


@dataclass(frozen=True)
class TrackStyle:
    text_margin: int = 2
    caption_gap: int = 5
    ink: ColorSpec = "rgba(0,0,0,1)"
    unknown_state_fill: ColorSpec = "rgba(255,255,255,0)"


DEFAULT_TRACK_STYLE = TrackStyle()


@dataclass(frozen=True)
class TrackRect:
    """One painted interval: clipped domain extent plus its canvas rectangle."""

    index: int
    state: Any
    start: float
    end: float
    x: float
    y: float
    width: float
    height: float
    fill: ColorSpec

    @property
    def right(self) -> float:
        return self.x + self.width


def clip_interval(start: float, end: float, xmin: float, xmax: float) -> tuple[float, float] | None:
    """Clip ``[start, end]`` to ``[xmin, xmax]``; ``None`` when nothing is left."""
    if start > xmax or end < xmin:
        return None
    if start < xmin:
        start = xmin
    if end > xmax:
        end = xmax
    if end - start <= 0:
        return None
    return start, end


def layout_track(
    points: Sequence[Sequence[Any]],
    axis: TrackAxis,
    box: TrackBox,
    offset: PixelOffset,
    states: Mapping[Any, ColorSpec],
    style: TrackStyle = DEFAULT_TRACK_STYLE,
) -> list[TrackRect]:
    xmin = axis.min
    xmax = axis.max
    top = box.top - style.text_margin
    height = box.height + style.text_margin
    last = len(points) - 1
    rects: list[TrackRect] = []
    for i, point in enumerate(points):
        position, state = point[0], point[1]
        # the last interval runs to the edge of the visible range
        end = xmax if i == last else points[i + 1][0]
        clipped = clip_interval(position, end, xmin, xmax)
        if clipped is None:
            continue
        start, stop = clipped
        left_px = axis.p2c(start)
        width_px = axis.p2c(stop) - left_px
        fill = states[state] if state in states else style.unknown_state_fill
        rects.append(
            TrackRect(
                index=i,
                state=state,
                start=start,
                end=stop,
                x=left_px + offset.left,
                y=top,
                width=width_px,
                height=height,
                fill=fill,
            )
        )
    return rects


def draw_state_track(
    surface: DrawingSurface,
    series: StateSeriesLike,
    axis: TrackAxis,
    box: TrackBox,
    offset: PixelOffset,
    style: TrackStyle = DEFAULT_TRACK_STYLE,
) -> list[TrackRect]:
    """Paint the caption, interval rectangles and fitting state labels of a track.

    Returns the rectangles that were painted; unknown states are painted with
    ``style.unknown_state_fill`` rather than skipped.
    """
    if not is_state_series(series):
        return []

    rects = layout_track(series.data, axis, box, offset, series.states, style)
    baseline = box.top + box.height - style.text_margin
    surface.save()
    try:
        surface.fill_style = style.ink
        surface.text_align = "right"
        surface.fill_text(series.state_label, box.left - style.caption_gap, baseline)
        surface.text_align = "left"
        for rect in rects:
            surface.fill_style = rect.fill
            surface.fill_rect(rect.x, rect.y, rect.width, rect.height)
            label = str(rect.state)
            if surface.measure_text(label) < rect.width:
                surface.fill_style = style.ink
                surface.fill_text(label, rect.x + style.text_margin, baseline)
    finally:
        surface.restore()
    return rects


def hit_test(rects: Sequence[TrackRect], x_px: float) -> TrackRect | None:
    for rect in rects:
        if rect.x <= x_px < rect.right:
            return rect
    if rects and x_px == rects[-1].right:
        return rects[-1]
    return None
