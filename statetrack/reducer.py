from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from statetrack.series import STATE_RECORD_FORMAT, FieldFormat, Sample, StateSeriesLike, is_state_series


class _TickOptions(Protocol):
    ticks: list[float] | None


class _AxisWithOptions(Protocol):
    options: _TickOptions


@dataclass(frozen=True)
class ReducedTrack:
    """Result of reducing one state series.

    ``hide_ticks`` tells the host that the series' dedicated axis is used as the
    track's paint area and must not draw ticks of its own.
    """

    points: list[Sample]
    format: tuple[FieldFormat, ...] = STATE_RECORD_FORMAT
    hide_ticks: bool = True


def reduce_samples(samples: Iterable[Sequence[Any]]) -> list[Sample]:
    """Collapse ``(position, state)`` samples to their state-change points.

    Samples are stably sorted by position, then a sample is kept only when its
    state differs from the last kept one. The first sample is always kept.
    """
    ordered = sorted((Sample(s[0], s[1]) for s in samples), key=lambda s: s.position)
    reduced: list[Sample] = []
    for sample in ordered:
        if not reduced or sample.state != reduced[-1].state:
            reduced.append(sample)
    return reduced


def reduce_series(series: StateSeriesLike) -> ReducedTrack | None:
    if not is_state_series(series):
        return None
    return ReducedTrack(points=reduce_samples(series.data))


def hide_axis_ticks(axis: _AxisWithOptions) -> None:
    axis.options.ticks = []
