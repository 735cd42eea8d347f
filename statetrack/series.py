from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any, NamedTuple, Protocol

from statetrack.colors import ColorSpec

if TYPE_CHECKING:
    from statetrack.host import Axis


class Sample(NamedTuple):
    position: float
    state: Any


@dataclass(frozen=True)
class FieldFormat:
    """Shape of one field in a datapoint record."""

    name: str
    number: bool = True
    required: bool = True


NUMERIC_RECORD_FORMAT: tuple[FieldFormat, ...] = (FieldFormat("x"), FieldFormat("y"))
STATE_RECORD_FORMAT: tuple[FieldFormat, ...] = (
    FieldFormat("position", number=False),
    FieldFormat("state", number=False),
)


@dataclass
class Datapoints:
    """Host point buffer for one series; data-phase hooks may replace it."""

    points: list[Any] = field(default_factory=list)
    pointsize: int = 2  # fields per record
    format: tuple[FieldFormat, ...] | None = None

    @property
    def is_numeric(self) -> bool:
        return self.format is None or all(f.number for f in self.format)


class StateSeriesLike(Protocol):
    state: bool
    state_label: str
    states: Mapping[Any, ColorSpec]
    data: Sequence[Any]


@dataclass
class Series:
    data: list[Any] = field(default_factory=list)
    label: str | None = None
    color: ColorSpec = (62, 149, 255, 255)
    line_width: int = 1
    state: bool = False
    state_label: str = ""
    states: dict[Any, ColorSpec] = field(default_factory=dict)
    xaxis_index: int = 1
    yaxis_index: int = 1
    xaxis: Axis | None = field(default=None, repr=False)
    yaxis: Axis | None = field(default=None, repr=False)
    datapoints: Datapoints = field(default_factory=Datapoints, repr=False)

    @classmethod
    def from_options(cls, options: Mapping[str, Any], defaults: Mapping[str, Any] | None = None) -> "Series":
        merged: dict[str, Any] = dict(defaults or {})
        merged.update(options)
        known = {f.name for f in fields(cls) if f.name not in {"xaxis", "yaxis", "datapoints"}}
        # "xaxis"/"yaxis" in options are axis numbers, as in the option vocabulary of chart hosts.
        if "xaxis" in merged:
            merged["xaxis_index"] = merged.pop("xaxis")
        if "yaxis" in merged:
            merged["yaxis_index"] = merged.pop("yaxis")
        unknown = sorted(set(merged) - known)
        if unknown:
            raise ValueError(f"unknown series option(s): {', '.join(unknown)}")
        merged["data"] = list(merged.get("data", []))
        merged["states"] = dict(merged.get("states", {}))
        return cls(**merged)


def is_state_series(series: Any) -> bool:
    return getattr(series, "state", False) is True
