from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
import logging
from pathlib import Path
import tomllib
from typing import Any

from statetrack.adapters import normalize_samples
from statetrack.colors import ColorSpec, parse_color
from statetrack.errors import PlotDataError, TrackConfigError
from statetrack.renderer import DEFAULT_TRACK_STYLE, TrackStyle
from statetrack.series import Sample

LOGGER = logging.getLogger(__name__)

PLOT_KEYS = frozenset({"width", "height", "title", "xmin", "xmax"})
SERIES_KEYS = frozenset({"label", "state", "state_label", "states", "data", "xaxis", "yaxis", "color", "line_width"})


@dataclass(frozen=True)
class PlotConfig:
    width: int = 800
    height: int = 240
    title: str = ""
    xmin: float | None = None
    xmax: float | None = None
    style: TrackStyle = DEFAULT_TRACK_STYLE
    series: tuple[dict[str, Any], ...] = field(default_factory=tuple)

    def axis_options(self) -> dict[str, Any]:
        xaxis: dict[str, Any] = {}
        if self.xmin is not None:
            xaxis["min"] = self.xmin
        if self.xmax is not None:
            xaxis["max"] = self.xmax
        return {"xaxis": xaxis} if xaxis else {}

    def state_series(self) -> list[dict[str, Any]]:
        return [s for s in self.series if s.get("state") is True]


def validate_style_overrides(overrides: Mapping[str, Any] | None = None) -> TrackStyle:
    """Merge style overrides into the default ``TrackStyle``, rejecting unknown keys."""
    raw: dict[str, Any] = asdict(DEFAULT_TRACK_STYLE)
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise TrackConfigError(f"unknown style key: {key}")
            raw[key] = value

    for key in ("text_margin", "caption_gap"):
        value = raw[key]
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise TrackConfigError(f"style `{key}` must be a non-negative integer")
    for key in ("ink", "unknown_state_fill"):
        raw[key] = _coerce_color(raw[key], where=f"style `{key}`")

    return TrackStyle(
        text_margin=int(raw["text_margin"]),
        caption_gap=int(raw["caption_gap"]),
        ink=raw["ink"],
        unknown_state_fill=raw["unknown_state_fill"],
    )


def load_plot_config(path: str | Path) -> PlotConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"plot config not found: {config_path}")
    with config_path.open("rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise TrackConfigError(f"invalid TOML in {config_path}: {exc}") from exc
    config = parse_plot_config(raw)
    LOGGER.info("loaded plot config %s (%d series)", config_path, len(config.series))
    return config


def parse_plot_config(raw: Mapping[str, Any]) -> PlotConfig:
    unknown = sorted(set(raw) - {"plot", "style", "series"})
    if unknown:
        raise TrackConfigError(f"unknown config table(s): {', '.join(unknown)}")

    plot = _table(raw.get("plot", {}), "plot")
    bad = sorted(set(plot) - PLOT_KEYS)
    if bad:
        raise TrackConfigError(f"unknown [plot] key(s): {', '.join(bad)}")
    width = _positive_int(plot.get("width", 800), "plot.width")
    height = _positive_int(plot.get("height", 240), "plot.height")
    title = plot.get("title", "")
    if not isinstance(title, str):
        raise TrackConfigError("plot.title must be a string")
    xmin = _optional_number(plot.get("xmin"), "plot.xmin")
    xmax = _optional_number(plot.get("xmax"), "plot.xmax")
    if xmin is not None and xmax is not None and xmax <= xmin:
        raise TrackConfigError("plot.xmax must be greater than plot.xmin")

    style = validate_style_overrides(_table(raw.get("style", {}), "style"))

    series_raw = raw.get("series", [])
    if not isinstance(series_raw, list):
        raise TrackConfigError("`series` must be an array of tables ([[series]])")
    series = tuple(_parse_series(_table(item, f"series[{i}]"), i) for i, item in enumerate(series_raw))
    return PlotConfig(width=width, height=height, title=title, xmin=xmin, xmax=xmax, style=style, series=series)


def _parse_series(item: Mapping[str, Any], index: int) -> dict[str, Any]:
    where = f"series[{index}]"
    bad = sorted(set(item) - SERIES_KEYS)
    if bad:
        raise TrackConfigError(f"unknown {where} key(s): {', '.join(bad)}")
    out: dict[str, Any] = {}
    state = item.get("state", False)
    if not isinstance(state, bool):
        raise TrackConfigError(f"{where}.state must be a boolean")
    out["state"] = state
    for key in ("label", "state_label"):
        if key in item:
            if not isinstance(item[key], str):
                raise TrackConfigError(f"{where}.{key} must be a string")
            out[key] = item[key]
    for key in ("xaxis", "yaxis", "line_width"):
        if key in item:
            out[key] = _positive_int(item[key], f"{where}.{key}")
    if "color" in item:
        out["color"] = _coerce_color(item["color"], where=f"{where}.color")
    states = _table(item.get("states", {}), f"{where}.states")
    out["states"] = {name: _coerce_color(color, where=f"{where}.states.{name}") for name, color in states.items()}
    try:
        samples = normalize_samples(item.get("data", []))
    except PlotDataError as exc:
        raise TrackConfigError(f"{where}.data: {exc}") from exc
    # TOML keys are strings, so state values are matched against `states` as strings
    if state:
        out["data"] = [Sample(s.position, str(s.state)) for s in samples]
    else:
        out["data"] = [[s.position, s.state] for s in samples]
    return out


def _table(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise TrackConfigError(f"`{where}` must be a table")
    return value


def _coerce_color(value: Any, *, where: str) -> ColorSpec:
    if isinstance(value, list):
        value = tuple(value)
    try:
        parse_color(value)
    except (TypeError, ValueError) as exc:
        raise TrackConfigError(f"{where} is not a valid color: {value!r}") from exc
    return value


def _positive_int(value: Any, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise TrackConfigError(f"{where} must be a positive integer")
    return value


def _optional_number(value: Any, where: str) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TrackConfigError(f"{where} must be a number")
    return float(value)
