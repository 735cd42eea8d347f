from __future__ import annotations

from functools import lru_cache
import re
from typing import Union

RGBA = tuple[int, int, int, int]
ColorSpec = Union[str, tuple[int, int, int], tuple[int, int, int, int]]

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")
_FUNC_COLOR = re.compile(r"^(rgba?)\(\s*([^)]*)\)$")

TRANSPARENT: RGBA = (255, 255, 255, 0)
BLACK: RGBA = (0, 0, 0, 255)


def parse_color(color: ColorSpec) -> RGBA:
    """Resolve a colour spec to an 8-bit RGBA tuple.

    Accepts ``"#RRGGBB"``, ``"#RRGGBBAA"``, ``"rgb(r, g, b)"``,
    ``"rgba(r, g, b, a)"`` (alpha in [0, 1]) and 3/4-tuples of ints.
    """
    if isinstance(color, str):
        return _parse_color_string(color.strip())
    if len(color) == 3:
        r, g, b = color
        return (_channel(r), _channel(g), _channel(b), 255)
    if len(color) == 4:
        r, g, b, a = color
        return (_channel(r), _channel(g), _channel(b), _channel(a))
    raise ValueError(f"color tuple must have 3 or 4 channels: {color!r}")


@lru_cache(maxsize=256)
def _parse_color_string(value: str) -> RGBA:
    if _HEX_COLOR.match(value):
        r = int(value[1:3], 16)
        g = int(value[3:5], 16)
        b = int(value[5:7], 16)
        a = int(value[7:9], 16) if len(value) == 9 else 255
        return (r, g, b, a)

    match = _FUNC_COLOR.match(value.lower())
    if match is None:
        raise ValueError(f"unrecognized color: {value!r}")
    kind, body = match.groups()
    parts = [p.strip() for p in body.split(",")]
    expected = 4 if kind == "rgba" else 3
    if len(parts) != expected:
        raise ValueError(f"{kind}() expects {expected} components: {value!r}")
    try:
        r, g, b = (_channel(float(p)) for p in parts[:3])
        alpha = float(parts[3]) if kind == "rgba" else 1.0
    except ValueError as exc:
        raise ValueError(f"non-numeric color component in {value!r}") from exc
    a = int(round(max(0.0, min(1.0, alpha)) * 255))
    return (r, g, b, a)


def _channel(value: float) -> int:
    return int(max(0, min(255, round(value))))
