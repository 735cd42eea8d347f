from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from statetrack.colors import RGBA
from statetrack.raster.canvas import draw_pixel


def draw_polyline(dst: np.ndarray, points: Sequence[tuple[int, int]], color: RGBA, width: int = 1) -> None:
    if len(points) < 2 or color[3] == 0:
        return
    radius = max(0, width // 2)
    for (x0, y0), (x1, y1) in zip(points[:-1], points[1:], strict=False):
        for x, y in _segment_pixels(int(x0), int(y0), int(x1), int(y1)):
            for yy in range(y - radius, y + radius + 1):
                for xx in range(x - radius, x + radius + 1):
                    draw_pixel(dst, xx, yy, color)


def _segment_pixels(x0: int, y0: int, x1: int, y1: int) -> list[tuple[int, int]]:
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    out: list[tuple[int, int]] = []
    while True:
        out.append((x0, y0))
        if x0 == x1 and y0 == y1:
            return out
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy
