from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Protocol

import numpy as np
from PIL import Image

from statetrack.colors import BLACK, RGBA, ColorSpec, parse_color
from statetrack.raster import draw_text, fill_rect, new_canvas, text_advance, text_size
from statetrack.raster.draw_text import DEFAULT_FONT_FAMILY, DEFAULT_FONT_SIZE_PX

TextAlign = Literal["left", "right"]


class DrawingSurface(Protocol):
    """Canvas-like 2D surface a track is painted onto.

    ``fill_text`` places the text's bottom edge on ``y`` and anchors it at ``x``
    according to ``text_align``.
    """

    fill_style: ColorSpec
    text_align: TextAlign

    def save(self) -> None:
        ...

    def restore(self) -> None:
        ...

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        ...

    def fill_text(self, text: str, x: float, y: float) -> None:
        ...

    def measure_text(self, text: str) -> float:
        ...


@dataclass(frozen=True)
class PaintState:
    fill_style: ColorSpec
    text_align: TextAlign


@dataclass
class RasterSurface:
    """``DrawingSurface`` backed by an ``(H, W, 4)`` uint8 numpy frame."""

    width: int
    height: int
    background: RGBA = (255, 255, 255, 255)
    font_family: str = DEFAULT_FONT_FAMILY
    font_size_px: float = DEFAULT_FONT_SIZE_PX
    fill_style: ColorSpec = BLACK
    text_align: TextAlign = "left"
    rgba: np.ndarray = field(init=False, repr=False)
    _stack: list[PaintState] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("surface width and height must be > 0")
        self.rgba = new_canvas(self.width, self.height, color=self.background)

    def save(self) -> None:
        self._stack.append(PaintState(fill_style=self.fill_style, text_align=self.text_align))

    def restore(self) -> None:
        if not self._stack:
            return
        state = self._stack.pop()
        self.fill_style = state.fill_style
        self.text_align = state.text_align

    @property
    def save_depth(self) -> int:
        return len(self._stack)

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        x0 = int(round(x))
        y0 = int(round(y))
        x1 = int(round(x + width))
        y1 = int(round(y + height))
        fill_rect(self.rgba, x0, y0, x1, y1, parse_color(self.fill_style))

    def fill_text(self, text: str, x: float, y: float) -> None:
        if not text:
            return
        _, h = text_size(text, font_family=self.font_family, font_size_px=self.font_size_px)
        if self.text_align == "right":
            x -= self.measure_text(text)
        left = int(round(x))
        top = int(round(y)) - h
        draw_text(
            self.rgba,
            left,
            top,
            text,
            parse_color(self.fill_style),
            font_family=self.font_family,
            font_size_px=self.font_size_px,
        )

    def measure_text(self, text: str) -> float:
        return text_advance(text, font_family=self.font_family, font_size_px=self.font_size_px)

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.rgba)

    def save_png(self, path: str | Path) -> Path:
        out = Path(path)
        self.to_image().save(out, format="PNG")
        return out
