"""Layered canvas types produced by the loaders: Layer and LayerStack."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

import numpy as np

from paintcore.core.color import ALPHA_CHANNEL, ZERO_PIXEL, Color, Pixel

DEFAULT_BLEND_MODE = 'svg:src-over'


@dataclass
class Layer:
    """One raster layer.

    ``pixels`` has shape (height, width, 4), dtype uint8, premultiplied and
    in Pixel byte order (blue, green, red, alpha). ``x`` and ``y`` place the
    layer's top-left corner on the canvas.
    """

    title: str
    pixels: np.ndarray
    x: int = 0
    y: int = 0
    opacity: float = 1.0
    hidden: bool = False
    blend_mode: str = DEFAULT_BLEND_MODE

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def pixel_at(self, x: int, y: int) -> Pixel:
        """Pixel at canvas coordinate (x, y); ZERO_PIXEL outside the layer."""
        lx = x - self.x
        ly = y - self.y
        if not (0 <= lx < self.width and 0 <= ly < self.height):
            return ZERO_PIXEL
        return self.pixels[ly, lx].tobytes()

    def color_at(self, x: int, y: int) -> Color:
        return Color.from_pixel(self.pixel_at(x, y))

    def is_blank(self) -> bool:
        return not self.pixels[..., ALPHA_CHANNEL].any()


@dataclass
class LayerStack:
    """A canvas and its layers, bottom layer first."""

    width: int
    height: int
    layers: list[Layer] = field(default_factory=list)
    source_format: str = ''

    def __len__(self) -> int:
        return len(self.layers)

    def __iter__(self) -> Iterator[Layer]:
        return iter(self.layers)

    def is_empty(self) -> bool:
        return not self.layers
