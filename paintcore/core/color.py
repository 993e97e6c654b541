"""Colour values and premultiplied pixel bytes.

A Color is a straight (non-premultiplied) RGBA value with float32 channels.
A Pixel is 4 bytes in blue, green, red, alpha order with the colour channels
premultiplied by alpha. That byte order is shared with the rest of the engine
and must not change.

All arithmetic runs on numpy float32 scalars so that every truncation lands
on the same byte a 32-bit float implementation would produce.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import ClassVar, Sequence

import numpy as np

Pixel = bytes

BLUE_CHANNEL = 0
GREEN_CHANNEL = 1
RED_CHANNEL = 2
ALPHA_CHANNEL = 3

ZERO_PIXEL: Pixel = bytes((0, 0, 0, 0))
WHITE_PIXEL: Pixel = bytes((255, 255, 255, 255))

_F32 = np.float32
_ZERO = _F32(0.0)
_ONE = _F32(1.0)
_TWO = _F32(2.0)
_SIX = _F32(6.0)
_SIXTY = _F32(60.0)
_F255 = _F32(255.0)
_MIN_ALPHA = _ONE / _F255

_LUMA_R = _F32(0.216)
_LUMA_G = _F32(0.7152)
_LUMA_B = _F32(0.0722)
_DARK_THRESHOLD = _F32(0.5)

_U8_MAX = 0xFF
_U32_MAX = 0xFFFFFFFF


def _saturate(value: float, upper: int) -> int:
    """Truncate toward zero, clamped to [0, upper]. NaN becomes 0."""
    v = float(value)
    if math.isnan(v) or v <= 0.0:
        return 0
    if v >= upper:
        return upper
    return int(v)


@dataclass(frozen=True, eq=False)
class Color:
    """A straight-alpha RGBA colour with channels nominally in [0, 1].

    Two colours are equal when their premultiplied pixel encodings are equal,
    so values that only differ below 8-bit precision compare equal.
    """

    r: float
    g: float
    b: float
    a: float

    TRANSPARENT: ClassVar[Color]
    BLACK: ClassVar[Color]
    WHITE: ClassVar[Color]

    def __post_init__(self) -> None:
        for name in ('r', 'g', 'b', 'a'):
            object.__setattr__(self, name, _F32(getattr(self, name)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Color):
            return NotImplemented
        return self.as_pixel() == other.as_pixel()

    def __hash__(self) -> int:
        return hash(self.as_pixel())

    def __repr__(self) -> str:
        return f'Color(r={float(self.r)!r}, g={float(self.g)!r}, b={float(self.b)!r}, a={float(self.a)!r})'

    @classmethod
    def rgb8(cls, r: int, g: int, b: int) -> Color:
        """Opaque colour from 8-bit channel values."""
        return cls(_F32(r) / _F255, _F32(g) / _F255, _F32(b) / _F255, _ONE)

    @classmethod
    def from_argb32(cls, packed: int) -> Color:
        """Colour from a packed 0xAARRGGBB value (not premultiplied)."""
        return cls(
            _F32((packed & 0x00FF0000) >> 16) / _F255,
            _F32((packed & 0x0000FF00) >> 8) / _F255,
            _F32(packed & 0x000000FF) / _F255,
            _F32((packed & 0xFF000000) >> 24) / _F255,
        )

    @staticmethod
    def argb32_alpha(packed: int) -> int:
        return (packed & 0xFF000000) >> 24

    @classmethod
    def from_hsv(cls, h: float, s: float, v: float) -> Color:
        """Opaque colour from hue in degrees, saturation and value in [0, 1].

        The sector is ``fmod(h / 60, 6)``; each sector is the half-open
        interval [k, k + 1). Anything outside [0, 6) (negative hues past the
        first sector, NaN) leaves only the match value ``m``.
        """
        h, s, v = _F32(h), _F32(s), _F32(v)
        c = v * s
        with np.errstate(invalid='ignore'):
            hp = np.fmod(h / _SIXTY, _SIX)
            x = c * (_ONE - abs(np.fmod(hp, _TWO) - _ONE))
        m = v - c

        if _ZERO <= hp < 1:
            r, g, b = c, x, _ZERO
        elif hp < 2:
            r, g, b = x, c, _ZERO
        elif hp < 3:
            r, g, b = _ZERO, c, x
        elif hp < 4:
            r, g, b = _ZERO, x, c
        elif hp < 5:
            r, g, b = x, _ZERO, c
        elif hp < 6:
            r, g, b = c, _ZERO, x
        else:
            r, g, b = _ZERO, _ZERO, _ZERO
        return cls(r + m, g + m, b + m, _ONE)

    @classmethod
    def from_pixel(cls, p: Sequence[int]) -> Color:
        """Colour from a premultiplied pixel.

        The colour channels are scaled by the reciprocal of the raw alpha
        byte. A zero alpha byte always gives TRANSPARENT.
        """
        alpha = p[ALPHA_CHANNEL]
        if alpha == 0:
            return cls.TRANSPARENT
        af = _ONE / _F32(alpha)
        return cls(
            _F32(p[RED_CHANNEL]) * af,
            _F32(p[GREEN_CHANNEL]) * af,
            _F32(p[BLUE_CHANNEL]) * af,
            _F32(alpha) / _F255,
        )

    @classmethod
    def from_premultiplied_pixel(cls, p: Sequence[int]) -> Color:
        """Pixel bytes as-is, premultiplication included."""
        return cls(
            _F32(p[RED_CHANNEL]) / _F255,
            _F32(p[GREEN_CHANNEL]) / _F255,
            _F32(p[BLUE_CHANNEL]) / _F255,
            _F32(p[ALPHA_CHANNEL]) / _F255,
        )

    def as_argb32(self) -> int:
        """Packed 0xAARRGGBB value of the straight colour."""
        return (
            (_saturate(self.r * _F255, _U32_MAX) << 16)
            | (_saturate(self.g * _F255, _U32_MAX) << 8)
            | _saturate(self.b * _F255, _U32_MAX)
            | (_saturate(self.a * _F255, _U32_MAX) << 24)
        ) & _U32_MAX

    def as_pixel(self) -> Pixel:
        """Premultiplied pixel bytes, blue first."""
        af = self.a * _F255
        return bytes(
            (
                _saturate(self.b * af, _U8_MAX),
                _saturate(self.g * af, _U8_MAX),
                _saturate(self.r * af, _U8_MAX),
                _saturate(self.a * _F255, _U8_MAX),
            )
        )

    def is_transparent(self) -> bool:
        return bool(self.a < _MIN_ALPHA)

    def is_dark(self) -> bool:
        """Is this a perceptually dark colour."""
        luminance = self.r * _LUMA_R + self.g * _LUMA_G + self.b * _LUMA_B
        return bool(luminance <= _DARK_THRESHOLD)

    def hex(self) -> str:
        """``#rrggbb`` for opaque colours, ``#aarrggbb`` otherwise."""
        argb = self.as_argb32()
        if Color.argb32_alpha(argb) == 0xFF:
            return f'#{argb & 0xFFFFFF:06x}'
        return f'#{argb:08x}'


Color.TRANSPARENT = Color(0.0, 0.0, 0.0, 0.0)
Color.BLACK = Color(0.0, 0.0, 0.0, 1.0)
Color.WHITE = Color(1.0, 1.0, 1.0, 1.0)


_HEX_RE = re.compile(r'#?([0-9a-fA-F]{6}|[0-9a-fA-F]{8})')
_HSV_RE = re.compile(r'hsv\(\s*([-+\d.eE]+)\s*,\s*([-+\d.eE]+)\s*,\s*([-+\d.eE]+)\s*\)')


def parse_color(text: str) -> Color:
    """Parse ``#rrggbb``, ``#aarrggbb`` or ``hsv(h, s, v)``.

    Raises ValueError for anything else.
    """
    text = text.strip()
    m = _HEX_RE.fullmatch(text)
    if m:
        digits = m.group(1)
        packed = int(digits, 16)
        if len(digits) == 6:
            packed |= 0xFF000000
        return Color.from_argb32(packed)
    m = _HSV_RE.fullmatch(text)
    if m:
        try:
            h, s, v = (float(g) for g in m.groups())
        except ValueError:
            raise ValueError(f'invalid hsv colour: {text!r}') from None
        return Color.from_hsv(h, s, v)
    raise ValueError(f'invalid colour: {text!r}')


def premultiply_rgba(rgba: np.ndarray) -> np.ndarray:
    """Convert straight RGBA bytes of shape (H, W, 4) to premultiplied pixels.

    Every output pixel equals ``Color.from_argb32(...).as_pixel()`` for the
    corresponding input pixel; the arithmetic is the same float32 sequence,
    just vectorized.
    """
    if rgba.ndim != 3 or rgba.shape[2] != 4:
        raise ValueError(f'expected an (H, W, 4) array, got shape {rgba.shape}')
    channels = rgba.astype(np.float32) / _F255
    af = channels[..., 3] * _F255

    out = np.empty(rgba.shape, dtype=np.uint8)
    out[..., BLUE_CHANNEL] = np.clip(channels[..., 2] * af, 0, 255).astype(np.uint8)
    out[..., GREEN_CHANNEL] = np.clip(channels[..., 1] * af, 0, 255).astype(np.uint8)
    out[..., RED_CHANNEL] = np.clip(channels[..., 0] * af, 0, 255).astype(np.uint8)
    out[..., ALPHA_CHANNEL] = np.clip(af, 0, 255).astype(np.uint8)
    return out
