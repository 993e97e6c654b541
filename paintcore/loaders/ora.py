"""OpenRaster import.

An .ora file is a zip archive holding a ``mimetype`` member, a ``stack.xml``
manifest and one PNG per layer. The manifest lists layers topmost first;
nested <stack> groups are flattened in document order. LayerStack wants the
bottom layer first, so the order is reversed at the end.
"""

from __future__ import annotations

import io
import math
import os
import zipfile
from collections.abc import Iterator
from dataclasses import dataclass
from xml.etree import ElementTree

import numpy as np
from PIL import Image

from paintcore.core.color import premultiply_rgba
from paintcore.core.env import ImportSettings
from paintcore.core.errors import (
    ErrorSource,
    NoContentError,
    UnsupportedFormatError,
    translating,
)
from paintcore.core.types import DEFAULT_BLEND_MODE, Layer, LayerStack

MIMETYPE = b'image/openraster'


@dataclass
class _LayerEntry:
    src: str
    name: str
    x: int
    y: int
    opacity: float
    hidden: bool
    composite_op: str


def _int_attr(element: ElementTree.Element, name: str, default: int = 0) -> int:
    try:
        return int(float(element.get(name, default)))
    except (ValueError, OverflowError):
        return default


def _opacity(element: ElementTree.Element) -> float:
    try:
        value = float(element.get('opacity', 1.0))
    except ValueError:
        return 1.0
    if math.isnan(value):
        return 1.0
    return min(max(value, 0.0), 1.0)


def _walk(stack: ElementTree.Element) -> Iterator[_LayerEntry]:
    for child in stack:
        if child.tag == 'stack':
            yield from _walk(child)
        elif child.tag == 'layer' and child.get('src'):
            yield _LayerEntry(
                src=child.get('src', ''),
                name=child.get('name', ''),
                x=_int_attr(child, 'x'),
                y=_int_attr(child, 'y'),
                opacity=_opacity(child),
                hidden=child.get('visibility') == 'hidden',
                composite_op=child.get('composite-op') or DEFAULT_BLEND_MODE,
            )


def _canvas_size(root: ElementTree.Element) -> tuple[int, int]:
    if root.tag != 'image':
        raise UnsupportedFormatError('stack.xml has no <image> root')
    try:
        width = int(root.get('w', ''))
        height = int(root.get('h', ''))
    except ValueError:
        raise UnsupportedFormatError('stack.xml has an invalid canvas size') from None
    if width < 1 or height < 1:
        raise UnsupportedFormatError(f'invalid canvas size {width}x{height}')
    return width, height


def _decode_png(data: bytes, settings: ImportSettings) -> np.ndarray:
    with translating(ErrorSource.CODEC):
        with Image.open(io.BytesIO(data)) as image:
            settings.check_image_size(*image.size)
            image.load()
            rgba = np.asarray(image.convert('RGBA'))
    return premultiply_rgba(rgba)


def load_openraster_image(path: str | os.PathLike, settings: ImportSettings | None = None) -> LayerStack:
    settings = settings or ImportSettings()

    with translating(ErrorSource.CONTAINER):
        with zipfile.ZipFile(path) as archive:
            if archive.read('mimetype').strip() != MIMETYPE:
                raise UnsupportedFormatError('not an OpenRaster archive')
            root = ElementTree.fromstring(archive.read('stack.xml'))
            width, height = _canvas_size(root)
            stack = root.find('stack')
            entries = list(_walk(stack)) if stack is not None else []
            sources = {entry.src: archive.read(entry.src) for entry in entries}

    if not entries:
        raise NoContentError(f'no layers in {os.fspath(path)}')

    layers = [
        Layer(
            title=entry.name or f'Layer {index}',
            pixels=_decode_png(sources[entry.src], settings),
            x=entry.x,
            y=entry.y,
            opacity=entry.opacity,
            hidden=entry.hidden,
            blend_mode=entry.composite_op,
        )
        for index, entry in enumerate(reversed(entries), start=1)
    ]
    return LayerStack(width=width, height=height, layers=layers, source_format='ora')
