"""Single-layer import of any still image format Pillow can decode."""

from __future__ import annotations

import io
import os
from pathlib import Path

import numpy as np
from PIL import Image, ImageOps

from paintcore.core.color import premultiply_rgba
from paintcore.core.env import ImportSettings
from paintcore.core.errors import ErrorSource, translating
from paintcore.core.types import Layer, LayerStack

LAYER_TITLE = 'Layer 1'


def load_flat_image(path: str | os.PathLike, settings: ImportSettings | None = None) -> LayerStack:
    settings = settings or ImportSettings()

    with translating(ErrorSource.FILE):
        data = Path(path).read_bytes()

    with translating(ErrorSource.CODEC):
        with Image.open(io.BytesIO(data)) as image:
            settings.check_image_size(*image.size)
            image.load()
            source_format = (image.format or 'unknown').lower()
            rgba = np.asarray(ImageOps.exif_transpose(image).convert('RGBA'))

    height, width = rgba.shape[:2]
    layer = Layer(title=LAYER_TITLE, pixels=premultiply_rgba(rgba))
    return LayerStack(width=width, height=height, layers=[layer], source_format=source_format)
