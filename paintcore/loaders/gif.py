"""GIF animation import: one layer per frame.

The first frame is visible, later frames are hidden so the canvas shows a
single still image. Frames beyond ImportSettings.max_frames are dropped.
"""

from __future__ import annotations

import io
import os
from pathlib import Path

import numpy as np
from PIL import Image, ImageSequence

from paintcore.core.color import premultiply_rgba
from paintcore.core.env import ImportSettings
from paintcore.core.errors import ErrorSource, NoContentError, translating
from paintcore.core.types import Layer, LayerStack


def load_gif_animation(path: str | os.PathLike, settings: ImportSettings | None = None) -> LayerStack:
    settings = settings or ImportSettings()

    with translating(ErrorSource.FILE):
        data = Path(path).read_bytes()

    frames: list[np.ndarray] = []
    with translating(ErrorSource.CODEC):
        with Image.open(io.BytesIO(data)) as image:
            width, height = image.size
            settings.check_image_size(width, height)
            for frame in ImageSequence.Iterator(image):
                if len(frames) >= settings.max_frames:
                    break
                frames.append(np.asarray(frame.convert('RGBA')))

    if not frames:
        raise NoContentError(f'no frames in {os.fspath(path)}')

    layers = [
        Layer(title=f'Frame {index}', pixels=premultiply_rgba(rgba), hidden=index > 1)
        for index, rgba in enumerate(frames, start=1)
    ]
    return LayerStack(width=width, height=height, layers=layers, source_format='gif')
