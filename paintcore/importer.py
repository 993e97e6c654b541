"""Image import front-end.

``load_image`` picks a loader from the file extension:

  .ora        OpenRaster loader
  .gif        GIF animation loader
  any other   flat image loader (Pillow identifies the actual format)
  none        UnsupportedFormatError, without touching the filesystem

Matching folds ASCII case only. Loader failures reach the caller as
ImageImportError; nothing is retried and no other loader is tried.
"""

from __future__ import annotations

import enum
import os
import string
from pathlib import PurePath

from paintcore.core.env import ImportSettings
from paintcore.core.errors import ErrorSource, UnsupportedFormatError, translating
from paintcore.core.types import LayerStack
from paintcore.loaders import flat, gif, ora

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


class ImportFormat(enum.Enum):
    OPENRASTER = 'ora'
    GIF = 'gif'
    FLAT = 'flat'


def _extension(path: str | os.PathLike) -> str | None:
    suffix = PurePath(os.fsdecode(path)).suffix
    return suffix[1:].translate(_ASCII_LOWER) or None


def format_for_path(path: str | os.PathLike) -> ImportFormat | None:
    """The loader ``load_image`` would use for ``path``, or None."""
    match _extension(path):
        case None:
            return None
        case 'ora':
            return ImportFormat.OPENRASTER
        case 'gif':
            return ImportFormat.GIF
        case _:
            return ImportFormat.FLAT


def load_image(path: str | os.PathLike, settings: ImportSettings | None = None) -> LayerStack:
    """Load an image file as a LayerStack.

    ``settings`` is handed to the loader unchanged; no process-wide state
    is touched, so concurrent calls are independent.

    Raises ImageImportError (one of ImportIOError, DecodeError,
    UnsupportedFormatError, NoContentError).
    """
    settings = settings or ImportSettings()
    fmt = format_for_path(path)
    with translating(ErrorSource.FILE):
        match fmt:
            case ImportFormat.OPENRASTER:
                return ora.load_openraster_image(path, settings)
            case ImportFormat.GIF:
                return gif.load_gif_animation(path, settings)
            case ImportFormat.FLAT:
                return flat.load_flat_image(path, settings)
            case _:
                raise UnsupportedFormatError(f'no file extension: {os.fsdecode(path)}')
