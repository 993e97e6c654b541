"""paintcore: premultiplied colour model and layered image import."""

from paintcore.core.color import WHITE_PIXEL, ZERO_PIXEL, Color, Pixel
from paintcore.core.errors import (
    DecodeError,
    ImageImportError,
    ImportErrorKind,
    ImportIOError,
    NoContentError,
    UnsupportedFormatError,
)
from paintcore.core.types import Layer, LayerStack
from paintcore.importer import ImportFormat, format_for_path, load_image

__all__ = [
    'Color',
    'DecodeError',
    'ImageImportError',
    'ImportErrorKind',
    'ImportFormat',
    'ImportIOError',
    'Layer',
    'LayerStack',
    'NoContentError',
    'Pixel',
    'UnsupportedFormatError',
    'WHITE_PIXEL',
    'ZERO_PIXEL',
    'format_for_path',
    'load_image',
]
