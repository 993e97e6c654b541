"""Import error taxonomy and the translation from lower-level errors.

Loaders raise whatever their libraries raise. The blocks that talk to those
libraries are wrapped in ``translating(source)``, which looks the exception
up in ``TRANSLATIONS`` for that source and re-raises it as one of the four
ImageImportError kinds:

  FILE       plain file access: OSError -> IO
  CODEC      Pillow decoding: every failure -> DECODE
  CONTAINER  zip/manifest access: OSError -> IO, everything else -> UNSUPPORTED_FORMAT

Container errors other than I/O deliberately drop their detail.
"""

from __future__ import annotations

import enum
import zipfile
import zlib
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from xml.etree import ElementTree


class ImportErrorKind(enum.Enum):
    IO = 'io'
    DECODE = 'decode'
    UNSUPPORTED_FORMAT = 'unsupported-format'
    NO_CONTENT = 'no-content'


class ImageImportError(Exception):
    """Base class for every failure of ``load_image``."""

    kind: ImportErrorKind

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class ImportIOError(ImageImportError):
    kind = ImportErrorKind.IO


class DecodeError(ImageImportError):
    kind = ImportErrorKind.DECODE


class UnsupportedFormatError(ImageImportError):
    kind = ImportErrorKind.UNSUPPORTED_FORMAT


class NoContentError(ImageImportError):
    kind = ImportErrorKind.NO_CONTENT


class ErrorSource(enum.Enum):
    FILE = 'file'
    CODEC = 'codec'
    CONTAINER = 'container'


def from_io_error(err: OSError) -> ImageImportError:
    return ImportIOError(str(err) or type(err).__name__, err)


def from_codec_error(err: Exception) -> ImageImportError:
    return DecodeError(f'cannot decode image: {err}', err)


def from_container_error(err: Exception) -> ImageImportError:
    return UnsupportedFormatError('unsupported or damaged container')


# Pillow's plugins raise assorted exception types on malformed data, IndexError
# and ZeroDivisionError among them, so the CODEC row takes any Exception. It
# only wraps calls into Pillow.
CODEC_EXCEPTIONS: tuple[type[Exception], ...] = (Exception,)

# Non-I/O failures of zipfile, its decompressors and the stack.xml parser.
# Corrupt deflate data raises zlib.error; a truncated stream raises EOFError.
CONTAINER_EXCEPTIONS: tuple[type[Exception], ...] = (
    zipfile.BadZipFile,
    zipfile.LargeZipFile,
    zlib.error,
    EOFError,
    ElementTree.ParseError,
    KeyError,
    NotImplementedError,
    RuntimeError,
)

Translation = tuple[tuple[type[Exception], ...], Callable[..., ImageImportError]]

TRANSLATIONS: dict[ErrorSource, tuple[Translation, ...]] = {
    ErrorSource.FILE: (((OSError,), from_io_error),),
    ErrorSource.CODEC: ((CODEC_EXCEPTIONS, from_codec_error),),
    ErrorSource.CONTAINER: (
        ((OSError,), from_io_error),
        (CONTAINER_EXCEPTIONS, from_container_error),
    ),
}


def translate_error(err: BaseException, source: ErrorSource) -> ImageImportError | None:
    """Map ``err`` to an ImageImportError, or None if no row matches.

    ImageImportError instances are returned unchanged.
    """
    if isinstance(err, ImageImportError):
        return err
    for types, mapper in TRANSLATIONS[source]:
        if isinstance(err, types):
            return mapper(err)
    return None


@contextmanager
def translating(source: ErrorSource) -> Iterator[None]:
    """Re-raise exceptions from the wrapped block as ImageImportError."""
    try:
        yield
    except Exception as err:
        translated = translate_error(err, source)
        if translated is None or translated is err:
            raise
        raise translated from translated.cause
