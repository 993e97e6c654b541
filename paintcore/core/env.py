"""Configuration for paintcore: .env loading and import settings.

Variables are resolved in this order (first wins):
  1. The process environment.
  2. The .env file given with --env-file.
  3. The nearest .env found walking up from the cwd, never past a .git
     directory or file.

A .env line is ``NAME=value`` with an optional leading ``export``. NAME must
be a shell identifier; a value wrapped in matching quotes loses them. Any
other line is ignored.

Recognised variables:
  PAINTCORE_MAX_PIXELS   largest image (width * height) a loader accepts
  PAINTCORE_MAX_FRAMES   maximum number of GIF frames imported as layers
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path

from paintcore.core.errors import DecodeError

ENV_MAX_PIXELS = 'PAINTCORE_MAX_PIXELS'
ENV_MAX_FRAMES = 'PAINTCORE_MAX_FRAMES'

DEFAULT_MAX_FRAMES = 1000

_ASSIGNMENT = re.compile(r'(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*)')
_QUOTED = re.compile(r'(["\'])(.*)\1', re.DOTALL)


def _find_dotenv(start: Path) -> Path | None:
    """Return the closest .env at or above ``start`` inside the repository."""
    for directory in (start.resolve(), *start.resolve().parents):
        candidate = directory / '.env'
        if candidate.is_file():
            return candidate
        if (directory / '.git').exists():
            return None
    return None


def _assignments(text: str) -> Iterator[tuple[str, str]]:
    for line in text.splitlines():
        match = _ASSIGNMENT.fullmatch(line.strip())
        if match is None:
            continue
        name, value = match.group(1), match.group(2).strip()
        quoted = _QUOTED.fullmatch(value)
        yield name, quoted.group(2) if quoted else value


def _parse_dotenv(path: Path) -> dict[str, str]:
    return dict(_assignments(path.read_text(encoding='utf-8')))


def _dotenv_path(env_file: str | None) -> Path | None:
    if not env_file:
        return _find_dotenv(Path.cwd())
    path = Path(env_file)
    return path if path.is_file() else None


def load_env(env_file: str | None = None) -> Path | None:
    """Copy .env values into os.environ without overriding existing keys.

    Returns the file that was read, or None.
    """
    path = _dotenv_path(env_file)
    if path is not None:
        for name, value in _parse_dotenv(path).items():
            os.environ.setdefault(name, value)
    return path


def _positive_int(environ: Mapping[str, str], name: str) -> int | None:
    raw = environ.get(name, '').strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f'{name} must be an integer, got {raw!r}') from None
    if value < 1:
        raise ValueError(f'{name} must be positive, got {value}')
    return value


@dataclass(frozen=True)
class ImportSettings:
    """Limits applied while loading an image.

    ``max_pixels`` of None leaves only Pillow's own decompression bomb
    guard in place. A configured limit can only tighten that guard.
    """

    max_pixels: int | None = None
    max_frames: int = DEFAULT_MAX_FRAMES

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ImportSettings:
        environ = os.environ if environ is None else environ
        max_frames = _positive_int(environ, ENV_MAX_FRAMES)
        return cls(
            max_pixels=_positive_int(environ, ENV_MAX_PIXELS),
            max_frames=DEFAULT_MAX_FRAMES if max_frames is None else max_frames,
        )

    def check_image_size(self, width: int, height: int) -> None:
        """Raise DecodeError for an image larger than ``max_pixels``."""
        if self.max_pixels is not None and width * height > self.max_pixels:
            raise DecodeError(f'image is {width}x{height}, over the limit of {self.max_pixels} pixels')
