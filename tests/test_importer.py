"""Tests for paintcore.importer — extension dispatch and error propagation."""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path, PurePosixPath

import numpy as np
import pytest
from paintcore.core.env import ImportSettings
from paintcore.core.errors import (
    DecodeError,
    ImportIOError,
    NoContentError,
    UnsupportedFormatError,
)
from paintcore.core.types import Layer, LayerStack
from paintcore.importer import ImportFormat, format_for_path, load_image
from paintcore.loaders import flat, gif, ora
from PIL import Image


def _stack(tag: str) -> LayerStack:
    return LayerStack(width=1, height=1, layers=[Layer(title=tag, pixels=np.zeros((1, 1, 4), np.uint8))])


@pytest.fixture
def calls(monkeypatch: pytest.MonkeyPatch) -> list[tuple[str, object]]:
    """Replace every loader with a recorder."""
    seen: list[tuple[str, object]] = []

    def recorder(tag):
        def load(path, settings=None):
            seen.append((tag, path))
            return _stack(tag)

        return load

    monkeypatch.setattr(ora, 'load_openraster_image', recorder('ora'))
    monkeypatch.setattr(gif, 'load_gif_animation', recorder('gif'))
    monkeypatch.setattr(flat, 'load_flat_image', recorder('flat'))
    return seen


class TestFormatForPath:
    @pytest.mark.parametrize(
        ('path', 'expected'),
        [
            ('drawing.ora', ImportFormat.OPENRASTER),
            ('x.ORA', ImportFormat.OPENRASTER),
            ('x.Ora', ImportFormat.OPENRASTER),
            ('anim.gif', ImportFormat.GIF),
            ('ANIM.GIF', ImportFormat.GIF),
            ('photo.png', ImportFormat.FLAT),
            ('x.unknownext', ImportFormat.FLAT),
            ('archive.ora.png', ImportFormat.FLAT),
            ('picture.png.ora', ImportFormat.OPENRASTER),
            ('x', None),
            ('dir.ora/x', None),
            ('.hidden', None),
            ('trailing.', None),
        ],
    )
    def test_dispatch_table(self, path, expected):
        assert format_for_path(path) is expected

    def test_path_objects(self):
        assert format_for_path(Path('a') / 'b.gif') is ImportFormat.GIF
        assert format_for_path(PurePosixPath('b.ora')) is ImportFormat.OPENRASTER

    def test_bytes_path(self):
        assert format_for_path(b'image.ora') is ImportFormat.OPENRASTER


class TestDispatch:
    def test_ora_case_insensitive(self, calls):
        stack = load_image('x.ORA')
        assert calls == [('ora', 'x.ORA')]
        assert stack.layers[0].title == 'ora'

    def test_gif(self, calls):
        load_image('x.gif')
        assert calls == [('gif', 'x.gif')]

    def test_unknown_extension_goes_to_flat(self, calls):
        load_image('x.unknownext')
        assert calls == [('flat', 'x.unknownext')]

    def test_no_extension_is_unsupported_without_io(self, calls, monkeypatch: pytest.MonkeyPatch):
        def no_io(*args, **kwargs):
            raise AssertionError('filesystem touched')

        monkeypatch.setattr(Path, 'read_bytes', no_io)
        with pytest.raises(UnsupportedFormatError):
            load_image('x')
        assert calls == []


class TestErrorPropagation:
    def test_loader_import_error_is_unchanged(self, monkeypatch: pytest.MonkeyPatch):
        original = NoContentError('empty')

        def load(path, settings=None):
            raise original

        monkeypatch.setattr(flat, 'load_flat_image', load)
        with pytest.raises(NoContentError) as info:
            load_image('x.png')
        assert info.value is original

    def test_stray_os_error_becomes_io(self, monkeypatch: pytest.MonkeyPatch):
        def load(path, settings=None):
            raise PermissionError(13, 'Permission denied')

        monkeypatch.setattr(gif, 'load_gif_animation', load)
        with pytest.raises(ImportIOError):
            load_image('x.gif')

    def test_missing_file_is_io(self, tmp_path: Path):
        with pytest.raises(ImportIOError):
            load_image(tmp_path / 'missing.png')

    def test_missing_ora_is_io(self, tmp_path: Path):
        with pytest.raises(ImportIOError):
            load_image(tmp_path / 'missing.ora')


class TestPixelLimit:
    def test_settings_reach_the_loader(self, monkeypatch: pytest.MonkeyPatch):
        seen = []

        def load(path, settings=None):
            seen.append(settings)
            return _stack('flat')

        monkeypatch.setattr(flat, 'load_flat_image', load)
        settings = ImportSettings(max_pixels=1234)
        load_image('x.png', settings)
        load_image('y.png')
        assert seen == [settings, ImportSettings()]

    def test_pillow_global_limit_is_never_changed(self, monkeypatch: pytest.MonkeyPatch):
        before = Image.MAX_IMAGE_PIXELS
        seen = []

        def load(path, settings=None):
            seen.append(Image.MAX_IMAGE_PIXELS)
            return _stack('flat')

        monkeypatch.setattr(flat, 'load_flat_image', load)
        load_image('x.png', ImportSettings(max_pixels=111))
        assert seen == [before]
        assert Image.MAX_IMAGE_PIXELS == before

    def test_overlapping_loads_leave_no_global_state(self, tmp_path: Path):
        before = Image.MAX_IMAGE_PIXELS
        path = tmp_path / 'strip.png'
        Image.new('RGBA', (15, 1)).save(path)
        limits = [15, 100, 1000, 10_000] * 4

        with ThreadPoolExecutor(max_workers=4) as pool:
            stacks = list(pool.map(lambda limit: load_image(path, ImportSettings(max_pixels=limit)), limits))

        assert all(stack.width == 15 for stack in stacks)
        assert Image.MAX_IMAGE_PIXELS == before

    def test_failed_load_leaves_pillow_limit(self, tmp_path: Path):
        before = Image.MAX_IMAGE_PIXELS
        with pytest.raises(ImportIOError):
            load_image(tmp_path / 'missing.png', ImportSettings(max_pixels=10))
        assert Image.MAX_IMAGE_PIXELS == before

    def test_just_over_limit_is_decode_error(self, tmp_path: Path):
        path = tmp_path / 'strip.png'
        Image.new('RGBA', (15, 1)).save(path)
        with pytest.raises(DecodeError, match='15x1'):
            load_image(path, ImportSettings(max_pixels=10))

    def test_exactly_at_limit_loads(self, tmp_path: Path):
        path = tmp_path / 'strip.png'
        Image.new('RGBA', (10, 1)).save(path)
        assert load_image(path, ImportSettings(max_pixels=10)).width == 10
