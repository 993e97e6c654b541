"""Tests for the paintcore command line (paintcore.__main__)."""

import json
import os
import sys
from pathlib import Path

import pytest
from paintcore.__main__ import main
from PIL import Image


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run from a directory with a .git boundary so no outer .env is picked up."""
    (tmp_path / '.git').mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv('PAINTCORE_MAX_PIXELS', raising=False)
    monkeypatch.delenv('PAINTCORE_MAX_FRAMES', raising=False)
    return tmp_path


def _run(monkeypatch: pytest.MonkeyPatch, *argv: str) -> None:
    monkeypatch.setattr(sys, 'argv', ['paintcore', *argv])
    main()


@pytest.fixture
def png(tmp_path: Path) -> Path:
    path = tmp_path / 'red.png'
    Image.new('RGBA', (3, 2), (255, 0, 0, 255)).save(path)
    return path


class TestInfo:
    def test_text(self, monkeypatch, capsys, png: Path):
        _run(monkeypatch, 'info', str(png))
        out = capsys.readouterr().out
        assert 'red.png' in out
        assert '3×2' in out
        assert '── Layer 1' in out

    def test_json_with_pixel(self, monkeypatch, capsys, png: Path):
        _run(monkeypatch, 'info', str(png), '--json', '--pixel', '1,1')
        obj = json.loads(capsys.readouterr().out)
        assert obj['format'] == 'png'
        assert obj['layers'][0]['pixel']['bgra'] == [0, 0, 255, 255]
        assert obj['layers'][0]['pixel']['argb32'] == '#ffff0000'

    def test_missing_file(self, monkeypatch, capsys, tmp_path: Path):
        with pytest.raises(SystemExit) as info:
            _run(monkeypatch, 'info', str(tmp_path / 'missing.png'))
        assert info.value.code == 1
        assert 'Error: io:' in capsys.readouterr().err

    def test_no_extension(self, monkeypatch, capsys):
        with pytest.raises(SystemExit) as info:
            _run(monkeypatch, 'info', 'noextension')
        assert info.value.code == 1
        assert 'Error: unsupported-format:' in capsys.readouterr().err

    def test_bad_pixel_argument(self, monkeypatch, png: Path):
        with pytest.raises(SystemExit) as info:
            _run(monkeypatch, 'info', str(png), '--pixel', 'nowhere')
        assert info.value.code == 2

    def test_max_frames_from_env_file(self, monkeypatch, capsys, tmp_path: Path):
        path = tmp_path / 'anim.gif'
        frames = [Image.new('RGB', (2, 2), colour) for colour in ((255, 0, 0), (0, 255, 0), (0, 0, 255))]
        frames[0].save(path, save_all=True, append_images=frames[1:])
        (tmp_path / '.env').write_text('PAINTCORE_MAX_FRAMES=2\n')

        try:
            _run(monkeypatch, 'info', str(path), '--json')
        finally:
            os.environ.pop('PAINTCORE_MAX_FRAMES', None)

        captured = capsys.readouterr()
        assert 'paintcore: loaded' in captured.err
        assert len(json.loads(captured.out)['layers']) == 2

    def test_invalid_setting(self, monkeypatch, capsys, png: Path):
        monkeypatch.setenv('PAINTCORE_MAX_FRAMES', 'lots')
        with pytest.raises(SystemExit) as info:
            _run(monkeypatch, 'info', str(png))
        assert info.value.code == 1
        assert 'PAINTCORE_MAX_FRAMES' in capsys.readouterr().err


class TestColor:
    def test_hex(self, monkeypatch, capsys):
        _run(monkeypatch, 'color', '#ff0000')
        out = capsys.readouterr().out
        assert 'argb32:    #ffff0000' in out
        assert 'bgra=[0, 0, 255, 255]' in out
        assert 'dark' in out

    def test_hsv(self, monkeypatch, capsys):
        _run(monkeypatch, 'color', 'hsv(120,1,1)')
        out = capsys.readouterr().out
        assert '#ff00ff00' in out
        assert 'light' in out

    def test_transparent(self, monkeypatch, capsys):
        _run(monkeypatch, 'color', '#00ffffff')
        assert 'transparent' in capsys.readouterr().out

    def test_invalid(self, monkeypatch):
        with pytest.raises(SystemExit) as info:
            _run(monkeypatch, 'color', 'chartreuse')
        assert info.value.code == 2


def test_no_command_prints_help(monkeypatch, capsys):
    with pytest.raises(SystemExit) as info:
        _run(monkeypatch)
    assert info.value.code == 1
    assert 'usage: paintcore' in capsys.readouterr().out
