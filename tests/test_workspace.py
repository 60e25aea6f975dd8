import os

import pytest

from ytmp4.config.settings import config
from ytmp4.services.workspace import Workspace


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    monkeypatch.setattr(config.download, "temp_root", str(tmp_path / "root"))
    ws = Workspace.create()
    yield ws
    ws.cleanup()


def test_create_is_unique(workspace, tmp_path):
    other = Workspace.create()
    try:
        assert workspace.path != other.path
        assert os.path.dirname(workspace.path) == str(tmp_path / "root")
        assert os.path.basename(workspace.path).startswith(config.download.temp_prefix)
    finally:
        other.cleanup()


def test_output_template(workspace):
    assert workspace.output_template() == os.path.join(workspace.path, "%(title)s.%(ext)s")


def test_find_output(workspace):
    assert workspace.find_output("mp4") is None

    for name in ("clip.f137.mp4.part", "clip.webm", "Clip.MP4"):
        open(os.path.join(workspace.path, name), "wb").close()

    assert workspace.find_output("mp4") == os.path.join(workspace.path, "Clip.MP4")
    assert workspace.find_output("mp3") is None


def test_find_output_prefers_first_name(workspace):
    for name in ("b.mp3", "a.mp3"):
        open(os.path.join(workspace.path, name), "wb").close()
    assert workspace.find_output("mp3") == os.path.join(workspace.path, "a.mp3")


def test_find_output_unreadable(workspace):
    os.rmdir(workspace.path)
    with pytest.raises(OSError):
        workspace.find_output("mp4")


def test_cleanup_is_idempotent(workspace):
    open(os.path.join(workspace.path, "video.mp4"), "wb").close()
    workspace.cleanup()
    assert not workspace.exists
    workspace.cleanup()
    assert not workspace.exists
