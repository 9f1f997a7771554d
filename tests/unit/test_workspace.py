"""Tests for the workspace manager."""

import pytest

from slideshow.core.errors import FileSystemError
from slideshow.storage.workspace import WorkspaceManager


@pytest.fixture
def manager(settings, logger):
    return WorkspaceManager(settings, logger)


def test_acquire_creates_unique_directories(manager, settings):
    """Each acquire returns a new, existing directory under the workspace root."""
    first = manager.acquire()
    second = manager.acquire()

    assert first.path != second.path
    assert first.path.is_dir()
    assert second.path.is_dir()
    assert first.path.parent == second.path.parent
    assert first.path.name.startswith(settings.workspace_prefix)


def test_release_removes_directory_and_contents(manager):
    """Release deletes the workspace recursively."""
    workspace = manager.acquire()
    workspace.audio_path.write_bytes(b"audio")
    (workspace.path / "nested").mkdir()
    (workspace.path / "nested" / "file.bin").write_bytes(b"x")

    manager.release(workspace)

    assert not workspace.path.exists()


def test_release_twice_is_noop(manager):
    """A second release neither raises nor touches the filesystem."""
    workspace = manager.acquire()
    manager.release(workspace)
    manager.release(workspace)

    assert not workspace.path.exists()


def test_release_of_missing_directory_is_not_an_error(manager):
    """Release tolerates a workspace that disappeared already."""
    workspace = manager.acquire()
    workspace.path.rmdir()

    manager.release(workspace)


def test_release_logs_instead_of_raising(manager, monkeypatch):
    """Removal errors are swallowed after logging."""
    workspace = manager.acquire()

    def fail(path):
        raise PermissionError("denied")

    monkeypatch.setattr("slideshow.storage.workspace.shutil.rmtree", fail)
    manager.release(workspace)


def test_scoped_releases_on_exception(manager):
    """The scoped workspace is removed even when the body raises."""
    with pytest.raises(RuntimeError):
        with manager.scoped() as workspace:
            workspace.output_path.write_bytes(b"partial")
            raise RuntimeError("boom")

    assert not workspace.path.exists()


def test_acquire_failure_raises_filesystem_error(settings, logger, tmp_path):
    """An unusable workspace root is reported as a FileSystemError."""
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("file")
    settings.workspace_root = str(blocker)

    with pytest.raises(FileSystemError):
        WorkspaceManager(settings, logger).acquire()


def test_workspace_paths(manager):
    """Workspace exposes fixed names for every pipeline file."""
    workspace = manager.acquire()

    assert workspace.audio_path.name == "audio.mp3"
    assert workspace.concat_path.name == "ffmpeg_input.txt"
    assert workspace.output_path.name == "output.mp4"
    assert workspace.image_path(3).name == "img3.jpg"
    assert workspace.image_path(0).parent == workspace.path
