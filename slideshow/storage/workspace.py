"""Workspace manager for per-request ephemeral directories."""

import shutil
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from slideshow.core.config import Settings
from slideshow.core.errors import FileSystemError
from slideshow.models.schemas import Workspace


class WorkspaceManager:
    """Creates and removes exclusively-owned request workspaces."""

    def __init__(self, settings: Settings, logger: Any):
        """
        Initialize the workspace manager.

        Args:
            settings: Application settings
            logger: Logger instance
        """
        self.settings = settings
        self.logger = logger
        self.root = Path(settings.workspace_root) if settings.workspace_root else Path(tempfile.gettempdir())
        self._released: set[Path] = set()
        self._lock = threading.Lock()

    def acquire(self) -> Workspace:
        """
        Create a fresh, collision-free workspace directory.

        Raises:
            FileSystemError: If the directory cannot be created
        """
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            path = Path(tempfile.mkdtemp(prefix=self.settings.workspace_prefix, dir=self.root))
        except OSError as e:
            raise FileSystemError(f"could not create workspace under {self.root}: {e}", cause=e) from e

        self.logger.info(f"Workspace acquired: {path}")
        return Workspace(path=path)

    def release(self, workspace: Workspace) -> None:
        """
        Remove the workspace and everything in it.

        Removal is best-effort: failures are logged and never raised, so they
        cannot mask the error that ended the run. A second release of the same
        workspace is a no-op.
        """
        with self._lock:
            if workspace.path in self._released:
                self.logger.warning(f"Workspace already released: {workspace.path}")
                return
            self._released.add(workspace.path)

        try:
            shutil.rmtree(workspace.path)
            self.logger.info(f"Workspace released: {workspace.path}")
        except FileNotFoundError:
            self.logger.debug(f"Workspace already gone: {workspace.path}")
        except OSError as e:
            self.logger.error(f"Failed to remove workspace {workspace.path}: {e}")

    @contextmanager
    def scoped(self) -> Iterator[Workspace]:
        """Acquire a workspace and release it on every exit path."""
        workspace = self.acquire()
        try:
            yield workspace
        finally:
            self.release(workspace)
