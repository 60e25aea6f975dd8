import logging
import os
import shutil
import tempfile
from typing import Optional

from ytmp4.config.settings import config

logger = logging.getLogger(__name__)


class Workspace:
    """
    Per-request scratch directory handed to yt-dlp.

    Exactly one exists per in-flight download. The service never writes into
    it; yt-dlp does, and the service only lists, reads and finally removes it.
    """

    def __init__(self, path: str):
        self.path = path
        self._removed = False

    @classmethod
    def create(cls) -> "Workspace":
        root = config.download.temp_root
        if root:
            os.makedirs(root, exist_ok=True)
        path = tempfile.mkdtemp(prefix=config.download.temp_prefix, dir=root)
        logger.debug("Created workspace %s", path)
        return cls(path)

    def output_template(self) -> str:
        return os.path.join(self.path, "%(title)s.%(ext)s")

    def find_output(self, ext: str) -> Optional[str]:
        """
        Return the path of the produced file with the given extension.
        Raises OSError when the directory cannot be listed.
        """
        suffix = f".{ext.lower()}"
        matches = sorted(
            name for name in os.listdir(self.path)
            if name.lower().endswith(suffix)
        )
        if not matches:
            return None
        if len(matches) > 1:
            logger.warning("Workspace %s holds %d %s files, using %s", self.path, len(matches), suffix, matches[0])
        return os.path.join(self.path, matches[0])

    def cleanup(self) -> None:
        """Remove the directory. Safe to call more than once, never raises."""
        if self._removed:
            return
        self._removed = True

        shutil.rmtree(self.path, ignore_errors=True)
        if os.path.exists(self.path):
            logger.warning("Failed to remove workspace %s", self.path)
        else:
            logger.debug("Removed workspace %s", self.path)

    @property
    def exists(self) -> bool:
        return os.path.isdir(self.path)
