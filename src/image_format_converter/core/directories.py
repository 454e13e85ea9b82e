from __future__ import annotations

import logging
from pathlib import Path
from threading import Lock

from image_format_converter.core.errors import FilesystemError

logger = logging.getLogger(__name__)


class DirectoryMaterializer:
    """Creates destination directories at most once per run.

    ``ensure`` returns True only for the caller that actually created the
    directory; racing callers see False. Safe to call from worker threads.
    """

    def __init__(self) -> None:
        self._known: set[Path] = set()
        self._lock = Lock()

    def ensure(self, path: Path) -> bool:
        with self._lock:
            if path in self._known:
                return False

        created = self._create(path)
        with self._lock:
            self._known.add(path)
        return created

    def _create(self, path: Path) -> bool:
        if path.is_dir():
            return False
        try:
            path.mkdir(parents=True)
        except FileExistsError:
            if path.is_dir():
                return False
            raise FilesystemError(f"Failed to create directory {path}: a file is in the way") from None
        except OSError as error:
            raise FilesystemError(f"Failed to create directory {path}: {error}") from error

        logger.debug("Created directory %s", path)
        return True
