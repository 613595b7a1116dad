"""Repository base class and the atomic-write primitive shared by all repositories."""
import json
import logging
import os
import tempfile
from typing import Any, Optional

_log = logging.getLogger('sliderui.repository')


def atomic_write(path: str, data: bytes) -> bool:
    """Write *data* to *path* atomically (write-then-rename).

    Creates a sibling temp file, writes and fsyncs it, then renames it over
    the target path so the file is never left in a partially-written state.

    Args:
        path: Destination file path.
        data: Raw bytes to store.

    Returns:
        ``True`` on success.  ``False`` if *path* is empty or any step fails;
        the destination is then left exactly as it was.
    """
    if not path:
        return False
    dir_name = os.path.dirname(os.path.abspath(path))
    prefix = os.path.basename(path) + '.tmp.'
    try:
        fd, tmp_path = tempfile.mkstemp(dir=dir_name, prefix=prefix)
    except OSError as exc:
        _log.warning("Could not create temp file for %s: %s", path, exc)
        return False
    try:
        with os.fdopen(fd, 'wb') as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_path, path)
    except OSError as exc:
        _log.warning("Atomic write to %s failed: %s", path, exc)
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        return False
    return True


class BaseRepository:
    """Provides file-backed persistence for a single data file.

    Sub-classes read their file through :meth:`_read_bytes` and persist
    through :meth:`_save_bytes` / :meth:`_save_json`, which go through
    :func:`atomic_write`.  Every repository keeps its data in memory; callers
    mutate it through the repository and then persist explicitly.
    """

    def __init__(self, file_path: Optional[str] = None) -> None:
        self._path = file_path
        self._log = logging.getLogger(f'sliderui.repository.{type(self).__name__}')

    @property
    def path(self) -> Optional[str]:
        return self._path

    def _read_bytes(self, path: str) -> bytes:
        """Return the full contents of *path*.  Raises ``OSError`` on failure."""
        with open(path, 'rb') as fh:
            return fh.read()

    def _save_bytes(self, data: bytes) -> bool:
        if not self._path:
            self._log.warning("No file path configured; nothing written")
            return False
        return atomic_write(self._path, data)

    def _save_json(self, data: Any) -> bool:
        """Atomically write *data* as JSON to *self._path*."""
        return self._save_bytes(json.dumps(data, indent=2).encode('utf-8'))
