"""Blob storage for match ledgers and lifetime profiles.

Blobs are opaque text keyed by a slash-separated name. Ledgers contain
concealed match data (dealt hands, random seed) and are treated as sensitive
artifacts: files are written with owner-only permissions (0o600) inside an
owner-only directory tree (0o700).
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path
from typing import Protocol

import structlog

logger = structlog.get_logger()

# Owner-only directory permissions for stats storage.
_STATS_DIR_MODE = 0o700

# Owner-only file permissions for stats data files.
_STATS_FILE_MODE = 0o600

_BLOB_SUFFIX = ".json"


class StatsStorage(Protocol):
    """Protocol for persisting text blobs by key."""

    def save(self, key: str, content: str) -> None: ...

    def load(self, key: str) -> str | None: ...

    def delete(self, key: str) -> bool: ...

    def list_keys(self, prefix: str) -> list[str]: ...


class LocalStatsStorage:
    """Writes blobs as JSON files under a root directory with restricted permissions.

    A key such as "archive/abc123" maps to <root>/archive/abc123.json.
    Writes are atomic via temp-file-then-rename, so a crash never leaves a
    truncated blob behind.
    """

    def __init__(self, root_dir: str | Path) -> None:
        self._root = Path(root_dir).resolve()

    def _path_for(self, key: str) -> Path:
        """Resolve a key to a file path, rejecting keys that escape the root."""
        if not key:
            raise ValueError("Storage key must not be empty")
        target = (self._root / f"{key}{_BLOB_SUFFIX}").resolve()
        if not target.is_relative_to(self._root):
            raise ValueError(f"Path traversal rejected: '{key}' resolves outside storage directory")
        return target

    def _ensure_dir(self, directory: Path) -> None:
        os.makedirs(str(directory), mode=_STATS_DIR_MODE, exist_ok=True)  # noqa: PTH103
        for parent in (directory, *directory.parents):
            if not parent.is_relative_to(self._root):
                break
            parent.chmod(_STATS_DIR_MODE)

    def save(self, key: str, content: str) -> None:
        """Save content under key, replacing any previous blob atomically."""
        target = self._path_for(key)
        self._ensure_dir(target.parent)

        fd, tmp_path = tempfile.mkstemp(dir=str(target.parent), suffix=".tmp", prefix=".stats_")
        fd_owned = True
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                fd_owned = False  # os.fdopen took ownership; it will close fd
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, _STATS_FILE_MODE)  # noqa: PTH101
            Path(tmp_path).replace(target)
        except BaseException:
            if fd_owned:
                with contextlib.suppress(OSError):
                    os.close(fd)
            with contextlib.suppress(OSError):
                Path(tmp_path).unlink()
            raise
        logger.debug("saved stats blob", key=key)

    def load(self, key: str) -> str | None:
        """Return the blob stored under key, or None if there is none."""
        target = self._path_for(key)
        if not target.is_file():
            return None
        return target.read_text(encoding="utf-8")

    def delete(self, key: str) -> bool:
        """Delete the blob under key. Return True if a blob was removed."""
        target = self._path_for(key)
        try:
            target.unlink()
        except FileNotFoundError:
            return False
        logger.debug("deleted stats blob", key=key)
        return True

    def list_keys(self, prefix: str) -> list[str]:
        """Return sorted keys stored directly under the prefix directory."""
        directory = (self._root / prefix).resolve()
        if not directory.is_relative_to(self._root) or not directory.is_dir():
            return []
        return sorted(
            f"{prefix}/{entry.stem}"
            for entry in directory.iterdir()
            if entry.is_file() and not entry.is_symlink() and entry.suffix == _BLOB_SUFFIX
        )
