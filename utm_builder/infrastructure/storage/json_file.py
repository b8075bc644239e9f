"""File-backed implementation of KeyValueStorage.

Each key is stored as ``<directory>/<key>.json``. Values are written as JSON
(not pickle) so the files stay readable and safe to load across versions.
Writes go to a temporary file first and are moved into place, so a crash
mid-write never leaves a half-written payload behind.
"""

import json
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Optional

from utm_builder.errors import PersistenceCorruptError
from utm_builder.shared.logging import get_logger

log = get_logger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9._-]+$")


class JsonFileStorage:
    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key) or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[Any]:
        """Return the decoded value, or None when nothing is stored.

        Raises:
            PersistenceCorruptError: the file exists but cannot be read or
                decoded.
        """
        path = self._path(key)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceCorruptError(
                "Stored payload could not be read", details={"key": key, "error": str(e)}
            ) from e
        try:
            return json.loads(raw.decode("utf-8"))
        except (ValueError, RecursionError) as e:
            raise PersistenceCorruptError(
                "Stored payload is not valid JSON", details={"key": key, "error": str(e)}
            ) from e

    def set_item(self, key: str, value: Any) -> bool:
        path = self._path(key)
        try:
            payload = json.dumps(value, ensure_ascii=False)
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._directory, prefix=f".{key}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(payload)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
            return True
        except (OSError, TypeError, ValueError, RecursionError) as e:
            log.error(
                "storage_write_failed",
                key=key,
                path=str(path),
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

    def remove_item(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            log.error("storage_remove_failed", key=key, error=str(e))

    def is_available(self) -> bool:
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            return os.access(self._directory, os.W_OK)
        except OSError:
            return False
