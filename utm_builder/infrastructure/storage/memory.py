"""In-process implementation of KeyValueStorage.

Values are kept as JSON text so callers get the same copy-on-read behaviour
as the file store: mutating a returned value never touches what is stored.
"""

import json
from typing import Any, Optional

from utm_builder.errors import PersistenceCorruptError


class InMemoryStorage:
    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> Optional[Any]:
        raw = self._items.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (ValueError, RecursionError) as e:
            raise PersistenceCorruptError(
                "Stored payload is not valid JSON", details={"key": key}
            ) from e

    def set_item(self, key: str, value: Any) -> bool:
        try:
            self._items[key] = json.dumps(value)
        except (TypeError, ValueError, RecursionError):
            return False
        return True

    def set_raw(self, key: str, raw: str) -> None:
        """Store *raw* text as-is, bypassing JSON encoding."""
        self._items[key] = raw

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def is_available(self) -> bool:
        return True
