"""KeyValueStorage protocol. Repositories depend on this, not the concrete implementation."""

from typing import Any, Optional, Protocol


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> Optional[Any]: ...

    def set_item(self, key: str, value: Any) -> bool: ...

    def remove_item(self, key: str) -> None: ...

    def is_available(self) -> bool: ...
