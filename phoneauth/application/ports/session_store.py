from typing import Any, Dict, Optional, Protocol

FLASH_PREFIX = "__flash_"
FLASH_SUFFIX = "__"


def flash_name(key: str) -> str:
    return f"{FLASH_PREFIX}{key}{FLASH_SUFFIX}"


class SessionHandle:
    """Key-value state for one request/response cycle.

    Flashed values live under a prefixed name and are removed by the first
    ``get`` that reads them. ``has`` peeks without consuming.
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None, id: Optional[str] = None):
        self.id = id
        self.data: Dict[str, Any] = dict(data or {})

    def has(self, key: str) -> bool:
        return key in self.data or flash_name(key) in self.data

    def get(self, key: str, default: Any = None) -> Any:
        if key in self.data:
            return self.data[key]
        name = flash_name(key)
        if name in self.data:
            return self.data.pop(name)
        return default

    def peek(self, key: str, default: Any = None) -> Any:
        if key in self.data:
            return self.data[key]
        return self.data.get(flash_name(key), default)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value

    def flash(self, key: str, value: Any) -> None:
        self.data[flash_name(key)] = value

    def unset(self, key: str) -> None:
        self.data.pop(key, None)
        self.data.pop(flash_name(key), None)

    def __repr__(self) -> str:
        return f"SessionHandle(id={self.id!r}, keys={sorted(self.data)!r})"


class SessionStore(Protocol):
    def get(self, cookie_header: Optional[str]) -> SessionHandle:
        ...

    def set(self, handle: SessionHandle, key: str, value: Any) -> None:
        ...

    def flash(self, handle: SessionHandle, key: str, value: Any) -> None:
        ...

    def unset(self, handle: SessionHandle, key: str) -> None:
        ...

    def persist(self, handle: SessionHandle) -> str:
        """Serialize the handle and return a Set-Cookie header value."""
        ...

    def destroy(self, handle: SessionHandle) -> str:
        ...
