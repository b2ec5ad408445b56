"""In-process key-value storage. Nothing survives the process."""


class InMemoryStorage:
    """
    Dict-backed storage implementing KeyValueStorage.

    Usage:
        storage = InMemoryStorage()
        storage.set("key", "value")
        storage.get("key")  # "value"
    """

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"Storage values must be str, got {type(value).__name__}")
        self._data[key] = value

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def exists(self, key: str) -> bool:
        return key in self._data

