"""Key/value storage for the admin session.

Values are strings, like browser local storage. `FileSessionStorage`
keeps them in a JSON file so a session survives restarts.
"""

import json
import os
from pathlib import Path
from typing import Dict, Optional, Protocol, Union


class SessionStorage(Protocol):
    """String key/value store."""

    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...


class InMemorySessionStorage:
    """SessionStorage held in a dictionary."""

    def __init__(self):
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileSessionStorage:
    """SessionStorage persisted to a JSON file.

    Attributes:
        filepath: Location of the JSON file.
    """

    def __init__(self, filepath: Union[str, Path]):
        self.filepath = Path(filepath)

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read()
        items[key] = value
        self._write(items)

    def remove_item(self, key: str) -> None:
        items = self._read()
        if key in items:
            del items[key]
            self._write(items)

    def _read(self) -> Dict[str, str]:
        if not self.filepath.exists():
            return {}

        try:
            with open(self.filepath, "r") as session_file:
                data = json.load(session_file)
        except (OSError, ValueError):
            return {}

        return data if isinstance(data, dict) else {}

    def _write(self, items: Dict[str, str]) -> None:
        try:
            self.filepath.parent.mkdir(parents=True, exist_ok=True)
            temporary_path = self.filepath.with_suffix(self.filepath.suffix + ".tmp")
            with open(temporary_path, "w") as session_file:
                json.dump(items, session_file, indent=2)
            os.replace(temporary_path, self.filepath)
        except Exception as error:
            raise IOError(f"Failed to save session to {self.filepath}: {str(error)}")
