# local key/value storage for the diary
# file-backed store mirrors browser localStorage: one string value per key

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Dict

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """base class for storage failures"""


class StorageUnavailable(StorageError):
    """storage backend missing, denied, or failing on read/write"""


class DeserializationError(StorageError):
    """persisted data exists but cannot be decoded"""


class KeyValueStorage:
    """string key -> string value storage with localStorage semantics"""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError


class MemoryStorage(KeyValueStorage):

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self._data = dict(data or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)


class FileStorage(KeyValueStorage):
    """one <key>.json file per key under a root directory"""

    def __init__(self, root: Path):
        self.root = Path(root).expanduser()
        self.connected = False

    # lifecycle

    def connect(self):
        if self.connected:
            return
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageUnavailable(f"Cannot create storage directory {self.root}: {e}") from e
        self.connected = True
        logger.info(f"File storage ready at {self.root}")

    def close(self):
        self.connected = False

    # key access

    def path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.root / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            raise DeserializationError(f"{path} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise StorageUnavailable(f"Cannot read {path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        self.connect()
        path = self.path_for(key)
        # write to a sibling temp file then rename so readers never see a partial file
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageUnavailable(f"Cannot write {path}: {e}") from e

    def remove_item(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageUnavailable(f"Cannot remove {path}: {e}") from e
