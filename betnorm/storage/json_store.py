# betnorm/storage/json_store.py
import json
import os
from pathlib import Path
from typing import Any, Optional, Union

from loguru import logger

from .base_store import CollectionStore, StorageError


class JsonFileStore(CollectionStore):
    """Stores each collection as ``<directory>/<key>.json``."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            logger.debug(f"No stored collection for '{key}' at {path}")
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            # Corrupt files are treated as missing so a bad write cannot block startup
            logger.error(f"Stored collection '{key}' is not valid JSON ({path}): {e}")
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def set(self, key: str, value: Any) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(value, f, indent=4, ensure_ascii=False)
            os.replace(tmp_path, path)
        except TypeError as e:
            raise StorageError(f"Collection '{key}' is not JSON serializable: {e}") from e
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e
        logger.debug(f"Saved collection '{key}' to {path}")
