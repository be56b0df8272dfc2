"""
Progress persistence.

Stores every problem's state in one JSON file keyed by problem key, the
same shape a browser keeps in local storage.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, Optional
import copy
import json
import os
import tempfile
import threading

from mathgrade.attempts import ProgressStore

from ..core.config import settings
from ..core.logging import get_logger

logger = get_logger(__name__)


class JsonFileProgressStore(ProgressStore):
    """
    JSON-file progress store.

    The file is read once; every ``put`` or ``delete`` rewrites it through a
    temporary file and an atomic rename, so a crash leaves either the old or
    the new document on disk.
    """

    def __init__(self, progress_file: Optional[Path] = None):
        self.progress_file = Path(progress_file or settings.PROGRESS_FILE)
        self._lock = threading.Lock()
        self._data: Dict[str, Dict[str, Any]] = self._read()

        logger.info(
            "Initialized JsonFileProgressStore",
            extra_data={
                "progress_file": str(self.progress_file),
                "records": len(self._data)
            }
        )

    def _read(self) -> Dict[str, Dict[str, Any]]:
        if not self.progress_file.exists():
            return {}
        try:
            with open(self.progress_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(
                "Ignoring unreadable progress file",
                extra_data={"progress_file": str(self.progress_file), "error": str(e)}
            )
            return {}
        if not isinstance(data, dict):
            logger.warning(
                "Ignoring progress file without a top-level object",
                extra_data={"progress_file": str(self.progress_file)}
            )
            return {}
        return data

    def _write(self, data: Dict[str, Dict[str, Any]]) -> None:
        self.progress_file.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=self.progress_file.parent, prefix=".progress-", suffix=".json"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.progress_file)
        except BaseException:
            os.unlink(tmp_path)
            raise

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            snapshot = self._data.get(key)
            return copy.deepcopy(snapshot) if snapshot is not None else None

    def put(self, key: str, snapshot: Dict[str, Any]) -> None:
        with self._lock:
            # Memory only changes once the new document is on disk
            data = dict(self._data)
            data[key] = copy.deepcopy(snapshot)
            self._write(data)
            self._data = data

    def delete(self, keys: Iterable[str]) -> None:
        with self._lock:
            data = dict(self._data)
            removed = [key for key in keys if data.pop(key, None) is not None]
            if removed:
                self._write(data)
                self._data = data

    def keys(self) -> list:
        with self._lock:
            return list(self._data)

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        """Copy of every stored record"""
        with self._lock:
            return copy.deepcopy(self._data)
