"""
Durable local key/value storage backing team records (and, optionally, the
knowledge base). One JSON file per key under the data directory.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, Optional, Protocol

from services.config import get_settings

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class DurableStorage(Protocol):
    def get(self, key: str) -> Optional[bytes]: ...

    def set(self, key: str, value: bytes) -> None: ...


class FileStorage:
    """Synchronous, last-write-wins storage; survives restarts."""

    def __init__(self, data_dir: Path | None = None) -> None:
        self.data_dir = Path(data_dir or get_settings().DATA_DIR)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        return self.data_dir / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def get(self, key: str) -> Optional[bytes]:
        fp = self.path_for(key)
        if not fp.exists():
            return None
        try:
            return fp.read_bytes()
        except OSError:
            logger.warning("Could not read %s; treating it as missing", fp, exc_info=True)
            return None

    def set(self, key: str, value: bytes) -> None:
        self.path_for(key).write_bytes(value)


class MemoryStorage:
    """Process-local storage, used when nothing should touch the disk."""

    def __init__(self) -> None:
        self._data: Dict[str, bytes] = {}

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)
