from __future__ import annotations
import logging
from pathlib import Path
from typing import List, Optional, Union

from ldatune.core.config import settings
from ldatune.core.file_handler.base import StorageBase

logger = logging.getLogger(__name__)


class LocalStorage(StorageBase):
    def __init__(self, root: Optional[Union[str, Path]] = None):
        self.root = Path(root or settings.OUTPUT_DIR)

    def _path(self, key: str) -> Path:
        return self.root / key.lstrip("/")

    def read(self, key: str) -> bytes:
        try:
            return self._path(key).read_bytes()
        except OSError as e:
            logger.exception(f"Read failed: key={key}: {e}")
            raise

    def write(self, key: str, data: bytes) -> str:
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            logger.exception(f"Write failed: key={key}: {e}")
            raise
        logger.debug("Wrote %d bytes to %s", len(data), path)
        return str(path)

    def exists(self, key: str) -> bool:
        return self._path(key).exists()

    def keys(self, prefix: str = "") -> List[str]:
        if not self.root.exists():
            return []
        found = (
            p.relative_to(self.root).as_posix() for p in self.root.rglob("*") if p.is_file()
        )
        return sorted(k for k in found if k.startswith(prefix))
