from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

import pandas as pd

from ldatune.core.file_handler.base import CompressionBase, FrameCodec, StorageBase
from ldatune.core.file_handler.codec import CsvCodec, JsonLinesCodec
from ldatune.core.file_handler.compression import GzipCompression
from ldatune.core.file_handler.storage import LocalStorage
from ldatune.messages import corpus_messages as msg
from ldatune.utils.exceptions import ConfigurationError


def _default_codecs() -> Dict[str, FrameCodec]:
    return {c.extension: c for c in (CsvCodec(), JsonLinesCodec())}


@dataclass(slots=True)
class FileService:
    """
    Writes and reads result tables. The key decides the format:
      - `*.csv` / `*.jsonl` pick the codec
      - a trailing compression suffix (`.gz`) compresses transparently
    """

    storage: StorageBase
    codecs: Dict[str, FrameCodec] = field(default_factory=_default_codecs)
    compression: Optional[CompressionBase] = field(default_factory=GzipCompression)

    @classmethod
    def local(cls, root: Optional[Union[str, Path]] = None) -> "FileService":
        return cls(storage=LocalStorage(root))

    def _resolve(self, key: str) -> Tuple[FrameCodec, bool]:
        name = key.lower()
        compressed = bool(self.compression) and name.endswith(self.compression.suffix)
        if compressed:
            name = name[: -len(self.compression.suffix)]
        for ext, codec in self.codecs.items():
            if name.endswith(ext):
                return codec, compressed
        raise ConfigurationError(
            code="UNKNOWN_FILE_FORMAT",
            message=msg.UNKNOWN_FILE_FORMAT.format(key=key, known=sorted(self.codecs)),
        )

    def read_df(self, key: str) -> pd.DataFrame:
        codec, compressed = self._resolve(key)
        data = self.storage.read(key)
        if compressed:
            data = self.compression.decompress(data)
        return codec.from_bytes(data)

    def write_df(self, df: pd.DataFrame, key: str) -> str:
        """Encode by extension, compress if the key says so; returns the location."""
        codec, compressed = self._resolve(key)
        data = codec.to_bytes(df)
        if compressed:
            data = self.compression.compress(data)
        return self.storage.write(key, data)

    def write_records(self, rows: Iterable[dict], key: str) -> str:
        return self.write_df(pd.DataFrame(list(rows)), key)

    def keys(self, prefix: str = "") -> List[str]:
        return self.storage.keys(prefix)
