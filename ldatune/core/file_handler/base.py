from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Protocol

import pandas as pd


class StorageBase(ABC):
    """Where result tables end up. Keys are '/'-separated relative paths."""

    @abstractmethod
    def read(self, key: str) -> bytes: ...

    @abstractmethod
    def write(self, key: str, data: bytes) -> str:
        """Store bytes under `key`; returns the resolved location."""
        ...

    @abstractmethod
    def exists(self, key: str) -> bool: ...

    @abstractmethod
    def keys(self, prefix: str = "") -> List[str]: ...


class CompressionBase(ABC):
    suffix: str = ""

    @abstractmethod
    def compress(self, raw_bytes: bytes) -> bytes: ...

    @abstractmethod
    def decompress(self, raw_bytes: bytes) -> bytes: ...


class FrameCodec(Protocol):
    """Table <-> bytes for one file format, picked by `extension`."""

    extension: str

    def to_bytes(self, df: pd.DataFrame) -> bytes: ...
    def from_bytes(self, b: bytes) -> pd.DataFrame: ...
