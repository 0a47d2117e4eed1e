from __future__ import annotations
import gzip

from ldatune.core.file_handler.base import CompressionBase


class GzipCompression(CompressionBase):
    suffix = ".gz"

    def __init__(self, level: int = 6):
        self.level = level

    def compress(self, raw_bytes: bytes) -> bytes:
        # mtime=0: rerunning a sweep yields byte-identical archives
        return gzip.compress(raw_bytes, compresslevel=self.level, mtime=0)

    def decompress(self, raw_bytes: bytes) -> bytes:
        return gzip.decompress(raw_bytes)
