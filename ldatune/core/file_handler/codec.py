from __future__ import annotations
from io import BytesIO

import pandas as pd


class CsvCodec:
    extension = ".csv"

    def __init__(self, float_format: str | None = None):
        self.float_format = float_format

    def to_bytes(self, df: pd.DataFrame) -> bytes:
        # a named index (e.g. the aggregate view's `k`) is written as a column
        if df.index.name is not None:
            df = df.reset_index()
        return df.to_csv(index=False, float_format=self.float_format).encode("utf-8")

    def from_bytes(self, b: bytes) -> pd.DataFrame:
        return pd.read_csv(BytesIO(b))


class JsonLinesCodec:
    """One JSON object per row; used for topic summaries with free-text keywords."""

    extension = ".jsonl"

    def to_bytes(self, df: pd.DataFrame) -> bytes:
        if df.empty:
            return b""
        return df.to_json(orient="records", lines=True, force_ascii=False).encode("utf-8")

    def from_bytes(self, b: bytes) -> pd.DataFrame:
        if not b.strip():
            return pd.DataFrame()
        return pd.read_json(BytesIO(b), orient="records", lines=True, dtype=False)
