from __future__ import annotations
from dataclasses import dataclass, field
from typing import FrozenSet


@dataclass(frozen=True)
class StopwordConfig:
    language: str = "english"
    custom_stopwords: FrozenSet[str] = field(default_factory=frozenset)
    exclude_stopwords: FrozenSet[str] = field(
        default_factory=frozenset
    )  # words to keep even if in list
    lowercase: bool = True
