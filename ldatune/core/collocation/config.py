from __future__ import annotations
from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class CollocationConfig:
    enabled: bool = True
    min_count: int = 5  # minimum bigram frequency across the corpus
    threshold: float = 10.0  # gensim scoring threshold ("default" scorer)
    scoring: Literal["default", "npmi"] = "default"
    delimiter: str = "_"
    trigrams: bool = False  # second Phrases pass over merged bigrams
