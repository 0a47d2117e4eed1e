from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Sequence


class Collocator(ABC):
    """Port: learn multi-word expressions from a corpus and merge them."""

    @abstractmethod
    def fit(self, docs: Sequence[List[str]]) -> "Collocator": ...

    @abstractmethod
    def merge(self, tokens: List[str]) -> List[str]: ...
