from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List


class Stemmer(ABC):
    """Port: reduce each token of a list to its stem."""

    @abstractmethod
    def stem(self, tokens: List[str]) -> List[str]: ...
