from __future__ import annotations
import logging
from typing import List, Tuple, Set

from nltk.corpus import stopwords as nltk_stopwords
from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS

from ldatune.core.stopword_removal.base import StopwordRemover
from ldatune.core.stopword_removal.config import StopwordConfig

logger = logging.getLogger(__name__)


class DefaultStopwordRemover(StopwordRemover):
    def __init__(self, config: StopwordConfig | None = None):
        self.cfg = config or StopwordConfig()
        self._stopset = self._build_stopset()

    def _build_stopset(self) -> Set[str]:
        base: Set[str] = set()
        try:
            base |= set(nltk_stopwords.words(self.cfg.language))
        except LookupError:
            # nltk corpus not downloaded
            logger.warning(
                "NLTK stopwords unavailable; using scikit-learn English list"
            )
            base |= set(ENGLISH_STOP_WORDS)

        base |= set(self.cfg.custom_stopwords)
        base -= set(self.cfg.exclude_stopwords)

        if self.cfg.lowercase:
            base = {w.lower() for w in base}
        return base

    def remove(self, tokens: List[str]) -> Tuple[List[str], List[str]]:
        cleaned: List[str] = []
        removed: List[str] = []
        for t in tokens:
            norm = t.lower() if self.cfg.lowercase else t
            if norm in self._stopset:
                removed.append(t)
                continue
            cleaned.append(t)
        return cleaned, removed
