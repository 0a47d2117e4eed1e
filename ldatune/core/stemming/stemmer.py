from __future__ import annotations
from typing import List

from nltk.stem.snowball import SnowballStemmer

from ldatune.core.stemming.base import Stemmer
from ldatune.core.stemming.config import StemmingConfig


class SnowballTokenStemmer(Stemmer):
    def __init__(self, config: StemmingConfig | None = None):
        self.cfg = config or StemmingConfig()
        self._snowball = SnowballStemmer(
            self.cfg.language, ignore_stopwords=self.cfg.ignore_stopwords
        )

    def _stem_one(self, token: str) -> str:
        d = self.cfg.compound_delimiter
        if d and d in token:
            return d.join(self._snowball.stem(p) for p in token.split(d) if p)
        return self._snowball.stem(token)

    def stem(self, tokens: List[str]) -> List[str]:
        if not self.cfg.enabled:
            return list(tokens)
        return [self._stem_one(t) for t in tokens]
