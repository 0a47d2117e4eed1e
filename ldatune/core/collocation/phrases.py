from __future__ import annotations
import logging
from typing import List, Optional, Sequence

from gensim.models.phrases import Phrases, FrozenPhrases

from ldatune.core.collocation.base import Collocator
from ldatune.core.collocation.config import CollocationConfig

logger = logging.getLogger(__name__)


class PhraseCollocator(Collocator):
    """Adapter: gensim Phrases (bigrams, optionally trigrams)."""

    def __init__(self, config: CollocationConfig | None = None):
        self.cfg = config or CollocationConfig()
        self._bigram: Optional[FrozenPhrases] = None
        self._trigram: Optional[FrozenPhrases] = None

    def _phrases(self, docs: Sequence[List[str]]) -> FrozenPhrases:
        return Phrases(
            docs,
            min_count=self.cfg.min_count,
            threshold=self.cfg.threshold,
            scoring=self.cfg.scoring,
            delimiter=self.cfg.delimiter,
        ).freeze()

    def fit(self, docs: Sequence[List[str]]) -> "PhraseCollocator":
        docs = [list(d) for d in docs]
        if not self.cfg.enabled or not docs:
            return self
        self._bigram = self._phrases(docs)
        if self.cfg.trigrams:
            self._trigram = self._phrases([self._bigram[d] for d in docs])
        logger.info(
            "Learned %d collocations", len(self._bigram.phrasegrams)
        )
        return self

    def merge(self, tokens: List[str]) -> List[str]:
        if self._bigram is None:
            return list(tokens)
        out = self._bigram[list(tokens)]
        if self._trigram is not None:
            out = self._trigram[out]
        return list(out)
