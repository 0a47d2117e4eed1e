from __future__ import annotations
import logging
from typing import Dict, List, Optional, Sequence

import numpy as np
import tomotopy as tp
from scipy import sparse

from ldatune.core.topic_modeling.base import FittedTopicModel, TopicModeler
from ldatune.core.topic_modeling.config import TopicModelConfig
from ldatune.core.topic_modeling.utils import rows_to_words

logger = logging.getLogger(__name__)


class TomotopyFittedModel(FittedTopicModel):
    """Collapsed Gibbs LDA; unseen held-out words are skipped when scoring."""

    def __init__(
        self,
        mdl: tp.LDAModel,
        vocabulary: Sequence[str],
        added: List[Optional[int]],
        cfg: TopicModelConfig,
        loglik_trace: List[float],
    ):
        self._mdl = mdl
        self._vocabulary = tuple(vocabulary)
        self._added = added  # training row -> tomotopy doc index (None if empty)
        self._cfg = cfg
        self.num_topics = mdl.k
        self.loglik_trace = loglik_trace
        self.burn_in = cfg.burn_in
        self.keep = cfg.keep
        self._known = set(mdl.used_vocabs)

    def topic_term(self) -> np.ndarray:
        col: Dict[str, int] = {w: j for j, w in enumerate(self._vocabulary)}
        used = [col[w] for w in self._mdl.used_vocabs]
        out = np.zeros((self.num_topics, len(self._vocabulary)))
        for t in range(self.num_topics):
            out[t, used] = self._mdl.get_topic_word_dist(t)
        return out

    def doc_topic(self) -> np.ndarray:
        uniform = np.full(self.num_topics, 1.0 / self.num_topics)
        rows = [
            uniform if i is None else np.asarray(self._mdl.docs[i].get_topic_dist())
            for i in self._added
        ]
        return np.vstack(rows) if rows else np.zeros((0, self.num_topics))

    def _infer(self, counts: sparse.csr_matrix):
        raw = rows_to_words(counts, self._vocabulary)
        words = [[w for w in doc if w in self._known] for doc in raw]
        scored = [i for i, w in enumerate(words) if w]
        dropped = sum(len(r) for r in raw) - sum(len(w) for w in words)
        if dropped:
            logger.debug(
                "Skipped %d held-out tokens unseen in training; %d of %d documents left unscored",
                dropped,
                len(words) - len(scored),
                len(words),
            )
        dists = np.full((len(words), self.num_topics), 1.0 / self.num_topics)
        if not scored:
            return dists, 0.0, 0
        docs = [self._mdl.make_doc(words[i]) for i in scored]
        topic_dists, ll = self._mdl.infer(docs, iter=self._cfg.infer_iter, workers=1)
        for row, dist in zip(scored, topic_dists):
            dists[row] = dist
        n_tokens = sum(len(words[i]) for i in scored)
        return dists, float(np.sum(ll)), n_tokens

    def transform(self, counts: sparse.csr_matrix) -> np.ndarray:
        dists, _, _ = self._infer(counts)
        return dists

    def perplexity(self, counts: sparse.csr_matrix) -> float:
        _, ll, n_tokens = self._infer(counts)
        if n_tokens <= 0:
            raise ValueError("no known tokens to score")
        return float(np.exp(-ll / n_tokens))


class TomotopyLDAModeler(TopicModeler):
    name = "tomotopy"
    supports_loglik_trace = True

    def __init__(self, cfg: TopicModelConfig):
        self.cfg = cfg

    def fit(
        self,
        counts: sparse.csr_matrix,
        vocabulary: Sequence[str],
        num_topics: int,
        *,
        seed: Optional[int] = None,
    ) -> TomotopyFittedModel:
        kwargs = {"k": num_topics}
        if self.cfg.alpha is not None:
            kwargs["alpha"] = self.cfg.alpha
        if self.cfg.eta is not None:
            kwargs["eta"] = self.cfg.eta
        if seed is not None:
            kwargs["seed"] = seed
        mdl = tp.LDAModel(**kwargs)

        added: List[Optional[int]] = []
        for words in rows_to_words(counts, vocabulary):
            added.append(mdl.add_doc(words) if words else None)
        if all(i is None for i in added):
            raise ValueError("training rows contain no tokens")

        trace: List[float] = []
        keep = max(1, self.cfg.keep)
        done = 0
        while done < self.cfg.iterations:
            n = min(keep, self.cfg.iterations - done)
            mdl.train(n, workers=1)
            done += n
            trace.append(float(mdl.ll_per_word * mdl.num_words))
        return TomotopyFittedModel(mdl, vocabulary, added, self.cfg, trace)
