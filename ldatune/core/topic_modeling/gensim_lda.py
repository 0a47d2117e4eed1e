from __future__ import annotations
from typing import Optional, Sequence

import numpy as np
from gensim import models
from gensim.matutils import Sparse2Corpus
from scipy import sparse

from ldatune.core.topic_modeling.base import FittedTopicModel, TopicModeler
from ldatune.core.topic_modeling.config import TopicModelConfig
from ldatune.core.topic_modeling.utils import normalize_rows


def _to_bow(counts: sparse.csr_matrix):
    return list(Sparse2Corpus(sparse.csr_matrix(counts), documents_columns=False))


class GensimFittedModel(FittedTopicModel):
    def __init__(self, lda: models.LdaModel, train_bow: list):
        self._lda = lda
        self._train_bow = train_bow
        self.num_topics = lda.num_topics

    def topic_term(self) -> np.ndarray:
        return normalize_rows(self._lda.get_topics())

    def _infer(self, bow: list) -> np.ndarray:
        if not bow:
            return np.zeros((0, self.num_topics))
        gamma, _ = self._lda.inference(bow)
        return normalize_rows(gamma)

    def doc_topic(self) -> np.ndarray:
        return self._infer(self._train_bow)

    def transform(self, counts: sparse.csr_matrix) -> np.ndarray:
        return self._infer(_to_bow(counts))

    def perplexity(self, counts: sparse.csr_matrix) -> float:
        bow = _to_bow(counts)
        n_tokens = sum(cnt for doc in bow for _, cnt in doc)
        if n_tokens <= 0:
            raise ValueError("no tokens to score")
        # per-word variational bound; gensim reports 2**-bound, we keep base e
        return float(np.exp(-self._lda.log_perplexity(bow)))


class GensimLDAModeler(TopicModeler):
    name = "gensim"

    def __init__(self, cfg: TopicModelConfig):
        self.cfg = cfg

    def fit(
        self,
        counts: sparse.csr_matrix,
        vocabulary: Sequence[str],
        num_topics: int,
        *,
        seed: Optional[int] = None,
    ) -> GensimFittedModel:
        bow = _to_bow(counts)
        lda = models.LdaModel(
            corpus=bow,
            id2word=dict(enumerate(vocabulary)),
            num_topics=num_topics,
            passes=self.cfg.passes,
            iterations=self.cfg.iterations,
            chunksize=self.cfg.chunksize,
            alpha=self.cfg.alpha if self.cfg.alpha is not None else "symmetric",
            eta=self.cfg.eta,
            random_state=seed,
        )
        return GensimFittedModel(lda, bow)
