from __future__ import annotations
from typing import Optional, Sequence

import numpy as np
from scipy import sparse
from sklearn.decomposition import LatentDirichletAllocation

from ldatune.core.topic_modeling.base import FittedTopicModel, TopicModeler
from ldatune.core.topic_modeling.config import TopicModelConfig
from ldatune.core.topic_modeling.utils import normalize_rows


class SklearnFittedModel(FittedTopicModel):
    def __init__(self, lda: LatentDirichletAllocation, doc_topic: np.ndarray):
        self._lda = lda
        self._doc_topic = doc_topic
        self.num_topics = lda.n_components

    def topic_term(self) -> np.ndarray:
        return normalize_rows(self._lda.components_)  # shape: (n_topics, n_terms)

    def doc_topic(self) -> np.ndarray:
        return self._doc_topic

    def transform(self, counts: sparse.csr_matrix) -> np.ndarray:
        return self._lda.transform(counts)

    def perplexity(self, counts: sparse.csr_matrix) -> float:
        if counts.sum() <= 0:
            raise ValueError("no tokens to score")
        return float(self._lda.perplexity(counts))


class SklearnLDAModeler(TopicModeler):
    name = "sklearn"

    def __init__(self, cfg: TopicModelConfig):
        self.cfg = cfg

    def fit(
        self,
        counts: sparse.csr_matrix,
        vocabulary: Sequence[str],
        num_topics: int,
        *,
        seed: Optional[int] = None,
    ) -> SklearnFittedModel:
        lda = LatentDirichletAllocation(
            n_components=num_topics,
            learning_method="batch",
            max_iter=self.cfg.iterations,
            doc_topic_prior=self.cfg.alpha,
            topic_word_prior=self.cfg.eta,
            random_state=seed,
        )
        doc_topic = lda.fit_transform(counts)  # shape: (n_docs, num_topics)
        return SklearnFittedModel(lda, doc_topic)
