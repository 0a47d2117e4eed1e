from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

import numpy as np
from scipy import sparse


class FittedTopicModel(ABC):
    """
    Capability object returned by a backend fit. Columns of every matrix
    follow the vocabulary order of the dfm the model was fitted on.
    """

    num_topics: int
    # log-likelihood per kept sampling iteration (Gibbs backends only)
    loglik_trace: Optional[List[float]] = None
    burn_in: int = 0
    keep: int = 1

    @abstractmethod
    def topic_term(self) -> np.ndarray:
        """shape: (num_topics, n_terms); rows sum to 1"""
        ...

    @abstractmethod
    def doc_topic(self) -> np.ndarray:
        """shape: (n_training_docs, num_topics); rows sum to 1"""
        ...

    @abstractmethod
    def transform(self, counts: sparse.csr_matrix) -> np.ndarray:
        """Document-topic proportions for new rows, topics held fixed."""
        ...

    @abstractmethod
    def perplexity(self, counts: sparse.csr_matrix) -> float:
        """
        Held-out perplexity with topic-term distributions held fixed:
        exp(-log-likelihood per token). Raises ValueError if no token is scored.
        """
        ...


class TopicModeler(ABC):
    name: str = "base"
    supports_loglik_trace: bool = False

    @abstractmethod
    def fit(
        self,
        counts: sparse.csr_matrix,
        vocabulary: Sequence[str],
        num_topics: int,
        *,
        seed: Optional[int] = None,
    ) -> FittedTopicModel: ...
