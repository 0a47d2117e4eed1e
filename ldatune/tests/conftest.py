from typing import Sequence

import numpy as np
import pandas as pd
import pytest
from scipy import sparse

from ldatune.core.feature_matrix.matrix import DocumentFeatureMatrix
from ldatune.core.topic_modeling.base import FittedTopicModel, TopicModeler


def make_dfm(n_docs: int = 130, n_terms: int = 40, seed: int = 0) -> DocumentFeatureMatrix:
    rng = np.random.default_rng(seed)
    counts = rng.poisson(2.0, size=(n_docs, n_terms))
    counts[:, 0] += 1  # no empty rows
    parties = np.where(np.arange(n_docs) % 2 == 0, "D", "R")
    return DocumentFeatureMatrix(
        counts=sparse.csr_matrix(counts),
        vocabulary=tuple(f"term{j:02d}" for j in range(n_terms)),
        doc_ids=tuple(f"doc_{i + 1}" for i in range(n_docs)),
        docvars=pd.DataFrame({"party": parties}),
    )


class FakeFitted(FittedTopicModel):
    """Deterministic stand-in: perplexity depends on k, training size and seed."""

    def __init__(self, k: int, n_terms: int, train_tokens: int, n_train: int, seed):
        self.num_topics = k
        self._n_terms = n_terms
        self._train_tokens = train_tokens
        self._n_train = n_train
        self._seed = seed
        self._noise = (
            (seed % 1000) / 1000.0 if seed is not None else float(np.random.random())
        )

    def topic_term(self):
        return np.full((self.num_topics, self._n_terms), 1.0 / self._n_terms)

    def doc_topic(self):
        return np.full((self._n_train, self.num_topics), 1.0 / self.num_topics)

    def transform(self, counts):
        return np.full((counts.shape[0], self.num_topics), 1.0 / self.num_topics)

    def perplexity(self, counts):
        if counts.sum() <= 0:
            raise ValueError("no tokens to score")
        return 100.0 + self.num_topics + self._train_tokens / 1000.0 + self._noise


class FakeModeler(TopicModeler):
    name = "fake"

    def __init__(self, fail_on: Sequence[int] = ()):
        self.fail_on = set(fail_on)
        self.calls = []

    def fit(self, counts, vocabulary, num_topics, *, seed=None):
        self.calls.append((num_topics, counts.shape[0], seed))
        if num_topics in self.fail_on:
            raise RuntimeError(f"did not converge for k={num_topics}")
        return FakeFitted(
            num_topics, len(vocabulary), int(counts.sum()), counts.shape[0], seed
        )


@pytest.fixture
def dfm():
    return make_dfm()


@pytest.fixture
def small_dfm():
    return make_dfm(n_docs=20, n_terms=12, seed=1)


@pytest.fixture
def fake_modeler():
    return FakeModeler()


@pytest.fixture
def failing_modeler():
    return FakeModeler(fail_on=(20,))


@pytest.fixture
def dfm_factory():
    return make_dfm


@pytest.fixture
def fake_fitted_cls():
    return FakeFitted
