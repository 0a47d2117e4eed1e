from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from ldatune.messages import evaluation_messages as msg
from ldatune.utils.exceptions import InvalidPartition


@dataclass(frozen=True)
class FoldAssignment:
    """Document index -> fold label in 1..n_folds. Read-only once built."""

    labels: np.ndarray  # shape: (n_docs,), int
    n_folds: int
    seed: Optional[int] = None

    def __post_init__(self):
        labels = np.array(self.labels, dtype=int, copy=True)
        labels.setflags(write=False)
        object.__setattr__(self, "labels", labels)

    @property
    def n_docs(self) -> int:
        return int(self.labels.shape[0])

    def folds(self) -> List[int]:
        return list(range(1, self.n_folds + 1))

    def _check(self, fold: int) -> None:
        if fold not in range(1, self.n_folds + 1):
            raise InvalidPartition(
                code="UNKNOWN_FOLD",
                message=msg.UNKNOWN_FOLD.format(fold=fold, n_folds=self.n_folds),
            )

    def members(self, fold: int) -> np.ndarray:
        self._check(fold)
        return np.flatnonzero(self.labels == fold)

    def complement(self, fold: int) -> np.ndarray:
        self._check(fold)
        return np.flatnonzero(self.labels != fold)

    def sizes(self) -> dict:
        return {f: int((self.labels == f).sum()) for f in self.folds()}


def assign_folds(
    n_docs: int, n_folds: int = 5, *, seed: Optional[int] = None
) -> FoldAssignment:
    """
    Deal labels 1..F round-robin (sizes differ by at most 1), then shuffle
    them with `seed`. `seed=None` keeps the round-robin order.
    """
    if n_folds <= 0:
        raise InvalidPartition(
            code="FOLDS_NON_POSITIVE",
            message=msg.FOLDS_NON_POSITIVE.format(n_folds=n_folds),
        )
    if n_docs <= 0:
        raise InvalidPartition(
            code="NO_DOCUMENTS", message=msg.NO_DOCUMENTS.format(n_docs=n_docs)
        )
    if n_folds > n_docs:
        raise InvalidPartition(
            code="FOLDS_EXCEED_DOCS",
            message=msg.FOLDS_EXCEED_DOCS.format(n_docs=n_docs, n_folds=n_folds),
        )

    labels = np.arange(n_docs) % n_folds + 1
    if seed is not None:
        labels = np.random.default_rng(seed).permutation(labels)
    return FoldAssignment(labels=labels, n_folds=n_folds, seed=seed)
