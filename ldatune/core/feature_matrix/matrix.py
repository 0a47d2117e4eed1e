from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy import sparse


@dataclass(frozen=True)
class DocumentFeatureMatrix:
    """Sparse document x term counts. Rows follow the collection order."""

    counts: sparse.csr_matrix  # shape: (n_docs, n_terms)
    vocabulary: Tuple[str, ...]
    doc_ids: Tuple[str, ...]
    docvars: pd.DataFrame = field(default_factory=pd.DataFrame)

    def __post_init__(self):
        counts = sparse.csr_matrix(self.counts, dtype=np.int64)
        n_docs, n_terms = counts.shape
        if len(self.vocabulary) != n_terms:
            raise ValueError(
                f"vocabulary has {len(self.vocabulary)} terms, matrix has {n_terms} columns"
            )
        if len(self.doc_ids) != n_docs:
            raise ValueError(
                f"{len(self.doc_ids)} doc ids for a matrix with {n_docs} rows"
            )
        docvars = (
            pd.DataFrame(index=range(n_docs))
            if self.docvars is None or len(self.docvars.columns) == 0
            else self.docvars.reset_index(drop=True)
        )
        if len(docvars) != n_docs:
            raise ValueError(f"{len(docvars)} docvar rows for {n_docs} documents")
        object.__setattr__(self, "counts", counts)
        object.__setattr__(self, "vocabulary", tuple(self.vocabulary))
        object.__setattr__(self, "doc_ids", tuple(self.doc_ids))
        object.__setattr__(self, "docvars", docvars)

    @property
    def n_docs(self) -> int:
        return self.counts.shape[0]

    @property
    def n_terms(self) -> int:
        return self.counts.shape[1]

    def doc_lengths(self) -> np.ndarray:
        return np.asarray(self.counts.sum(axis=1)).ravel()

    def term_frequencies(self) -> np.ndarray:
        return np.asarray(self.counts.sum(axis=0)).ravel()

    def doc_frequencies(self) -> np.ndarray:
        return np.asarray((self.counts > 0).sum(axis=0)).ravel()

    def rows(self, indices: Sequence[int]) -> "DocumentFeatureMatrix":
        idx = np.asarray(indices, dtype=int)
        return DocumentFeatureMatrix(
            counts=self.counts[idx],
            vocabulary=self.vocabulary,
            doc_ids=tuple(self.doc_ids[i] for i in idx),
            docvars=self.docvars.iloc[idx],
        )

    def _columns(self, keep: np.ndarray) -> "DocumentFeatureMatrix":
        cols = np.flatnonzero(keep)
        return DocumentFeatureMatrix(
            counts=self.counts[:, cols],
            vocabulary=tuple(self.vocabulary[j] for j in cols),
            doc_ids=self.doc_ids,
            docvars=self.docvars,
        )

    def trim(
        self,
        *,
        min_termfreq: Optional[int] = None,
        min_docfreq: Optional[int] = None,
        max_docfreq: Optional[float] = None,
        max_features: Optional[int] = None,
    ) -> "DocumentFeatureMatrix":
        tf = self.term_frequencies()
        df = self.doc_frequencies()
        keep = np.ones(self.n_terms, dtype=bool)
        if min_termfreq is not None:
            keep &= tf >= min_termfreq
        if min_docfreq is not None:
            keep &= df >= min_docfreq
        if max_docfreq is not None:
            keep &= df <= max_docfreq * self.n_docs
        if max_features is not None and keep.sum() > max_features:
            # stable order so ties keep the alphabetical vocabulary order
            ranked = np.argsort(-np.where(keep, tf, -1), kind="stable")
            capped = np.zeros_like(keep)
            capped[ranked[:max_features]] = True
            keep &= capped
        return self._columns(keep)

    def drop_empty_documents(self) -> "DocumentFeatureMatrix":
        nonempty = np.flatnonzero(self.doc_lengths() > 0)
        if len(nonempty) == self.n_docs:
            return self
        return self.rows(nonempty)

    def top_features(self, n: int = 10) -> List[Tuple[str, int]]:
        tf = self.term_frequencies()
        order = np.argsort(-tf, kind="stable")[:n]
        return [(self.vocabulary[j], int(tf[j])) for j in order]
