from __future__ import annotations
from typing import Dict, List, Sequence

import numpy as np
from scipy import sparse


def rows_to_words(counts: sparse.csr_matrix, vocabulary: Sequence[str]) -> List[List[str]]:
    # expand counts back into token lists (Gibbs backends take raw words)
    counts = sparse.csr_matrix(counts)
    docs: List[List[str]] = []
    for i in range(counts.shape[0]):
        start, end = counts.indptr[i], counts.indptr[i + 1]
        words: List[str] = []
        for j, c in zip(counts.indices[start:end], counts.data[start:end]):
            words.extend([vocabulary[j]] * int(c))
        docs.append(words)
    return docs


def normalize_rows(m: np.ndarray) -> np.ndarray:
    m = np.asarray(m, dtype=float)
    totals = m.sum(axis=1, keepdims=True)
    uniform = np.full_like(m, 1.0 / m.shape[1]) if m.shape[1] else m
    with np.errstate(invalid="ignore", divide="ignore"):
        out = m / totals
    return np.where(totals > 0, out, uniform)


def summarize_topics(
    topic_term: np.ndarray, vocabulary: Sequence[str], topn: int = 10
) -> List[Dict]:
    """[{topic_id, keywords, label}, ...] ranked by topic-term probability."""
    topics: List[Dict] = []
    for i, row in enumerate(topic_term):
        top_idx = np.argsort(-row, kind="stable")[:topn]
        words = [vocabulary[j] for j in top_idx]
        topics.append(
            {
                "topic_id": str(i),
                "keywords": ", ".join(words),
                "label": f"Topic {i}",
            }
        )
    return topics
