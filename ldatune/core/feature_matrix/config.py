from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class FeatureMatrixConfig:
    # dfm_trim-style filters, applied after the matrix is built
    min_termfreq: Optional[int] = None  # total count of a term across docs
    min_docfreq: Optional[int] = None  # number of docs containing a term
    max_docfreq: Optional[float] = None  # proportion of docs (0..1]
    max_features: Optional[int] = None  # keep the N most frequent terms
    drop_empty_documents: bool = True  # rows left without tokens after trimming
    log_top_features: int = 10  # most frequent terms reported after the build
