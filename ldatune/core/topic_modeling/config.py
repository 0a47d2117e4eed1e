from __future__ import annotations
from dataclasses import dataclass
from typing import Literal, Optional


@dataclass(frozen=True)
class TopicModelConfig:
    backend: Literal["gensim", "sklearn", "tomotopy"] = "gensim"
    random_state: Optional[int] = 42  # used by standalone fits, not CV jobs
    topn_words: int = 10  # words per topic (summary)
    alpha: Optional[float] = None  # None = backend default
    eta: Optional[float] = None  # None = backend default
    # gensim
    passes: int = 10
    chunksize: int = 2000
    # gensim per-doc iterations / sklearn max_iter / tomotopy Gibbs sweeps
    iterations: int = 100
    # tomotopy
    burn_in: int = 50  # Gibbs sweeps dropped from the log-likelihood trace
    keep: int = 10  # record the log-likelihood every `keep` sweeps
    infer_iter: int = 100
