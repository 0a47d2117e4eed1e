from __future__ import annotations
from dataclasses import dataclass
from typing import Literal, Optional

# "holdout_fold": fit on the other F-1 folds, score the fold (reference run).
# "train_fold": fit on the fold, score the other F-1 folds.
Split = Literal["holdout_fold", "train_fold"]


@dataclass(frozen=True)
class GridConfig:
    run_seed: Optional[int] = 42  # None = fits are not seeded
    n_jobs: int = 1
    fail_fast: bool = False
    split: Split = "holdout_fold"
