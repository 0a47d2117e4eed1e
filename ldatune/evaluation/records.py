from __future__ import annotations
from dataclasses import dataclass
from typing import Literal, Optional

Status = Literal["ok", "failed", "cancelled"]


@dataclass(frozen=True)
class EvaluationJob:
    k: int
    fold: int
    seed: Optional[int] = None


@dataclass(frozen=True)
class ScoreRecord:
    k: int
    fold: int
    status: Status
    score: Optional[float] = None  # perplexity, only when status == "ok"
    error_kind: Optional[str] = None
    error_message: Optional[str] = None
    seed: Optional[int] = None
    n_train: Optional[int] = None
    n_holdout: Optional[int] = None
    duration_s: Optional[float] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @classmethod
    def cancelled(cls, job: EvaluationJob, message: str) -> "ScoreRecord":
        return cls(
            k=job.k,
            fold=job.fold,
            status="cancelled",
            error_kind="Cancelled",
            error_message=message,
            seed=job.seed,
        )
