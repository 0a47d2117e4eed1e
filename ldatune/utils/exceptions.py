from __future__ import annotations
from typing import Optional, Sequence


class EvaluationError(Exception):
    """Base error carrying a stable code and a human readable message."""

    kind: str = "EvaluationError"
    default_code: str = "EVALUATION_ERROR"

    def __init__(self, code: Optional[str] = None, message: Optional[str] = None):
        self.code = code or self.default_code
        self.message = message or "An error occurred"
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"kind": self.kind, "code": self.code, "message": self.message}


class InvalidPartition(EvaluationError):
    """Fold configuration is impossible for the given document count."""

    kind = "InvalidPartition"
    default_code = "INVALID_PARTITION"


class InsufficientData(EvaluationError):
    """Training subset too small for the requested topic count."""

    kind = "InsufficientData"
    default_code = "INSUFFICIENT_DATA"


class FitFailure(EvaluationError):
    """Topic-model backend failed while fitting."""

    kind = "FitFailure"
    default_code = "FIT_FAILURE"


class ScoreFailure(EvaluationError):
    """Held-out scoring failed or produced an unusable value."""

    kind = "ScoreFailure"
    default_code = "SCORE_FAILURE"


class ConfigurationError(EvaluationError):
    kind = "ConfigurationError"
    default_code = "CONFIGURATION_ERROR"


class CorpusError(EvaluationError):
    kind = "CorpusError"
    default_code = "CORPUS_ERROR"


class SweepAborted(EvaluationError):
    """Fail-fast sweep stopped; `records` holds what completed before the stop."""

    kind = "SweepAborted"
    default_code = "SWEEP_ABORTED"

    def __init__(
        self,
        records: Sequence = (),
        code: Optional[str] = None,
        message: Optional[str] = None,
    ):
        super().__init__(code=code, message=message)
        self.records = list(records)
