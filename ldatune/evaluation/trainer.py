from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ldatune.core.feature_matrix.matrix import DocumentFeatureMatrix
from ldatune.core.folds.assigner import FoldAssignment
from ldatune.core.topic_modeling.base import TopicModeler
from ldatune.evaluation.config import Split
from ldatune.messages import corpus_messages as corpus_msg
from ldatune.messages import evaluation_messages as msg
from ldatune.utils.exceptions import (
    ConfigurationError,
    EvaluationError,
    FitFailure,
    InsufficientData,
    InvalidPartition,
    ScoreFailure,
)
from ldatune.utils.telemetry import step

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrainScoreOutcome:
    score: float  # held-out perplexity, lower is better
    n_train: int
    n_holdout: int
    holdout_tokens: int


SPLITS = ("holdout_fold", "train_fold")


def check_split(split: str) -> None:
    if split not in SPLITS:
        raise ConfigurationError(
            code="UNKNOWN_SPLIT", message=corpus_msg.UNKNOWN_SPLIT.format(split=split)
        )


def check_partition(dfm: DocumentFeatureMatrix, folds: FoldAssignment) -> None:
    """The fold labels must cover exactly the rows of the matrix."""
    if folds.n_docs != dfm.n_docs:
        raise InvalidPartition(
            code="FOLDS_SIZE_MISMATCH",
            message=msg.FOLDS_SIZE_MISMATCH.format(
                n_folds_docs=folds.n_docs, n_docs=dfm.n_docs
            ),
        )


def split_rows(
    folds: FoldAssignment, fold: int, split: Split = "holdout_fold"
) -> Tuple[np.ndarray, np.ndarray]:
    """Returns (training_rows, holdout_rows) for one fold."""
    check_split(split)
    if split == "train_fold":
        return folds.members(fold), folds.complement(fold)
    return folds.complement(fold), folds.members(fold)


def train_and_score(
    dfm: DocumentFeatureMatrix,
    folds: FoldAssignment,
    fold: int,
    k: int,
    *,
    modeler: TopicModeler,
    seed: Optional[int] = None,
    split: Split = "holdout_fold",
) -> TrainScoreOutcome:
    """
    Fit `k` topics on the training rows of `fold` and return the perplexity
    of the held-out rows under the fitted topic-term distributions. The
    fitted model lives only for the duration of this call.
    """
    check_partition(dfm, folds)
    if k <= 0:
        raise InsufficientData(
            code="NON_POSITIVE_K", message=msg.NON_POSITIVE_K.format(k=k)
        )

    train_rows, holdout_rows = split_rows(folds, fold, split)
    if len(train_rows) < k:
        raise InsufficientData(
            message=msg.TOO_FEW_TRAINING_DOCS.format(n_train=len(train_rows), k=k)
        )

    train = dfm.counts[train_rows]
    holdout = dfm.counts[holdout_rows]
    holdout_tokens = int(holdout.sum())
    if holdout_tokens == 0:
        raise ScoreFailure(
            code="EMPTY_HOLDOUT", message=msg.EMPTY_HOLDOUT.format(fold=fold)
        )

    with step("cv.fit", k=k, fold=fold, n_train=len(train_rows), seed=seed):
        try:
            model = modeler.fit(train, dfm.vocabulary, k, seed=seed)
        except EvaluationError:
            raise
        except Exception as e:
            raise FitFailure(message=msg.FIT_FAILED.format(k=k, error=e)) from e

    with step("cv.score", k=k, fold=fold, n_holdout=len(holdout_rows)):
        try:
            score = model.perplexity(holdout)
        except Exception as e:
            raise ScoreFailure(message=msg.SCORE_FAILED.format(error=e)) from e

    if not np.isfinite(score) or score < 0:
        raise ScoreFailure(
            code="NON_FINITE_PERPLEXITY",
            message=msg.NON_FINITE_PERPLEXITY.format(k=k, fold=fold, value=score),
        )

    logger.debug("k=%d fold=%d perplexity=%.3f", k, fold, score)
    return TrainScoreOutcome(
        score=float(score),
        n_train=len(train_rows),
        n_holdout=len(holdout_rows),
        holdout_tokens=holdout_tokens,
    )
