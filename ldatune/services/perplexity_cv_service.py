from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

import pandas as pd

from ldatune.core.config import settings
from ldatune.core.feature_matrix.matrix import DocumentFeatureMatrix
from ldatune.core.folds.assigner import FoldAssignment, assign_folds
from ldatune.core.topic_modeling.base import TopicModeler
from ldatune.evaluation.aggregate import (
    aggregate_view,
    best_k,
    fold_matrix,
    per_fold_view,
)
from ldatune.evaluation.config import GridConfig, Split
from ldatune.evaluation.grid import GridEvaluator, SweepResult
from ldatune.evaluation.records import ScoreRecord
from ldatune.utils.telemetry import step

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PerplexityCVResult:
    folds: FoldAssignment
    sweep: SweepResult
    per_fold: pd.DataFrame  # every (k, fold) record
    aggregate: pd.DataFrame  # mean perplexity per k
    fold_matrix: pd.DataFrame  # k x fold perplexities, NaN where a pair failed
    best_k: Optional[int]


class PerplexityCVService:
    """
    - Assigns folds once per run (seeded)
    - Sweeps every (k, fold) pair through the grid evaluator
    - Returns the per-fold and aggregate views side by side
    """

    def __init__(self, modeler: TopicModeler):
        self.modeler = modeler

    def evaluate(
        self,
        dfm: DocumentFeatureMatrix,
        candidates: Iterable[int],
        *,
        n_folds: Optional[int] = None,
        fold_seed: Optional[int] = settings.FOLD_SEED,
        run_seed: Optional[int] = settings.RUN_SEED,
        fail_fast: Optional[bool] = None,
        n_jobs: Optional[int] = None,
        split: Optional[Split] = None,
        folds: Optional[FoldAssignment] = None,
        on_record: Optional[Callable[[ScoreRecord], None]] = None,
    ) -> PerplexityCVResult:
        candidates = list(candidates)
        if folds is None:
            folds = assign_folds(
                dfm.n_docs, n_folds or settings.N_FOLDS, seed=fold_seed
            )
        cfg = GridConfig(
            run_seed=run_seed,
            n_jobs=n_jobs or settings.N_JOBS,
            fail_fast=settings.FAIL_FAST if fail_fast is None else fail_fast,
            split=split or settings.SPLIT,
        )
        logger.info(
            "Perplexity CV: %d docs, folds=%s, k=%s, split=%s",
            dfm.n_docs,
            folds.sizes(),
            candidates,
            cfg.split,
        )

        with step("cv.evaluate", n_docs=dfm.n_docs, n_folds=folds.n_folds):
            evaluator = GridEvaluator(
                dfm, folds, self.modeler, config=cfg, on_record=on_record
            )
            sweep = evaluator.run(candidates)

        aggregate = aggregate_view(sweep.records)
        chosen = best_k(aggregate)
        if chosen is not None:
            logger.info(
                "Lowest mean held-out perplexity at k=%d (%.3f)",
                chosen,
                aggregate.loc[chosen, "mean_perplexity"],
            )
        else:
            logger.warning("No topic count produced a successful fold")

        return PerplexityCVResult(
            folds=folds,
            sweep=sweep,
            per_fold=per_fold_view(sweep.records),
            aggregate=aggregate,
            fold_matrix=fold_matrix(sweep.records),
            best_k=chosen,
        )
