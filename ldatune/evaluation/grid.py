from __future__ import annotations
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ldatune.core.feature_matrix.matrix import DocumentFeatureMatrix
from ldatune.core.folds.assigner import FoldAssignment
from ldatune.core.topic_modeling.base import TopicModeler
from ldatune.evaluation.config import GridConfig
from ldatune.evaluation.records import EvaluationJob, ScoreRecord
from ldatune.evaluation.seeding import derive_seed
from ldatune.evaluation.trainer import check_partition, check_split, train_and_score
from ldatune.messages import evaluation_messages as msg
from ldatune.utils.exceptions import EvaluationError, SweepAborted
from ldatune.utils.telemetry import mark_failure, step

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepResult:
    records: Tuple[ScoreRecord, ...]  # one per (k, fold), in job order
    cancelled: bool = False

    def succeeded(self) -> List[ScoreRecord]:
        return [r for r in self.records if r.ok]

    def failed(self) -> List[ScoreRecord]:
        return [r for r in self.records if r.status == "failed"]


def validate_candidates(candidates: Iterable[int]) -> List[int]:
    ks = [int(k) for k in candidates]
    if not ks:
        raise ValueError("at least one topic-count candidate is required")
    if any(k <= 0 for k in ks):
        raise ValueError(f"topic counts must be positive: {ks}")
    if len(set(ks)) != len(ks):
        raise ValueError(f"duplicate topic counts: {ks}")
    return ks


def build_jobs(
    candidates: Iterable[int], folds: FoldAssignment, *, run_seed: Optional[int]
) -> List[EvaluationJob]:
    """Flat K x F job list, k-major, each job carrying its own seed."""
    return [
        EvaluationJob(k=k, fold=f, seed=derive_seed(run_seed, k, f))
        for k in validate_candidates(candidates)
        for f in folds.folds()
    ]


class GridEvaluator:
    """
    Runs train_and_score over every (k, fold) pair. Jobs share only the
    read-only dfm and fold assignment, so they may run on a thread pool.
    """

    def __init__(
        self,
        dfm: DocumentFeatureMatrix,
        folds: FoldAssignment,
        modeler: TopicModeler,
        *,
        config: Optional[GridConfig] = None,
        on_record: Optional[Callable[[ScoreRecord], None]] = None,
    ):
        self.dfm = dfm
        self.folds = folds
        self.modeler = modeler
        self.cfg = config or GridConfig()
        self.on_record = on_record
        self._cancel = threading.Event()

    def cancel(self) -> None:
        """Best effort: jobs that have not started yet are recorded as cancelled."""
        self._cancel.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def _execute(self, job: EvaluationJob) -> Tuple[ScoreRecord, Optional[Exception]]:
        if self._cancel.is_set():
            return ScoreRecord.cancelled(job, msg.JOB_CANCELLED), None

        start = time.perf_counter()
        try:
            outcome = train_and_score(
                self.dfm,
                self.folds,
                job.fold,
                job.k,
                modeler=self.modeler,
                seed=job.seed,
                split=self.cfg.split,
            )
        except EvaluationError as e:
            return self._failed(job, e.kind, e.message, start), e
        except Exception as e:
            message = msg.UNEXPECTED_ERROR.format(type=type(e).__name__, error=e)
            return self._failed(job, type(e).__name__, message, start), e

        record = ScoreRecord(
            k=job.k,
            fold=job.fold,
            status="ok",
            score=outcome.score,
            seed=job.seed,
            n_train=outcome.n_train,
            n_holdout=outcome.n_holdout,
            duration_s=time.perf_counter() - start,
        )
        return record, None

    @staticmethod
    def _failed(job: EvaluationJob, kind: str, message: str, start: float) -> ScoreRecord:
        return ScoreRecord(
            k=job.k,
            fold=job.fold,
            status="failed",
            error_kind=kind,
            error_message=message,
            seed=job.seed,
            duration_s=time.perf_counter() - start,
        )

    def _collect(self, done: Dict[int, ScoreRecord], index: int, record: ScoreRecord) -> None:
        done[index] = record
        if record.ok:
            logger.info(
                "k=%d fold=%d perplexity=%.3f (%.1fs)",
                record.k,
                record.fold,
                record.score,
                record.duration_s,
            )
        elif record.status == "failed":
            mark_failure(record.error_kind)
            logger.warning(
                "k=%d fold=%d failed [%s]: %s",
                record.k,
                record.fold,
                record.error_kind,
                record.error_message,
            )
        if self.on_record is not None:
            self.on_record(record)

    @staticmethod
    def _ordered(done: Dict[int, ScoreRecord]) -> List[ScoreRecord]:
        return [done[i] for i in sorted(done)]

    def _abort(
        self, job: EvaluationJob, err: Exception, done: Dict[int, ScoreRecord]
    ) -> SweepAborted:
        completed = [r for r in self._ordered(done) if r.status != "cancelled"]
        return SweepAborted(
            records=completed,
            message=msg.SWEEP_ABORTED.format(k=job.k, fold=job.fold, error=err),
        )

    def _run_sequential(self, jobs: List[EvaluationJob], done: Dict[int, ScoreRecord]) -> None:
        for i, job in enumerate(jobs):
            record, err = self._execute(job)
            self._collect(done, i, record)
            if err is not None and self.cfg.fail_fast:
                self.cancel()
                raise self._abort(job, err, done) from err

    def _run_pooled(self, jobs: List[EvaluationJob], done: Dict[int, ScoreRecord]) -> None:
        with ThreadPoolExecutor(
            max_workers=self.cfg.n_jobs, thread_name_prefix="ldatune-cv"
        ) as pool:
            futures = {pool.submit(self._execute, job): i for i, job in enumerate(jobs)}
            try:
                for fut in as_completed(futures):
                    i = futures[fut]
                    record, err = fut.result()
                    self._collect(done, i, record)
                    if err is not None and self.cfg.fail_fast:
                        raise self._abort(jobs[i], err, done) from err
            except BaseException:
                # stop queued jobs; running fits finish and are discarded
                self.cancel()
                for fut in futures:
                    fut.cancel()
                raise

    def run(self, candidates: Iterable[int]) -> SweepResult:
        """
        Raises InvalidPartition / ConfigurationError before any job starts when
        the folds do not cover the matrix or the split is unknown.
        """
        check_partition(self.dfm, self.folds)
        check_split(self.cfg.split)
        jobs = build_jobs(candidates, self.folds, run_seed=self.cfg.run_seed)
        done: Dict[int, ScoreRecord] = {}
        self._cancel.clear()
        with step(
            "cv.sweep",
            n_jobs=self.cfg.n_jobs,
            n_pairs=len(jobs),
            backend=getattr(self.modeler, "name", None),
        ):
            if self.cfg.n_jobs > 1:
                self._run_pooled(jobs, done)
            else:
                self._run_sequential(jobs, done)

        records = tuple(self._ordered(done))
        n_ok = sum(r.ok for r in records)
        logger.info(msg.SWEEP_COMPLETED.format(ok=n_ok, total=len(records)))
        return SweepResult(records=records, cancelled=self.cancelled)
