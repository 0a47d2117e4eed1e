"""
Topic-number heuristics computed from a fitted model.

Griffiths2004 and Deveaud2014 are maximised, CaoJuan2009 and Arun2010 are
minimised. All four read the model through the FittedTopicModel interface;
Griffiths2004 additionally needs the Gibbs log-likelihood trace.
"""
from __future__ import annotations
import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd
from scipy.special import logsumexp

from ldatune.core.feature_matrix.matrix import DocumentFeatureMatrix
from ldatune.core.topic_modeling.base import FittedTopicModel, TopicModeler
from ldatune.messages import corpus_messages as corpus_msg
from ldatune.messages import evaluation_messages as msg
from ldatune.utils.exceptions import ConfigurationError, EvaluationError, FitFailure
from ldatune.utils.telemetry import step

logger = logging.getLogger(__name__)

_TINY = np.finfo(float).tiny

METRIC_DIRECTIONS: Dict[str, str] = {
    "Griffiths2004": "max",
    "CaoJuan2009": "min",
    "Arun2010": "min",
    "Deveaud2014": "max",
}


def griffiths2004(model: FittedTopicModel, doc_lengths: Optional[np.ndarray] = None) -> float:
    """Harmonic-mean estimate of log p(w|k) over post-burn-in samples."""
    trace = model.loglik_trace
    if not trace:
        raise ConfigurationError(
            code="NO_LOGLIK_TRACE",
            message="Griffiths2004 needs a Gibbs log-likelihood trace.",
        )
    drop = model.burn_in // max(1, model.keep)
    lls = np.asarray(trace[drop:] or trace, dtype=float)
    med = float(np.median(lls))
    return float(med - (logsumexp(-(lls - med)) - np.log(len(lls))))


def caojuan2009(model: FittedTopicModel, doc_lengths: Optional[np.ndarray] = None) -> float:
    """Average cosine similarity between topic-term distributions."""
    m1 = model.topic_term()
    k = m1.shape[0]
    if k < 2:
        return float("nan")
    unit = m1 / np.linalg.norm(m1, axis=1, keepdims=True)
    sims = unit @ unit.T
    upper = sims[np.triu_indices(k, 1)]
    return float(upper.sum() / (k * (k - 1) / 2))


def arun2010(model: FittedTopicModel, doc_lengths: Optional[np.ndarray] = None) -> float:
    """
    Symmetric KL divergence between the singular values of the topic-term
    matrix and the length-weighted topic mass over documents.
    """
    if doc_lengths is None:
        raise ConfigurationError(
            code="NO_DOC_LENGTHS", message="Arun2010 needs training document lengths."
        )
    m1 = model.topic_term()
    cm1 = np.linalg.svd(m1, compute_uv=False)
    lengths = np.asarray(doc_lengths, dtype=float)
    cm2 = lengths @ model.doc_topic() / np.abs(lengths).max()
    cm2 = np.sort(cm2)[::-1][: len(cm1)]
    cm1 = np.maximum(cm1, _TINY)
    cm2 = np.maximum(cm2, _TINY)
    return float(np.sum(cm1 * np.log(cm1 / cm2)) + np.sum(cm2 * np.log(cm2 / cm1)))


def deveaud2014(model: FittedTopicModel, doc_lengths: Optional[np.ndarray] = None) -> float:
    """Average pairwise Jensen-Shannon style divergence between topics."""
    m1 = model.topic_term()
    m1 = np.where(m1 == 0, _TINY, m1)
    k = m1.shape[0]
    if k < 2:
        return float("nan")
    total = 0.0
    for i in range(k - 1):
        for j in range(i + 1, k):
            x, y = m1[i], m1[j]
            total += 0.5 * np.sum(x * np.log(x / y)) + 0.5 * np.sum(y * np.log(y / x))
    return float(total / (k * (k - 1)))


METRICS: Dict[str, Callable[..., float]] = {
    "Griffiths2004": griffiths2004,
    "CaoJuan2009": caojuan2009,
    "Arun2010": arun2010,
    "Deveaud2014": deveaud2014,
}


def _check_metrics(metrics: Sequence[str], modeler: TopicModeler) -> List[str]:
    names = list(metrics)
    for name in names:
        if name not in METRICS:
            raise ConfigurationError(
                code="UNKNOWN_METRIC",
                message=corpus_msg.UNKNOWN_METRIC.format(metric=name),
            )
        if name == "Griffiths2004" and not modeler.supports_loglik_trace:
            raise ConfigurationError(
                code="UNSUPPORTED_METRIC",
                message=corpus_msg.UNSUPPORTED_METRIC.format(
                    metric=name, backend=getattr(modeler, "name", "?")
                ),
            )
    return names


def find_topics_number(
    dfm: DocumentFeatureMatrix,
    candidates: Iterable[int],
    *,
    modeler: TopicModeler,
    metrics: Sequence[str] = ("CaoJuan2009", "Arun2010", "Deveaud2014"),
    seed: Optional[int] = None,
) -> pd.DataFrame:
    """One model per candidate k fitted on the whole dfm; one column per metric."""
    names = _check_metrics(metrics, modeler)
    lengths = dfm.doc_lengths()
    rows = []
    for k in candidates:
        with step("tuning.fit", k=k, seed=seed):
            try:
                model = modeler.fit(dfm.counts, dfm.vocabulary, int(k), seed=seed)
            except EvaluationError:
                raise
            except Exception as e:
                raise FitFailure(message=msg.FIT_FAILED.format(k=k, error=e)) from e
        row = {"k": int(k)}
        for name in names:
            row[name] = METRICS[name](model, lengths)
        logger.info("k=%d %s", k, ", ".join(f"{n}={row[n]:.4f}" for n in names))
        rows.append(row)
    logger.info(msg.TUNING_COMPLETED.format(n=len(rows)))
    return pd.DataFrame(rows, columns=["k", *names])


def normalize_metrics(df: pd.DataFrame) -> pd.DataFrame:
    """
    Long format (k, metric, value, direction) with each metric min-max scaled
    to 0..1, for plotting all metrics on one axis.
    """
    frames = []
    for name in [c for c in df.columns if c in METRIC_DIRECTIONS]:
        col = df[name].astype(float)
        span = col.max() - col.min()
        scaled = (col - col.min()) / span if span > 0 else col * 0.0
        frames.append(
            pd.DataFrame(
                {
                    "k": df["k"],
                    "metric": name,
                    "value": scaled,
                    "direction": METRIC_DIRECTIONS[name],
                }
            )
        )
    if not frames:
        return pd.DataFrame(columns=["k", "metric", "value", "direction"])
    return pd.concat(frames, ignore_index=True)
