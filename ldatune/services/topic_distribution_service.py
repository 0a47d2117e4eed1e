from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import List, Optional

import pandas as pd

from ldatune.core.feature_matrix.matrix import DocumentFeatureMatrix
from ldatune.core.topic_modeling.base import TopicModeler
from ldatune.core.topic_modeling.config import TopicModelConfig
from ldatune.core.topic_modeling.utils import summarize_topics
from ldatune.messages import corpus_messages as corpus_msg
from ldatune.messages import evaluation_messages as msg
from ldatune.utils.exceptions import CorpusError, EvaluationError, FitFailure
from ldatune.utils.telemetry import step

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TopicDistributionResult:
    num_topics: int
    topics: List[dict]  # [{topic_id, keywords, label}, ...]
    doc_topics: pd.DataFrame  # index: doc_id, columns: topic labels
    dominant_topic: pd.Series  # index: doc_id
    by_covariate: Optional[pd.DataFrame]  # mean proportions per covariate level


class TopicDistributionService:
    """
    Fits one model on the full dfm and reports topic proportions per
    document and, optionally, averaged by a document covariate (e.g. party).
    """

    def __init__(self, modeler: TopicModeler, cfg: TopicModelConfig):
        self.modeler = modeler
        self.cfg = cfg

    def fit(
        self,
        dfm: DocumentFeatureMatrix,
        k: int,
        *,
        seed: Optional[int] = None,
        covariate: Optional[str] = None,
    ) -> TopicDistributionResult:
        if covariate is not None and covariate not in dfm.docvars.columns:
            raise CorpusError(
                code="COVARIATE_MISSING",
                message=corpus_msg.COVARIATE_MISSING.format(column=covariate),
            )
        seed = self.cfg.random_state if seed is None else seed

        with step("topics.fit", k=k, seed=seed):
            try:
                model = self.modeler.fit(dfm.counts, dfm.vocabulary, k, seed=seed)
            except EvaluationError:
                raise
            except Exception as e:
                raise FitFailure(message=msg.FIT_FAILED.format(k=k, error=e)) from e

        topics = summarize_topics(model.topic_term(), dfm.vocabulary, self.cfg.topn_words)
        labels = [t["label"] for t in topics]
        doc_topics = pd.DataFrame(
            model.doc_topic(), index=pd.Index(dfm.doc_ids, name="doc_id"), columns=labels
        )
        dominant = doc_topics.idxmax(axis=1).rename("dominant_topic")

        by_covariate = None
        if covariate is not None:
            groups = dfm.docvars[covariate].to_numpy()
            by_covariate = doc_topics.groupby(groups).mean()
            by_covariate.index.name = covariate

        logger.info(msg.DISTRIBUTION_COMPLETED.format(k=k))
        return TopicDistributionResult(
            num_topics=k,
            topics=topics,
            doc_topics=doc_topics,
            dominant_topic=dominant,
            by_covariate=by_covariate,
        )
