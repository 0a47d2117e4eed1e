from __future__ import annotations

from ldatune.core.topic_modeling.base import TopicModeler
from ldatune.core.topic_modeling.config import TopicModelConfig
from ldatune.messages import corpus_messages as msg
from ldatune.utils.exceptions import ConfigurationError


def make_modeler(cfg: TopicModelConfig) -> TopicModeler:
    # backends are imported on demand; each pulls a heavy native library
    if cfg.backend == "gensim":
        from ldatune.core.topic_modeling.gensim_lda import GensimLDAModeler

        return GensimLDAModeler(cfg)
    if cfg.backend == "sklearn":
        from ldatune.core.topic_modeling.sklearn_lda import SklearnLDAModeler

        return SklearnLDAModeler(cfg)
    if cfg.backend == "tomotopy":
        from ldatune.core.topic_modeling.tomotopy_lda import TomotopyLDAModeler

        return TomotopyLDAModeler(cfg)
    raise ConfigurationError(
        code="UNKNOWN_BACKEND", message=msg.UNKNOWN_BACKEND.format(backend=cfg.backend)
    )
