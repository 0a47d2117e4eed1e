import argparse
import dataclasses
import logging
import time
from typing import Any, Dict, List

import yaml

from ldatune.core.collocation.config import CollocationConfig
from ldatune.core.collocation.phrases import PhraseCollocator
from ldatune.core.config import settings
from ldatune.core.corpus.collection import load_csv
from ldatune.core.feature_matrix.builder import DfmBuilder
from ldatune.core.feature_matrix.config import FeatureMatrixConfig
from ldatune.core.feature_matrix.matrix import DocumentFeatureMatrix
from ldatune.core.stemming.config import StemmingConfig
from ldatune.core.stemming.stemmer import SnowballTokenStemmer
from ldatune.core.stopword_removal.config import StopwordConfig
from ldatune.core.stopword_removal.removal import DefaultStopwordRemover
from ldatune.core.tokenization.config import TokenizationConfig
from ldatune.core.tokenization.tokenizer import DefaultTokenizer
from ldatune.core.topic_modeling.config import TopicModelConfig
from ldatune.core.topic_modeling.factory import make_modeler
from ldatune.services.file_service import FileService
from ldatune.services.perplexity_cv_service import PerplexityCVService
from ldatune.services.topic_distribution_service import TopicDistributionService
from ldatune.tuning.metrics import find_topics_number, normalize_metrics
from ldatune.utils.exceptions import ConfigurationError, EvaluationError
from ldatune.utils.logging_setup import setup_logging
from ldatune.utils.telemetry import setup_observability

logger = logging.getLogger(__name__)


def _config(cls, values: Dict[str, Any] | None):
    values = dict(values or {})
    known = {f.name for f in dataclasses.fields(cls)}
    unknown = set(values) - known
    if unknown:
        raise ConfigurationError(
            code="UNKNOWN_CONFIG_KEYS",
            message=f"{cls.__name__} got unknown keys: {sorted(unknown)}",
        )
    return cls(**values)


def _candidates(value: Any) -> List[int]:
    # either an explicit list or {start, stop, step} (stop inclusive)
    if isinstance(value, dict):
        return list(range(value["start"], value["stop"] + 1, value.get("step", 1)))
    return [int(k) for k in value]


def build_dfm(config: Dict[str, Any]) -> DocumentFeatureMatrix:
    corpus_cfg = config["corpus"]
    collection = load_csv(
        corpus_cfg["path"],
        text_column=corpus_cfg.get("text_column", "text"),
        id_column=corpus_cfg.get("id_column"),
    )
    if corpus_cfg.get("drop_empty_texts", True):
        keep = [bool(t.strip()) for t in collection.texts]
        if not all(keep):
            logger.warning(f"Dropped {keep.count(False)} documents with no text")
            collection = collection.subset(keep)
    prep = config.get("preprocessing", {})
    stop_values = dict(prep.get("stopwords") or {})
    for key in ("custom_stopwords", "exclude_stopwords"):
        if key in stop_values:
            stop_values[key] = frozenset(stop_values[key])

    builder = DfmBuilder(
        tokenizer=DefaultTokenizer(_config(TokenizationConfig, prep.get("tokenization"))),
        stopwords=DefaultStopwordRemover(_config(StopwordConfig, stop_values)),
        collocator=PhraseCollocator(_config(CollocationConfig, prep.get("collocation"))),
        stemmer=SnowballTokenStemmer(_config(StemmingConfig, prep.get("stemming"))),
        config=_config(FeatureMatrixConfig, prep.get("feature_matrix")),
    )
    return builder.build(collection)


def run_tuning(action, dfm, modeler, model_cfg, files: FileService) -> None:
    df = find_topics_number(
        dfm,
        _candidates(action["candidates"]),
        modeler=modeler,
        metrics=action.get("metrics", ["CaoJuan2009", "Arun2010", "Deveaud2014"]),
        seed=action.get("seed", model_cfg.random_state),
    )
    out = action.get("file_output", "tuning")
    files.write_df(df, f"{out}/metrics.csv.gz")
    files.write_df(normalize_metrics(df), f"{out}/metrics_normalized.csv.gz")


def run_perplexity_cv(action, dfm, modeler, model_cfg, files: FileService) -> None:
    result = PerplexityCVService(modeler).evaluate(
        dfm,
        _candidates(action["candidates"]),
        n_folds=action.get("n_folds"),
        fold_seed=action.get("fold_seed", settings.FOLD_SEED),
        run_seed=action.get("run_seed", settings.RUN_SEED),
        fail_fast=action.get("fail_fast"),
        n_jobs=action.get("n_jobs"),
        split=action.get("split"),
    )
    out = action.get("file_output", "cv")
    files.write_df(result.per_fold, f"{out}/per_fold.csv")
    files.write_df(result.aggregate, f"{out}/aggregate.csv")
    files.write_df(result.fold_matrix, f"{out}/fold_matrix.csv")


def run_topic_distribution(action, dfm, modeler, model_cfg, files: FileService) -> None:
    result = TopicDistributionService(modeler, model_cfg).fit(
        dfm,
        int(action["k"]),
        seed=action.get("seed"),
        covariate=action.get("covariate"),
    )
    out = action.get("file_output", "topics")
    files.write_records(result.topics, f"{out}/topics.jsonl")
    files.write_df(result.doc_topics, f"{out}/doc_topics.csv.gz")
    if result.by_covariate is not None:
        files.write_df(result.by_covariate, f"{out}/by_covariate.csv")


STEPS = {
    "tuning": run_tuning,
    "perplexity_cv": run_perplexity_cv,
    "topic_distribution": run_topic_distribution,
}


def run(config: Dict[str, Any]) -> None:
    model_cfg = _config(TopicModelConfig, config.get("model"))
    modeler = make_modeler(model_cfg)
    files = FileService.local(config.get("output_dir"))
    dfm = build_dfm(config)

    for action in config["steps"]["actions"]:
        step_type = action["type"]
        if not action.get("is_execute", False):
            logger.info(f"Skipping step: {step_type}")
            continue
        handler = STEPS.get(step_type)
        if handler is None:
            logger.warning(f"Invalid step configuration: {step_type}")
            continue

        logger.info(f"Running step: {step_type} ({model_cfg.backend})...")
        start_time = time.time()
        handler(action, dfm, modeler, model_cfg, files)
        logger.info(f"✅ Step {step_type} completed in {time.time() - start_time:.2f} seconds.")

    logger.info("Pipeline execution completed.")


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Run LDA topic-number evaluation")
    parser.add_argument("config", type=str, help="Path to the YAML run configuration")
    args = parser.parse_args(argv)

    setup_logging()
    setup_observability()
    with open(args.config, "r") as file:
        config = yaml.safe_load(file)
    try:
        run(config)
    except EvaluationError as e:
        logger.error(f"Pipeline failed. Exiting pipeline. {e.to_dict()}")
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
