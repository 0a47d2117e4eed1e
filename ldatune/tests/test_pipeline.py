import logging

import numpy as np
import pandas as pd
import pytest
import yaml

from ldatune.pipelines.run_evaluation import _candidates, build_dfm, main, run
from ldatune.utils.exceptions import ConfigurationError

FISCAL = "tax budget revenue spending deficit treasury tariff income".split()
HEALTH = "health hospital patient insurance medicare doctor clinic nurse".split()


@pytest.fixture
def corpus_csv(tmp_path):
    rng = np.random.default_rng(0)
    rows = []
    for i in range(40):
        pool = FISCAL if i % 2 == 0 else HEALTH
        words = rng.choice(pool, size=25).tolist() + rng.choice(FISCAL + HEALTH, size=5).tolist()
        rows.append({"doc_id": f"HR{i}", "text": " ".join(words), "party": "DR"[i % 2]})
    path = tmp_path / "bills.csv"
    pd.DataFrame(rows).to_csv(path, index=False)
    return path


def _config(corpus_csv, out_dir, **cv):
    return {
        "corpus": {"path": str(corpus_csv), "text_column": "text", "id_column": "doc_id"},
        "output_dir": str(out_dir),
        "preprocessing": {"collocation": {"enabled": False}},
        "model": {"backend": "sklearn", "iterations": 5},
        "steps": {
            "actions": [
                {
                    "type": "tuning",
                    "is_execute": True,
                    "candidates": [2, 3],
                    "metrics": ["CaoJuan2009", "Deveaud2014"],
                },
                {
                    "type": "perplexity_cv",
                    "is_execute": True,
                    "candidates": {"start": 2, "stop": 4},
                    "n_folds": 4,
                    **cv,
                },
                {"type": "topic_distribution", "is_execute": True, "k": 2, "covariate": "party"},
                {"type": "sentiment", "is_execute": True},
                {"type": "perplexity_cv", "is_execute": False, "candidates": [9]},
            ]
        },
    }


def test_pipeline_writes_every_view(corpus_csv, tmp_path):
    out = tmp_path / "out"
    run(_config(corpus_csv, out))

    assert (out / "tuning" / "metrics.csv.gz").exists()
    assert (out / "tuning" / "metrics_normalized.csv.gz").exists()
    assert (out / "topics" / "topics.jsonl").exists()
    assert (out / "topics" / "doc_topics.csv.gz").exists()

    per_fold = pd.read_csv(out / "cv" / "per_fold.csv")
    assert len(per_fold) == 3 * 4
    assert (per_fold["status"] == "ok").all()
    aggregate = pd.read_csv(out / "cv" / "aggregate.csv")
    assert aggregate["k"].tolist() == [2, 3, 4]
    assert aggregate["n_ok"].tolist() == [4, 4, 4]
    fold_matrix = pd.read_csv(out / "cv" / "fold_matrix.csv")
    assert fold_matrix["k"].tolist() == [2, 3, 4]
    assert list(fold_matrix.columns) == ["k", "1", "2", "3", "4"]

    by_party = pd.read_csv(out / "topics" / "by_covariate.csv")
    assert by_party["party"].tolist() == ["D", "R"]


def test_pipeline_pooled_matches_sequential(corpus_csv, tmp_path):
    run(_config(corpus_csv, tmp_path / "seq", n_jobs=1, run_seed=5))
    run(_config(corpus_csv, tmp_path / "pool", n_jobs=3, run_seed=5))

    seq = pd.read_csv(tmp_path / "seq" / "cv" / "per_fold.csv")
    pool = pd.read_csv(tmp_path / "pool" / "cv" / "per_fold.csv")
    pd.testing.assert_series_equal(seq["score"], pool["score"])


def test_main_reads_yaml(corpus_csv, tmp_path):
    config_path = tmp_path / "run.yaml"
    config_path.write_text(yaml.safe_dump(_config(corpus_csv, tmp_path / "cli")))
    main([str(config_path)])
    assert (tmp_path / "cli" / "cv" / "aggregate.csv").exists()


def test_unknown_config_key(corpus_csv, tmp_path):
    config = _config(corpus_csv, tmp_path)
    config["model"]["num_topics"] = 5
    with pytest.raises(ConfigurationError) as exc:
        run(config)
    assert exc.value.code == "UNKNOWN_CONFIG_KEYS"


def test_candidates_range_is_inclusive():
    assert _candidates({"start": 10, "stop": 30, "step": 10}) == [10, 20, 30]
    assert _candidates([5, "6"]) == [5, 6]


def test_main_exits_non_zero_on_evaluation_error(corpus_csv, tmp_path):
    config = _config(corpus_csv, tmp_path)
    config["steps"]["actions"][1]["candidates"] = [60]  # more topics than training docs
    config["steps"]["actions"][1]["fail_fast"] = True
    config_path = tmp_path / "run.yaml"
    config_path.write_text(yaml.safe_dump(config))

    with pytest.raises(SystemExit) as exc:
        main([str(config_path)])
    assert exc.value.code == 1


def test_blank_texts_dropped_before_build(corpus_csv, tmp_path, caplog):
    df = pd.read_csv(corpus_csv)
    df.loc[len(df)] = {"doc_id": "HR_blank", "text": "   ", "party": "D"}
    df.to_csv(corpus_csv, index=False)

    with caplog.at_level(logging.WARNING):
        dfm = build_dfm(_config(corpus_csv, tmp_path))

    assert "Dropped 1 documents with no text" in caplog.text
    assert "HR_blank" not in dfm.doc_ids
    assert dfm.n_docs == 40


def test_mismatched_split_exits_before_fitting(corpus_csv, tmp_path):
    config = _config(corpus_csv, tmp_path, split="sideways")
    config_path = tmp_path / "run.yaml"
    config_path.write_text(yaml.safe_dump(config))

    with pytest.raises(SystemExit) as exc:
        main([str(config_path)])
    assert exc.value.code == 1
    assert not (tmp_path / "cv" / "per_fold.csv").exists()
