import math

import pytest

from ldatune.core.feature_matrix.matrix import DocumentFeatureMatrix
from ldatune.core.folds.assigner import assign_folds
from ldatune.evaluation.trainer import split_rows, train_and_score
from ldatune.utils.exceptions import (
    ConfigurationError,
    FitFailure,
    InsufficientData,
    InvalidPartition,
    ScoreFailure,
)


def test_returns_finite_non_negative_score(dfm, fake_modeler):
    folds = assign_folds(dfm.n_docs, 5, seed=1)
    outcome = train_and_score(dfm, folds, 1, 10, modeler=fake_modeler, seed=7)

    assert math.isfinite(outcome.score)
    assert outcome.score >= 0
    assert outcome.n_train == 104
    assert outcome.n_holdout == 26
    assert outcome.holdout_tokens > 0


def test_fits_only_on_training_rows(dfm, fake_modeler):
    folds = assign_folds(dfm.n_docs, 5, seed=1)
    train_and_score(dfm, folds, 3, 10, modeler=fake_modeler, seed=5)
    assert fake_modeler.calls == [(10, 104, 5)]


def test_train_fold_split_reverses_direction(dfm, fake_modeler):
    folds = assign_folds(dfm.n_docs, 5, seed=1)
    outcome = train_and_score(
        dfm, folds, 2, 10, modeler=fake_modeler, split="train_fold"
    )
    assert outcome.n_train == 26
    assert outcome.n_holdout == 104


def test_split_rows_partition(dfm):
    folds = assign_folds(dfm.n_docs, 5, seed=1)
    train, holdout = split_rows(folds, 4)
    assert set(train.tolist()).isdisjoint(holdout.tolist())
    assert len(train) + len(holdout) == dfm.n_docs


# -------------------------------------
# ❌ Boundary and failure cases
# -------------------------------------
def test_k_above_training_size_is_insufficient_data(dfm_factory, fake_modeler):
    dfm = dfm_factory(n_docs=10, n_terms=8)
    folds = assign_folds(10, 5)
    with pytest.raises(InsufficientData):
        train_and_score(dfm, folds, 1, 9, modeler=fake_modeler)
    assert fake_modeler.calls == []


def test_k_equal_training_size_is_allowed(dfm_factory, fake_modeler):
    dfm = dfm_factory(n_docs=10, n_terms=8)
    folds = assign_folds(10, 5)
    outcome = train_and_score(dfm, folds, 1, 8, modeler=fake_modeler)
    assert outcome.n_train == 8


def test_non_positive_k(dfm, fake_modeler):
    folds = assign_folds(dfm.n_docs, 5)
    with pytest.raises(InsufficientData) as exc:
        train_and_score(dfm, folds, 1, 0, modeler=fake_modeler)
    assert exc.value.code == "NON_POSITIVE_K"
    assert fake_modeler.calls == []


def test_unknown_split_direction(dfm):
    folds = assign_folds(dfm.n_docs, 5)
    with pytest.raises(ConfigurationError) as exc:
        split_rows(folds, 1, "sideways")
    assert exc.value.code == "UNKNOWN_SPLIT"


def test_backend_error_becomes_fit_failure(dfm, failing_modeler):
    folds = assign_folds(dfm.n_docs, 5)
    with pytest.raises(FitFailure) as exc:
        train_and_score(dfm, folds, 1, 20, modeler=failing_modeler)
    assert "did not converge" in exc.value.message
    assert isinstance(exc.value.__cause__, RuntimeError)


def test_empty_holdout_is_score_failure(dfm_factory, fake_modeler):
    dfm = dfm_factory(n_docs=10, n_terms=5)
    counts = dfm.counts.tolil()
    folds = assign_folds(10, 5)
    for row in folds.members(2):
        counts[row, :] = 0
    emptied = DocumentFeatureMatrix(
        counts=counts.tocsr(), vocabulary=dfm.vocabulary, doc_ids=dfm.doc_ids
    )
    with pytest.raises(ScoreFailure) as exc:
        train_and_score(emptied, folds, 2, 2, modeler=fake_modeler)
    assert exc.value.code == "EMPTY_HOLDOUT"


def test_scoring_error_becomes_score_failure(dfm, fake_modeler, fake_fitted_cls, monkeypatch):
    def boom(self, counts):
        raise KeyError("vocabulary mismatch")

    monkeypatch.setattr(fake_fitted_cls, "perplexity", boom)
    folds = assign_folds(dfm.n_docs, 5)
    with pytest.raises(ScoreFailure):
        train_and_score(dfm, folds, 1, 10, modeler=fake_modeler)


def test_nan_score_is_score_failure(dfm, fake_modeler, fake_fitted_cls, monkeypatch):
    monkeypatch.setattr(
        fake_fitted_cls, "perplexity", lambda self, counts: float("nan")
    )
    folds = assign_folds(dfm.n_docs, 5)
    with pytest.raises(ScoreFailure) as exc:
        train_and_score(dfm, folds, 1, 10, modeler=fake_modeler)
    assert exc.value.code == "NON_FINITE_PERPLEXITY"


def test_fold_assignment_must_match_matrix(dfm, fake_modeler):
    folds = assign_folds(dfm.n_docs - 1, 5)
    with pytest.raises(InvalidPartition):
        train_and_score(dfm, folds, 1, 10, modeler=fake_modeler)
