import numpy as np
import pytest

from ldatune.core.folds.assigner import assign_folds
from ldatune.utils.exceptions import InvalidPartition


@pytest.mark.parametrize(
    "n_docs,n_folds", [(130, 5), (131, 5), (7, 7), (10, 3), (1, 1), (23, 4)]
)
def test_partition_covers_every_document_once(n_docs, n_folds):
    folds = assign_folds(n_docs, n_folds, seed=11)

    seen = np.concatenate([folds.members(f) for f in folds.folds()])
    assert sorted(seen.tolist()) == list(range(n_docs))

    sizes = folds.sizes()
    assert set(sizes) == set(range(1, n_folds + 1))
    assert max(sizes.values()) - min(sizes.values()) <= 1


def test_reference_layout_gives_26_per_fold():
    folds = assign_folds(130, 5, seed=42)
    assert folds.sizes() == {1: 26, 2: 26, 3: 26, 4: 26, 5: 26}


def test_same_seed_same_assignment():
    a = assign_folds(50, 5, seed=3)
    b = assign_folds(50, 5, seed=3)
    assert np.array_equal(a.labels, b.labels)


def test_unseeded_assignment_is_round_robin():
    folds = assign_folds(6, 3)
    assert folds.labels.tolist() == [1, 2, 3, 1, 2, 3]


def test_labels_are_read_only():
    folds = assign_folds(10, 2, seed=1)
    with pytest.raises(ValueError):
        folds.labels[0] = 2


def test_members_and_complement_are_disjoint():
    folds = assign_folds(30, 5, seed=9)
    inside = set(folds.members(2).tolist())
    outside = set(folds.complement(2).tolist())
    assert inside.isdisjoint(outside)
    assert len(inside | outside) == 30


# -------------------------------------
# ❌ Impossible configurations
# -------------------------------------
@pytest.mark.parametrize("n_docs,n_folds", [(10, 0), (10, -1), (4, 5), (0, 1)])
def test_invalid_partition(n_docs, n_folds):
    with pytest.raises(InvalidPartition):
        assign_folds(n_docs, n_folds)


def test_unknown_fold_label():
    folds = assign_folds(10, 5)
    with pytest.raises(InvalidPartition) as exc:
        folds.members(6)
    assert exc.value.code == "UNKNOWN_FOLD"
