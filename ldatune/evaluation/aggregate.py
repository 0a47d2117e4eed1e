from __future__ import annotations
from dataclasses import asdict
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from ldatune.evaluation.records import ScoreRecord

PER_FOLD_COLUMNS = [
    "k",
    "fold",
    "status",
    "score",
    "error_kind",
    "error_message",
    "seed",
    "n_train",
    "n_holdout",
    "duration_s",
]
AGGREGATE_COLUMNS = [
    "mean_perplexity",
    "std_perplexity",
    "n_ok",
    "n_failed",
    "n_cancelled",
]


def _frame(records: Sequence[ScoreRecord]) -> pd.DataFrame:
    rows = [asdict(r) for r in records]
    df = pd.DataFrame(rows, columns=PER_FOLD_COLUMNS)
    df["score"] = df["score"].astype(float)
    return df


def per_fold_view(records: Sequence[ScoreRecord]) -> pd.DataFrame:
    """Every record, failures included, ordered by (k, fold)."""
    return (
        _frame(records)
        .sort_values(["k", "fold"], kind="stable")
        .reset_index(drop=True)
    )


def fold_matrix(records: Sequence[ScoreRecord]) -> pd.DataFrame:
    """k x fold table of perplexities; NaN where the pair did not succeed."""
    df = _frame(records)
    if df.empty:
        return pd.DataFrame()
    order = list(dict.fromkeys(df["k"]))
    return df.pivot(index="k", columns="fold", values="score").reindex(order)


def aggregate_view(records: Sequence[ScoreRecord]) -> pd.DataFrame:
    """
    Mean perplexity per k over the folds that succeeded for that k.
    A k with no successful fold gets NaN (with n_ok == 0), never 0.
    """
    df = _frame(records)
    rows = []
    for k, g in df.groupby("k", sort=False):
        scores = g.loc[g["status"] == "ok", "score"]
        rows.append(
            {
                "k": k,
                "mean_perplexity": float(scores.mean()) if len(scores) else np.nan,
                "std_perplexity": float(scores.std(ddof=1)) if len(scores) > 1 else np.nan,
                "n_ok": int(len(scores)),
                "n_failed": int((g["status"] == "failed").sum()),
                "n_cancelled": int((g["status"] == "cancelled").sum()),
            }
        )
    if not rows:
        return pd.DataFrame(columns=AGGREGATE_COLUMNS, index=pd.Index([], name="k"))
    return pd.DataFrame(rows).set_index("k")[AGGREGATE_COLUMNS]


def best_k(aggregate: pd.DataFrame) -> Optional[int]:
    defined = aggregate["mean_perplexity"].dropna()
    if defined.empty:
        return None
    return int(defined.idxmin())


def failures(records: Sequence[ScoreRecord]) -> List[ScoreRecord]:
    return [r for r in records if not r.ok]
