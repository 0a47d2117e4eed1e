from __future__ import annotations
from typing import Optional

import numpy as np


def derive_seed(run_seed: Optional[int], k: int, fold: int) -> Optional[int]:
    """
    Per-job seed from the run seed and the (k, fold) pair. Independent of
    scheduling order, so sequential and pooled sweeps draw the same streams.
    Returns None when the run is unseeded.
    """
    if run_seed is None:
        return None
    if run_seed < 0:
        raise ValueError(f"run_seed must be non-negative, got {run_seed}")
    ss = np.random.SeedSequence(entropy=run_seed, spawn_key=(int(k), int(fold)))
    # 32-bit so it is accepted by numpy RandomState (gensim, sklearn)
    return int(ss.generate_state(1, dtype=np.uint32)[0])
