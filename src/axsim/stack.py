"""Grand spectrum: overlapping scan windows combined on one global bin grid."""
from __future__ import annotations

import numpy as np
import pandas as pd

from .scan import ScanResult

FIELDS = ("signal", "background", "measured")


def grand_spectrum(result: ScanResult, trial_index: int = 0, field: str = "measured") -> pd.DataFrame:
    """
    Sum ``field`` of every window of a trial into bins of width ``bandwidth``
    spanning the padded scan range. Window bins are assigned to the global
    bin holding their centre.

    Returns columns freq (global bin centre), sum, n_windows, mean
    (NaN where no window contributes). Plain sums only; no weighting.
    """
    if field not in FIELDS:
        raise ValueError(f"field must be one of {FIELDS}, got {field!r}")
    bw = result.physics.bandwidth
    lo, hi = result.config.grand_range
    n_total = int(round((hi - lo) / bw))

    total = np.zeros(n_total)
    count = np.zeros(n_total, dtype=int)
    for w in result.trial_windows(trial_index):
        idx = np.floor((w.bin_centers - lo) / bw).astype(int)
        ok = (idx >= 0) & (idx < n_total)
        np.add.at(total, idx[ok], getattr(w, field)[ok])
        np.add.at(count, idx[ok], 1)

    mean = np.where(count > 0, total / np.maximum(count, 1), np.nan)
    return pd.DataFrame({
        "freq": lo + (np.arange(n_total) + 0.5) * bw,
        "sum": total,
        "n_windows": count,
        "mean": mean,
    })
