"""
Result sink: one long-format table row per (trial, step, bin) plus a JSON
run description.

    <outdir>/windows.csv   trial, step, bin, freq_lo, freq_hi, signal, background, measured,
                           start_freq, end_freq, f_true, covers, total_power, residual
    <outdir>/run.json      seed, scan configuration, physics context, trials
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Dict, Tuple

import numpy as np
import pandas as pd

from .errors import PersistenceError
from .log import get_logger
from .physics import PhysicsContext
from .scan import ScanConfiguration, ScanResult
from .window import Window

log = get_logger(__name__)

FORMAT_VERSION = "axsim-scan/1"
WINDOWS_FILE = "windows.csv"
RUN_FILE = "run.json"
FLOAT_FORMAT = "%.17g"

BIN_COLS = ["freq_lo", "freq_hi", "signal", "background", "measured"]
WINDOW_COLS = ["start_freq", "end_freq", "f_true", "covers", "total_power", "residual"]


def windows_to_frame(result: ScanResult) -> pd.DataFrame:
    """Flatten all windows, ordered by (trial, step, bin)."""
    parts = []
    for w in result:
        n = w.n_bins
        parts.append(pd.DataFrame({
            "trial": np.full(n, w.trial_index, dtype=int),
            "step": np.full(n, w.step_index, dtype=int),
            "bin": np.arange(n, dtype=int),
            "freq_lo": w.edges[:-1],
            "freq_hi": w.edges[1:],
            "signal": w.signal,
            "background": w.background,
            "measured": w.measured,
            "start_freq": w.start_freq,
            "end_freq": w.end_freq,
            "f_true": w.f_true,
            "covers": w.covers,
            "total_power": w.total_power,
            "residual": w.residual,
        }))
    if not parts:
        return pd.DataFrame(columns=["trial", "step", "bin"] + BIN_COLS + WINDOW_COLS)
    return pd.concat(parts, ignore_index=True)


def frame_to_windows(df: pd.DataFrame) -> Dict[Tuple[int, int], Window]:
    windows: Dict[Tuple[int, int], Window] = {}
    for (trial, step), g in df.sort_values(["trial", "step", "bin"]).groupby(["trial", "step"], sort=True):
        first = g.iloc[0]
        edges = np.append(g["freq_lo"].to_numpy(float), g["freq_hi"].to_numpy(float)[-1])
        arrays = {k: g[k].to_numpy(float) for k in ("signal", "background", "measured")}
        for a in (edges, *arrays.values()):
            a.setflags(write=False)
        windows[(int(trial), int(step))] = Window(
            trial_index=int(trial),
            step_index=int(step),
            start_freq=float(first["start_freq"]),
            end_freq=float(first["end_freq"]),
            f_true=float(first["f_true"]),
            edges=edges,
            covers=bool(first["covers"]),
            total_power=float(first["total_power"]),
            residual=float(first["residual"]),
            **arrays,
        )
    return windows


def check_destination(outdir: str | Path, overwrite: bool = False) -> Path:
    """Refuse a directory that already holds a run (or part of one) unless ``overwrite``."""
    out = Path(outdir)
    if not overwrite and any((out / name).exists() for name in (WINDOWS_FILE, RUN_FILE)):
        raise PersistenceError(f"A scan is already stored in {out}; pass overwrite=True to replace it")
    return out


def save_scan(result: ScanResult, outdir: str | Path, overwrite: bool = False) -> Path:
    """
    Write ``result`` under ``outdir``. Both files are written to temporary
    names first and renamed into place, the run description last. Any I/O
    failure aborts with PersistenceError.
    """
    out = check_destination(outdir, overwrite)
    windows_path = out / WINDOWS_FILE
    run_path = out / RUN_FILE
    windows_tmp = out / (WINDOWS_FILE + ".tmp")
    run_tmp = out / (RUN_FILE + ".tmp")

    meta = {
        "format": FORMAT_VERSION,
        "seed": result.seed,
        "config": result.config.to_dict(),
        "physics": result.physics.to_dict(),
        "trials": [{"trial_index": int(i), "f_true": float(f)} for i, f in sorted(result.trials.items())],
    }
    try:
        out.mkdir(parents=True, exist_ok=True)
        windows_to_frame(result).to_csv(windows_tmp, index=False, float_format=FLOAT_FORMAT)
        with open(run_tmp, "w", encoding="utf-8") as f:
            json.dump(meta, f, indent=2)
        os.replace(windows_tmp, windows_path)
        os.replace(run_tmp, run_path)
    except OSError as exc:
        if out.is_dir():
            for tmp in (windows_tmp, run_tmp):
                tmp.unlink(missing_ok=True)
        raise PersistenceError(f"Could not write scan to {out}: {exc}") from exc
    log.info("Wrote %d windows for %d trials to '%s'", len(result), len(result.trials), out)
    return out


def load_scan(outdir: str | Path) -> ScanResult:
    out = Path(outdir)
    try:
        with open(out / RUN_FILE, "r", encoding="utf-8") as f:
            meta = json.load(f)
        df = pd.read_csv(out / WINDOWS_FILE, float_precision="round_trip")
    except (OSError, ValueError) as exc:
        raise PersistenceError(f"Could not read scan from {out}: {exc}") from exc
    if meta.get("format") != FORMAT_VERSION:
        raise PersistenceError(f"Unsupported scan format in {out}: {meta.get('format')!r}")

    return ScanResult(
        ScanConfiguration.from_dict(meta["config"]),
        PhysicsContext.from_dict(meta["physics"]),
        seed=meta.get("seed"),
        trials={int(t["trial_index"]): float(t["f_true"]) for t in meta["trials"]},
        windows=frame_to_windows(df),
    )
