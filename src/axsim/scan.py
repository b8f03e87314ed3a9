"""
Scan driver: per trial, draw a true signal frequency and step an overlapping
window across the padded search range.

Randomness is derived from one root ``np.random.SeedSequence``: each trial
gets its own child, and inside a trial the frequency draw and every step's
noise get their own streams. Output is therefore identical for a fixed
seed whether trials run serially or in a process pool.
"""
from __future__ import annotations

import concurrent.futures
import math
import warnings
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

import numpy as np
from tqdm.auto import tqdm

from .errors import ConfigurationError, NumericalIntegrationWarning
from .log import get_logger
from .noise import NoiseGenerator
from .physics import PhysicsContext, overlay_defaults
from .window import Window, WindowBuilder, bins_per_window

log = get_logger(__name__)

STEP_COUNT_EPS = 1e-9


@dataclass(frozen=True)
class ScanConfiguration:
    scan_low: float = 749.0             # MHz
    scan_high: float = 751.0            # MHz
    step_size: float = 2e-3             # MHz, 2 kHz
    window_width: float = 50e-3         # MHz, 50 kHz
    num_trials: int = 1
    narrow: bool = False
    tail_windows: bool = False
    renormalize: bool = False
    truncation_tolerance: float = 1e-3

    @property
    def num_steps(self) -> int:
        return int(math.floor((self.scan_high - self.scan_low) / self.step_size + STEP_COUNT_EPS))

    @property
    def scan_low_padded(self) -> float:
        return self.scan_low - 0.5 * self.window_width

    @property
    def grand_range(self) -> Tuple[float, float]:
        return (self.scan_low - 0.5 * self.window_width, self.scan_high + 0.5 * self.window_width)

    def window_bounds(self, step_index: int) -> Tuple[float, float]:
        start = self.scan_low_padded + step_index * self.step_size
        return start, start + self.window_width

    def validate(self, physics: PhysicsContext) -> int:
        """Check the scan against ``physics``; returns the number of bins per window."""
        physics.validate()
        if not self.scan_low < self.scan_high:
            raise ConfigurationError(f"scan_low ({self.scan_low}) must be below scan_high ({self.scan_high})")
        if not self.scan_low > 0:
            raise ConfigurationError(f"scan_low must be a positive frequency, got {self.scan_low}")
        if not self.step_size > 0:
            raise ConfigurationError(f"step_size must be > 0, got {self.step_size}")
        if not self.window_width >= self.step_size:
            raise ConfigurationError(
                f"window_width ({self.window_width}) must be >= step_size ({self.step_size})"
            )
        if int(self.num_trials) != self.num_trials or self.num_trials < 1:
            raise ConfigurationError(f"num_trials must be a positive integer, got {self.num_trials}")
        if self.num_steps < 1:
            raise ConfigurationError("scan range is narrower than one step")
        if self.truncation_tolerance < 0:
            raise ConfigurationError("truncation_tolerance must be >= 0")
        return bins_per_window(self.window_width, physics.bandwidth)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "ScanConfiguration":
        if d is None:
            return cls()
        return overlay_defaults(cls, d, "scan")


@dataclass
class Trial:
    trial_index: int
    f_true: float
    windows: List[Window] = field(default_factory=list)

    @property
    def covering_windows(self) -> List[Window]:
        return [w for w in self.windows if w.covers]

    def truncated_windows(self, tolerance: float) -> List[Window]:
        return [w for w in self.windows if w.covers and w.residual > tolerance]


class ScanResult:
    """Windows of a run, keyed by (trial_index, step_index)."""

    def __init__(
        self,
        config: ScanConfiguration,
        physics: PhysicsContext,
        seed: Optional[int] = None,
        trials: Optional[Dict[int, float]] = None,
        windows: Optional[Dict[Tuple[int, int], Window]] = None,
    ):
        self.config = config
        self.physics = physics
        self.seed = seed
        self.trials: Dict[int, float] = dict(trials or {})
        self.windows: Dict[Tuple[int, int], Window] = dict(windows or {})

    def add_trial(self, trial: Trial) -> None:
        self.trials[trial.trial_index] = trial.f_true
        for w in trial.windows:
            if w.key in self.windows:
                raise KeyError(f"window {w.key} recorded twice")
            self.windows[w.key] = w

    def __getitem__(self, key: Tuple[int, int]) -> Window:
        return self.windows[key]

    def __len__(self) -> int:
        return len(self.windows)

    def __iter__(self) -> Iterator[Window]:
        for key in sorted(self.windows):
            yield self.windows[key]

    def trial_windows(self, trial_index: int) -> List[Window]:
        return [w for w in self if w.trial_index == trial_index]

    def covering_windows(self, trial_index: int) -> List[Window]:
        return [w for w in self.trial_windows(trial_index) if w.covers]

    def to_frame(self):
        from .sink import windows_to_frame
        return windows_to_frame(self)


class ScanDriver:
    """
    Runs ``config.num_trials`` trials. Each trial draws its true frequency
    uniformly in [scan_low, scan_high), then builds every window
    step_index = 0 .. num_steps-1 in order. The configuration is validated
    once, up front; a failure aborts the whole run.
    """

    def __init__(self, config: ScanConfiguration, physics: Optional[PhysicsContext] = None):
        self.config = config
        self.physics = physics if physics is not None else PhysicsContext()
        self.n_bins = config.validate(self.physics)
        self.builder = WindowBuilder(
            self.physics,
            self.n_bins,
            narrow=config.narrow,
            tail_windows=config.tail_windows,
            renormalize=config.renormalize,
        )

    def run_trial(self, trial_index: int, seed_seq: np.random.SeedSequence) -> Trial:
        cfg = self.config
        streams = seed_seq.spawn(cfg.num_steps + 1)
        f_true = float(np.random.default_rng(streams[0]).uniform(cfg.scan_low, cfg.scan_high))
        log.debug("search for a signal with frequency = %.6f MHz", f_true)

        trial = Trial(trial_index=trial_index, f_true=f_true)
        for step_index in range(cfg.num_steps):
            start_freq, end_freq = cfg.window_bounds(step_index)
            noise = NoiseGenerator(self.physics.sigma_noise, np.random.default_rng(streams[step_index + 1]))
            trial.windows.append(
                self.builder.build(trial_index, step_index, start_freq, end_freq, f_true, noise)
            )
        return trial

    def run(
        self,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        workers: int = 1,
        progress: bool = False,
    ) -> ScanResult:
        cfg = self.config
        if rng is not None:
            seed = int(rng.integers(0, 2**63 - 1))
        root = np.random.SeedSequence(seed)
        if seed is None:
            seed = int(root.entropy)
        trial_seqs = root.spawn(cfg.num_trials)

        log.info("Preparing a study with %d trials and %d steps of frequency changes",
                 cfg.num_trials, cfg.num_steps)
        log.info("sigma of noise is %.6g", self.physics.sigma_noise)
        lo, hi = cfg.grand_range
        log.info("Grand spectrum frequency range is %.6f -- %.6f MHz", lo, hi)

        result = ScanResult(cfg, self.physics, seed=seed)
        for trial in self._iter_trials(trial_seqs, workers, progress):
            self._report_truncation(trial)
            result.add_trial(trial)
        return result

    def _iter_trials(self, trial_seqs, workers: int, progress: bool) -> Iterator[Trial]:
        n = len(trial_seqs)
        pbar = tqdm(total=n, desc="Scanning trials", disable=not progress)
        try:
            if workers is None or workers <= 1 or n == 1:
                for i, ss in enumerate(trial_seqs):
                    yield self.run_trial(i, ss)
                    pbar.update(1)
                return
            done: Dict[int, Trial] = {}
            with concurrent.futures.ProcessPoolExecutor(max_workers=workers) as executor:
                futures = {
                    executor.submit(_run_trial, self.config, self.physics, i, ss): i
                    for i, ss in enumerate(trial_seqs)
                }
                for future in concurrent.futures.as_completed(futures):
                    trial = future.result()
                    done[trial.trial_index] = trial
                    pbar.update(1)
            for i in sorted(done):
                yield done[i]
        finally:
            pbar.close()

    def _report_truncation(self, trial: Trial) -> None:
        if self.config.narrow:
            return
        truncated = trial.truncated_windows(self.config.truncation_tolerance)
        for w in truncated:
            log.debug("trial %d step %d: %.4g of the signal probability lies beyond %.6f MHz",
                      w.trial_index, w.step_index, w.residual, w.end_freq)
        if truncated:
            worst = max(w.residual for w in truncated)
            warnings.warn(
                f"trial {trial.trial_index}: {len(truncated)} of {len(trial.covering_windows)} "
                f"signal windows lose more than {self.config.truncation_tolerance:g} of the "
                f"signal probability at the window edge (worst {worst:.3g})",
                NumericalIntegrationWarning,
                stacklevel=3,
            )


def _run_trial(config: ScanConfiguration, physics: PhysicsContext, trial_index: int,
               seed_seq: np.random.SeedSequence) -> Trial:
    return ScanDriver(config, physics).run_trial(trial_index, seed_seq)


def run_scan(
    config: Optional[ScanConfiguration] = None,
    physics: Optional[PhysicsContext] = None,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
    workers: int = 1,
    progress: bool = False,
) -> ScanResult:
    """Validate ``config`` and run every trial; see ScanDriver."""
    return ScanDriver(config if config is not None else ScanConfiguration(), physics).run(
        seed=seed, rng=rng, workers=workers, progress=progress
    )
