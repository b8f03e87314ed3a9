"""``axsim-scan``: run a stacked-window signal injection study from the command line."""
from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from typing import List, Optional

from .config import RunConfig, load_config
from .errors import ConfigurationError, PersistenceError
from .log import configure_logging, get_logger
from .scan import ScanDriver
from .sink import check_destination, save_scan

log = get_logger(__name__)

EXIT_OK = 0
EXIT_PERSISTENCE = 1
EXIT_CONFIG = 2


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Simulate a grand-spectrum axion search: signal + thermal noise over stepped windows",
        argument_default=argparse.SUPPRESS,
    )
    p.add_argument("--config", type=str, help="YAML/JSON run configuration")
    p.add_argument("--lo", dest="scan_low", type=float, help="Lowest signal frequency [MHz] (default 749)")
    p.add_argument("--hi", dest="scan_high", type=float, help="Highest signal frequency [MHz] (default 751)")
    p.add_argument("--narrow", action="store_true", help="Put all signal power in one bin")
    p.add_argument("--trials", dest="num_trials", type=int, help="Number of trials (default 1)")
    p.add_argument("--tail-windows", dest="tail_windows", action="store_true",
                   help="Inject the Doppler tail into windows entirely above the signal")
    p.add_argument("--seed", type=int, help="Root seed")
    p.add_argument("--workers", type=int, default=1, help="Worker processes (default 1)")
    p.add_argument("--out", type=str, help="Directory for windows.csv and run.json")
    p.add_argument("--overwrite", action="store_true", default=False)
    p.add_argument("--progress", action="store_true", default=False)
    p.add_argument("--debug", action="store_true", default=False, help="Verbose logging only")
    return p.parse_args(argv)


def build_run_config(args: argparse.Namespace) -> RunConfig:
    cfg = load_config(args.config) if getattr(args, "config", None) else RunConfig()
    overrides = {k: getattr(args, k) for k in ("scan_low", "scan_high", "narrow", "num_trials", "tail_windows")
                 if hasattr(args, k)}
    if overrides:
        cfg.scan = replace(cfg.scan, **overrides)
    if hasattr(args, "seed"):
        cfg.seed = args.seed
    return cfg


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(debug=args.debug)
    try:
        cfg = build_run_config(args)
        driver = ScanDriver(cfg.scan, cfg.physics)
    except (ConfigurationError, FileNotFoundError) as exc:
        log.error("Invalid configuration: %s", exc)
        return EXIT_CONFIG

    out = getattr(args, "out", None)
    if out:
        try:
            check_destination(out, overwrite=args.overwrite)
        except PersistenceError as exc:
            log.error("%s", exc)
            return EXIT_PERSISTENCE

    result = driver.run(seed=cfg.seed, workers=args.workers, progress=args.progress)
    for i, f_true in sorted(result.trials.items()):
        log.info("trial %d: f_true = %.6f MHz, %d windows with signal",
                 i, f_true, len(result.covering_windows(i)))

    if out:
        try:
            save_scan(result, out, overwrite=args.overwrite)
        except PersistenceError as exc:
            log.error("%s", exc)
            return EXIT_PERSISTENCE
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
