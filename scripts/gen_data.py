"""
Generate synthetic grand-spectrum scans (signal + thermal noise) for offline analysis.
"""
import json
from pathlib import Path

from axsim import ScanConfiguration, run_scan, save_scan
from axsim.log import configure_logging


def main(outdir="data", n_runs=3, num_trials=2, seed=123, narrow=False):
    configure_logging()
    Path(outdir).mkdir(parents=True, exist_ok=True)
    runs = []
    for i in range(n_runs):
        cfg = ScanConfiguration(scan_low=749.0, scan_high=751.0, num_trials=num_trials, narrow=narrow)
        result = run_scan(cfg, seed=seed + i)
        run_dir = Path(outdir) / f"run_{i + 1:02d}"
        save_scan(result, run_dir, overwrite=True)
        runs.append({
            "id": f"R{i + 1:02d}",
            "seed": seed + i,
            "f_true": [result.trials[t] for t in sorted(result.trials)],
            "dir": str(run_dir),
        })
    with open(Path(outdir) / "runs.json", "w") as f:
        json.dump(runs, f, indent=2)
    print(f"Wrote {n_runs} scans to '{outdir}'")


if __name__ == "__main__":
    main()
