"""
Run configuration files (YAML or JSON):

    scan:
      scan_low: 749
      scan_high: 751
      narrow: false
      num_trials: 1
    physics:
      QL: 70000
      S11: 0.0
    seed: 1234

Values overlay onto the ScanConfiguration / PhysicsContext defaults.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigurationError
from .log import get_logger
from .physics import PhysicsContext
from .scan import ScanConfiguration

log = get_logger(__name__)

SECTIONS = ("scan", "physics", "seed")


@dataclass
class RunConfig:
    scan: ScanConfiguration = field(default_factory=ScanConfiguration)
    physics: PhysicsContext = field(default_factory=PhysicsContext)
    seed: Optional[int] = None

    def validate(self) -> int:
        return self.scan.validate(self.physics)

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "RunConfig":
        d = d or {}
        if not isinstance(d, dict):
            raise ConfigurationError("Configuration must be a mapping with 'scan', 'physics' and 'seed'")
        unknown = sorted(set(d) - set(SECTIONS))
        if unknown:
            raise ConfigurationError(f"Unknown configuration sections: {unknown}")
        seed = d.get("seed")
        if seed is not None and (not isinstance(seed, int) or isinstance(seed, bool) or seed < 0):
            raise ConfigurationError(f"seed must be a non-negative integer, got {seed!r}")
        try:
            return cls(
                scan=ScanConfiguration.from_dict(d.get("scan")),
                physics=PhysicsContext.from_dict(d.get("physics")),
                seed=seed,
            )
        except TypeError as exc:
            raise ConfigurationError(str(exc)) from exc


def load_config(path: str | Path) -> RunConfig:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Configuration file not found: {p}")
    log.info("Loading configuration from: %s", p)
    suffix = p.suffix.lower()
    with open(p, "r", encoding="utf-8") as f:
        if suffix in {".yaml", ".yml"}:
            try:
                raw = yaml.safe_load(f)
            except yaml.YAMLError as exc:
                raise ConfigurationError(f"Invalid YAML in {p}: {exc}") from exc
        elif suffix == ".json":
            try:
                raw = json.load(f)
            except json.JSONDecodeError as exc:
                raise ConfigurationError(f"Invalid JSON in {p}: {exc}") from exc
        else:
            raise ConfigurationError("Provide a .yaml, .yml or .json configuration file")
    cfg = RunConfig.from_dict(raw)
    cfg.validate()
    return cfg


def save_config(cfg: RunConfig, path: str | Path) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    data = {"scan": cfg.scan.to_dict(), "physics": cfg.physics.to_dict(), "seed": cfg.seed}
    with open(p, "w", encoding="utf-8") as f:
        if p.suffix.lower() == ".json":
            json.dump(data, f, indent=2)
        else:
            yaml.safe_dump(data, f, sort_keys=False)
