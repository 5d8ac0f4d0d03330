# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# config.py
# -----------------------------------------------------------------------------
# Purpose:
#   Model parameters: code defaults, YAML loading, scenario overrides and
#   validation.
#
# Design notes:
#   - Configs are plain nested dicts (same shape as config/baseline.yaml).
#   - Times are in abstract simulation time units (the bank used seconds).
#
# Usage:
#   cfg = load_cfg()                       # config/baseline.yaml over defaults
#   cfg = apply_overrides(cfg, {"sim": {"seed": 7}})
# -----------------------------------------------------------------------------

from __future__ import annotations
import copy, os
from typing import Dict, Optional
import yaml

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_CONFIG_PATH = os.path.join(ROOT, "config", "baseline.yaml")

ARRIVAL_MEAN = 120.0            # mean gap between client arrivals
TIME_PER_TRANSACTION = 60.0     # desk time per transaction, both stations
MIN_TRANSACTIONS = 1
MAX_TRANSACTIONS = 100
HORIZON = 90000.0               # length of one run

DEFAULTS: Dict = {
    "sim": {
        "horizon": HORIZON,
        "seed": 0,
        "arrival_mean": ARRIVAL_MEAN,
        "time_per_transaction": TIME_PER_TRANSACTION,
        "min_transactions": MIN_TRANSACTIONS,
        "max_transactions": MAX_TRANSACTIONS,
    },
    "experiments": {
        "replications": 10,
        "confidence_level": 0.95,
        "plot": False,
    },
}

def apply_overrides(cfg: Dict, overrides: Dict) -> Dict:
    """Apply overrides (recursive merge) on top of a base config."""
    new = copy.deepcopy(cfg)

    def _merge(dst: Dict, src: Dict):
        for key, val in src.items():
            if isinstance(val, dict) and isinstance(dst.get(key), dict):
                _merge(dst[key], val)
            else:
                dst[key] = copy.deepcopy(val)

    _merge(new, overrides or {})
    return new

def load_cfg(path: Optional[str] = None) -> Dict:
    """Read a YAML config and lay it over DEFAULTS."""
    path = path or DEFAULT_CONFIG_PATH
    with open(path, "r") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config {path} must be a mapping, got {type(raw).__name__}")
    return apply_overrides(DEFAULTS, raw)

def validate(cfg: Dict) -> Dict:
    """Check the `sim` block; return it for convenience."""
    sim = cfg.get("sim", {})
    if sim.get("arrival_mean", 0) <= 0:
        raise ValueError(f"sim.arrival_mean must be positive, got {sim.get('arrival_mean')}")
    if sim.get("time_per_transaction", 0) <= 0:
        raise ValueError(f"sim.time_per_transaction must be positive, got {sim.get('time_per_transaction')}")
    lo, hi = sim.get("min_transactions", 0), sim.get("max_transactions", 0)
    if lo < 1 or lo > hi:
        raise ValueError(f"sim transaction range [{lo}, {hi}] must satisfy 1 <= min <= max")
    if sim.get("horizon", 0) < 0:
        raise ValueError(f"sim.horizon must be non-negative, got {sim.get('horizon')}")
    return sim
