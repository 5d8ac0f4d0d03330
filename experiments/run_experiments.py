"""
experiments/run_experiments.py

Experiment harness that loads the baseline config, applies scenario overrides,
runs independent replications, and reports KPIs with confidence intervals.
Optionally compares scenario pairs with common random numbers (CRN) and saves
a per-seed plot of average time in the bank.

    python -m experiments.run_experiments [path/to/config.yaml]
"""

from __future__ import annotations
import copy, os, sys, math
from typing import Dict, List, Callable, Optional, Tuple
from statistics import mean, stdev
from scipy.stats import t as student_t

from banksim.config import ROOT, apply_overrides, load_cfg
from banksim.simulation import run_once
from experiments.scenarios import SCENARIOS

OUTPUT_DIR = os.path.join(ROOT, "experiments", "output")

def mean_ci(values: List[float], confidence_level: float, n_comparisons: int = 1) -> Tuple[float, float]:
    """
    Return (mean, half-width) using a Student-t critical value. The error rate
    is split over `n_comparisons` (Bonferroni) when several intervals are read
    together.
    """
    if not values:
        return math.nan, 0.0
    mu = mean(values)
    n = len(values)
    if n < 2:
        return mu, 0.0
    level = min(max(confidence_level, 0.0), 0.999999)
    alpha = (1.0 - level) / max(1, n_comparisons)
    tcrit = float(student_t.ppf(1 - alpha / 2.0, n - 1))
    half = tcrit * (stdev(values) / math.sqrt(n))
    return mu, half

def sample_stddev(values: List[float]) -> float:
    """Return sample standard deviation or 0 if insufficient data."""
    if len(values) < 2:
        return 0.0
    return stdev(values)

def series(results: List[Dict], extractor: Callable[[Dict], float]) -> List[float]:
    """
    Collect a numeric series from each replication result. Replications with
    no value (NaN average because nobody finished) are left out.
    """
    out = []
    for res in results:
        val = float(extractor(res))
        if not math.isnan(val):
            out.append(val)
    return out

def avg_nested(results: List[Dict], key: str) -> Dict[str, float]:
    """Average nested dictionaries (e.g., station_utilization) across replications."""
    if not results:
        return {}
    totals: Dict[str, float] = {}
    for res in results:
        nested = res.get(key, {})
        for subk, val in nested.items():
            totals[subk] = totals.get(subk, 0.0) + float(val)
    return {subk: totals[subk] / len(results) for subk in totals}

def run_replications(cfg: Dict, replications: int, base_seed: int) -> List[Tuple[int, Dict]]:
    """Run `replications` independent runs with seeds base_seed, base_seed+1, ..."""
    out = []
    for rep in range(replications):
        run_cfg = copy.deepcopy(cfg)
        run_cfg.setdefault("sim", {})["seed"] = base_seed + rep
        out.append((base_seed + rep, run_once(run_cfg)))
    return out

def run_crn(cfg: Dict, sc_a: Dict, sc_b: Dict, replications: int, base_seed: int,
            confidence: float, C: int = 1) -> Dict:
    """
    Run a common-random-number comparison between two scenarios, using the same
    seed stream per replication, and report paired differences of the average
    time in system together with the CI of their mean.
    """
    cfg_a = apply_overrides(cfg, sc_a["overrides"])
    cfg_b = apply_overrides(cfg, sc_b["overrides"])
    res_a = run_replications(cfg_a, replications, base_seed)
    res_b = run_replications(cfg_b, replications, base_seed)
    rows = []
    for (seed, a), (_, b) in zip(res_a, res_b):
        t_a, t_b = a["average_time_in_system"], b["average_time_in_system"]
        if math.isnan(t_a) or math.isnan(t_b):
            print(f"[warn] seed {seed}: no completed clients, dropped from CRN pair")
            continue
        rows.append((seed, t_a, t_b))
    diffs = [tb - ta for (_, ta, tb) in rows]
    mean_diff, half = mean_ci(diffs, confidence, n_comparisons=C)
    level = min(max(confidence, 0.0), 0.999999)
    print(f"CRN paired time-in-system comparison ({sc_b['name']} - {sc_a['name']}):")
    print("  Replication | Seed | Time1 | Time2 | Difference")
    for idx, (seed, ta, tb) in enumerate(rows, start=1):
        print(f"    {idx:2d}        | {seed:4d} | {ta:,.1f} | {tb:,.1f} | {tb - ta:,.1f}")
    print(f"  Mean difference: {mean_diff:,.2f}")
    print(f"  Std dev of differences: {sample_stddev(diffs):,.2f}")
    print(f"  {level*100:.1f}% CI of mean diff: {mean_diff - half:,.2f} to {mean_diff + half:,.2f}")
    return {"rows": rows, "mean_diff": mean_diff, "half_width": half}

def format_stats(res: Dict) -> List[str]:
    """Console lines for a single run, as printed by the original bank program."""
    return [
        f"Number of clients: {res['clients_served']}",
        f"Number of transactions: {res['transactions_completed']}",
        f"Average time passed in bank: {res['average_time_in_system']:.2f}",
    ]

def plot_replications(per_seed: List[Tuple[int, float]], scenario_name: str) -> Optional[str]:
    """
    Persist a PNG plot of the average time in system per seed, with the
    across-replication mean drawn as a horizontal line.
    """
    if not per_seed:
        return None
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    x = [seed for seed, _ in per_seed]
    y = [val for _, val in per_seed]
    plt.figure(figsize=(9, 5))
    plt.plot(x, y, marker="o", label="Avg time in system", color="#2563eb")
    plt.axhline(mean(y), color="#f59e0b", linestyle="--", label="Mean over replications")
    plt.xlabel("Seed")
    plt.ylabel("Time in system")
    plt.title(f"{scenario_name}: average time in system by seed")
    plt.legend()
    plt.grid(True, linestyle="--", alpha=0.4)
    os.makedirs(OUTPUT_DIR, exist_ok=True)
    safe_name = scenario_name.lower().replace(" ", "_")
    out_path = os.path.join(OUTPUT_DIR, f"{safe_name}_time_in_system.png")
    plt.tight_layout()
    plt.savefig(out_path, dpi=160)
    plt.close()
    return out_path

def summarize_scenario(cfg: Dict, sc: Dict, replications: int, confidence: float) -> Dict:
    """Run one scenario and print its report block; return the aggregates."""
    sc_cfg = apply_overrides(cfg, sc["overrides"])
    seed = sc_cfg.get("sim", {}).get("seed", 0)
    runs = run_replications(sc_cfg, replications, seed)
    results = [res for _, res in runs]
    avg_time = mean_ci(series(results, lambda r: r["average_time_in_system"]), confidence)
    served = mean_ci(series(results, lambda r: r["clients_served"]), confidence)
    transactions = mean_ci(series(results, lambda r: r["transactions_completed"]), confidence)
    backlog = mean_ci(series(results, lambda r: r["clients_in_system"]), confidence)
    utilizations = {k: round(v * 100.0, 1) for k, v in avg_nested(results, "station_utilization").items()}
    max_queue = {k: round(v, 1) for k, v in avg_nested(results, "max_queue_length").items()}
    per_seed = [(s, r["average_time_in_system"]) for s, r in runs
                if not math.isnan(r["average_time_in_system"])]

    print(f"Scenario: {sc['name']} (replications={replications}, {confidence*100:.1f}% CI, "
          f"seeds {seed}-{seed + replications - 1})")
    if replications == 1:
        for line in format_stats(results[0]):
            print(f"  {line}")
    else:
        print("  Avg time in system by seed:")
        for s, val in per_seed:
            print(f"    seed {s}: {val:,.1f}")
        print(f"  Avg time in system: {avg_time[0]:,.1f} ± {avg_time[1]:,.1f}")
        print(f"  Clients served: {served[0]:.1f} ± {served[1]:.1f}")
        print(f"  Transactions completed: {transactions[0]:,.1f} ± {transactions[1]:,.1f}")
    print(f"  Clients still in bank at close: {backlog[0]:.1f} ± {backlog[1]:.1f}")
    print(f"  Desk utilization (mean % busy): {utilizations}")
    print(f"  Longest line (mean over replications): {max_queue}")
    plot_path = None
    if cfg.get("experiments", {}).get("plot"):
        plot_path = plot_replications(per_seed, sc["name"])
        if plot_path:
            print(f"  Time-in-system plot saved to: {plot_path}")
    print("-")
    return {
        "name": sc["name"],
        "avg_time_in_system": avg_time,
        "clients_served": served,
        "transactions_completed": transactions,
        "plot": plot_path,
    }

def main(argv: Optional[List[str]] = None):
    """Entry point: drive all scenarios, replications, and report KPIs."""
    argv = sys.argv[1:] if argv is None else argv
    cfg = load_cfg(argv[0] if argv else None)
    exp_cfg = cfg.get("experiments", {})
    replications = max(1, int(exp_cfg.get("replications", 1)))
    confidence = float(exp_cfg.get("confidence_level", 0.95))
    default_seed = cfg.get("sim", {}).get("seed", 0)

    summaries = [summarize_scenario(cfg, sc, replications, confidence) for sc in SCENARIOS]

    # Optional CRN comparison between named scenarios using common random numbers
    crn_pairs = exp_cfg.get("crn_compare") or []
    if crn_pairs and replications > 1:
        sc_index = {s["name"]: s for s in SCENARIOS}
        # Bonferroni: split the error rate over every comparison made
        C = len(crn_pairs)
        for pair in crn_pairs:
            if len(pair) != 2:
                print(f"[warn] skipping CRN entry (needs 2 names): {pair}")
                continue
            sc_a = sc_index.get(pair[0])
            sc_b = sc_index.get(pair[1])
            if sc_a and sc_b:
                print(f"\nCRN & Bonferroni Comparison: {sc_a['name']} vs {sc_b['name']} "
                      f"(replications={replications}, seeds shared)")
                run_crn(cfg, sc_a, sc_b, replications, default_seed, confidence, C)
            else:
                print(f"[warn] CRN pair not found: {pair}")
    return summaries

if __name__ == "__main__":
    main()
