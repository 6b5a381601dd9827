"""
experiments/run_experiments.py

Experiment harness that loads the baseline config, applies scenario overrides,
runs independent replications of the single-server queue, and reports KPIs
with confidence intervals next to the closed-form M/M/1 values. Optional
common-random-number comparisons and time-series plots are driven from the
`experiments` section of the config.
"""

from __future__ import annotations
import copy, yaml, os, math
from typing import Dict, List, Callable, Optional
from statistics import mean, stdev
from scipy.stats import t

from mm1sim.simulation import run_one
from .scenarios import SCENARIOS

ROOT = os.path.dirname(os.path.dirname(__file__))

def load_cfg(path: Optional[str] = None) -> Dict:
    with open(path or os.path.join(ROOT, "config", "baseline.yaml"), "r") as f:
        return yaml.safe_load(f)

def apply_overrides(cfg: Dict, overrides: Dict) -> Dict:
    """Apply scenario overrides (recursive merge) on top of the base config."""
    new = copy.deepcopy(cfg)

    def _merge(dst: Dict, src: Dict):
        for key, val in src.items():
            if isinstance(val, dict) and isinstance(dst.get(key), dict):
                _merge(dst[key], val)
            else:
                dst[key] = copy.deepcopy(val)

    _merge(new, overrides)
    return new

def mean_ci(values: List[float], confidence_level: float) -> tuple[float, float]:
    """Return (mean, half-width) using a t-distribution critical value."""
    if not values:
        return 0.0, 0.0
    mu = mean(values)
    n = len(values)
    if n < 2:
        return mu, 0.0
    level = min(max(confidence_level, 0.0), 0.999999)
    alpha = 1.0 - level
    tcrit = t.ppf(1 - alpha / 2.0, n - 1)
    half = tcrit * (stdev(values) / math.sqrt(n))
    return mu, half

def series(results: List[Dict], extractor: Callable[[Dict], float]) -> List[float]:
    """Collect a numeric series from each replication result."""
    return [float(extractor(res)) for res in results]

def run_crn(cfg: Dict, sc_a: Dict, sc_b: Dict, replications: int, base_seed: int, confidence: float, C: float):
    """
    Run a common-random-number comparison between two scenarios, using the same
    seed per replication, and report paired differences of mean wait and the CI
    of their mean. The level is Bonferroni-adjusted over C comparisons.
    """
    results = []
    cfg_a = apply_overrides(cfg, sc_a["overrides"])
    cfg_b = apply_overrides(cfg, sc_b["overrides"])
    for rep in range(replications):
        seed = base_seed + rep
        cfg_a_run = copy.deepcopy(cfg_a); cfg_a_run.setdefault("sim", {})["seed"] = seed
        cfg_b_run = copy.deepcopy(cfg_b); cfg_b_run.setdefault("sim", {})["seed"] = seed
        res_a = run_one(cfg_a_run)
        res_b = run_one(cfg_b_run)
        results.append((seed, res_a["mean_wait"], res_b["mean_wait"]))
    diffs = [b - a for (_, a, b) in results]
    mean_diff = mean(diffs)
    sd_diff = stdev(diffs) if len(diffs) > 1 else 0.0
    level = min(max(confidence, 0.0), 0.999999)
    alpha = (1.0 - level) / max(C, 1)
    df = max(1, len(diffs) - 1)
    tcrit = t.ppf(1 - alpha / 2.0, df)
    half = tcrit * (sd_diff / math.sqrt(len(diffs))) if len(diffs) > 1 else 0.0
    print(f"CRN paired mean-wait comparison ({sc_b['name']} - {sc_a['name']}):")
    print("  Replication | Seed | Wait1 | Wait2 | Difference")
    for idx, (seed, w1, w2) in enumerate(results, start=1):
        print(f"    {idx:2d}        | {seed:4d} | {w1:.4f} | {w2:.4f} | {w2 - w1:.4f}")
    print(f"  Mean difference: {mean_diff:.4f}")
    print(f"  Std dev of differences: {sd_diff:.4f}")
    print(f"  {level*100:.1f}% CI of mean diff: {mean_diff - half:.4f} to {mean_diff + half:.4f}")
    return mean_diff, half

def plot_time_series(rows: List[Dict[str, float]], scenario_name: str):
    """
    Persist a PNG plot of the sampled queue length and running mean wait
    for one replication, so warm-up and instability are visible at a glance.
    """
    if not rows:
        return None
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    x = [pt["time"] for pt in rows]
    fig, (ax_q, ax_w) = plt.subplots(2, 1, figsize=(9, 6), sharex=True)
    ax_q.plot(x, [pt["queue_length"] for pt in rows], color="#2563eb", label="Queue length")
    ax_q.plot(x, [pt["customers_in_system"] for pt in rows], color="#d97706", label="In system")
    ax_q.set_ylabel("Customers")
    ax_q.legend()
    ax_q.grid(True, linestyle="--", alpha=0.4)
    ax_w.plot(x, [pt["mean_wait"] for pt in rows], color="#059669", label="Running mean wait")
    ax_w.set_xlabel("Simulated time")
    ax_w.set_ylabel("Wait")
    ax_w.legend()
    ax_w.grid(True, linestyle="--", alpha=0.4)
    fig.suptitle(f"{scenario_name}: sampled time series")
    out_dir = os.path.join(ROOT, "experiments", "output")
    os.makedirs(out_dir, exist_ok=True)
    safe_name = scenario_name.lower().replace(" ", "_")
    out_path = os.path.join(out_dir, f"{safe_name}_time_series.png")
    fig.tight_layout()
    fig.savefig(out_path, dpi=160)
    plt.close(fig)
    return out_path

def _fmt_theory(val: float) -> str:
    return "unbounded" if math.isinf(val) else f"{val:.4f}"

def main():
    """Entry point: drive all scenarios, replications, and report KPIs."""
    cfg = load_cfg()
    exp_cfg = cfg.get("experiments", {})
    replications = max(1, int(exp_cfg.get("replications", 1)))
    confidence = float(exp_cfg.get("confidence_level", 0.95))
    make_plots = bool(exp_cfg.get("plot", False))
    level_pct = confidence * 100.0
    default_seed = cfg.get("sim", {}).get("seed", 0)

    for sc in SCENARIOS:
        sc_base_cfg = apply_overrides(cfg, sc["overrides"])
        scenario_seed = sc_base_cfg.get("sim", {}).get("seed", default_seed)
        seed_range = (scenario_seed, scenario_seed + replications - 1)
        results = []
        for rep in range(replications):
            sc_cfg = copy.deepcopy(sc_base_cfg)
            sc_cfg.setdefault("sim", {})
            # Advance the seed per replication so replications remain iid.
            sc_cfg["sim"]["seed"] = scenario_seed + rep
            results.append(run_one(sc_cfg))

        wait = mean_ci(series(results, lambda r: r["mean_wait"]), confidence)
        queue = mean_ci(series(results, lambda r: r["mean_queue_length"]), confidence)
        in_system = mean_ci(series(results, lambda r: r["mean_in_system"]), confidence)
        util = mean_ci(series(results, lambda r: r["utilization"]), confidence)
        thr = mean_ci(series(results, lambda r: r["throughput"]), confidence)
        served = mean_ci(series(results, lambda r: r["served_customers"]), confidence)
        events = sum(r["events"] for r in results)
        wall = sum(r["wall_seconds"] for r in results)
        theory = results[0]["theory"]
        plot_path = plot_time_series(results[0]["time_series"], sc["name"]) if make_plots else None

        print(f"Scenario: {sc['name']} (replications={replications}, {level_pct:.1f}% CI, seeds {seed_range[0]}-{seed_range[1]})")
        print(f"  Arrival rate: {sc_base_cfg['sim']['arrival_rate']:.4f}  Service rate: {sc_base_cfg['sim']['service_rate']:.4f}  rho: {theory['rho']:.4f}")
        print(f"  Customers served: {served[0]:,.0f} ± {served[1]:,.0f}")
        print(f"  Avg wait: {wait[0]:.4f} ± {wait[1]:.4f} (M/M/1: {_fmt_theory(theory['mean_wait'])})")
        print(f"  Avg queue length: {queue[0]:.4f} ± {queue[1]:.4f} (M/M/1: {_fmt_theory(theory['mean_queue_length'])})")
        print(f"  Avg in system: {in_system[0]:.4f} ± {in_system[1]:.4f} (M/M/1: {_fmt_theory(theory['mean_in_system'])})")
        print(f"  Utilization: {util[0]:.4f} ± {util[1]:.4f} (M/M/1: {theory['utilization']:.4f})")
        print(f"  Throughput: {thr[0]:.4f} ± {thr[1]:.4f} (M/M/1: {theory['throughput']:.4f})")
        print(f"  Events processed: {events:,}  Wall time: {wall:.2f}s  Events/s: {events / wall if wall > 0 else 0.0:,.0f}")
        if plot_path:
            print(f"  Time-series plot saved to: {plot_path}")
        print("-")

    # Optional CRN comparison between two named scenarios using common random numbers
    crn_pairs = exp_cfg.get("crn_compare")
    if crn_pairs:
        sc_index = {s["name"]: s for s in SCENARIOS}
        # Bonferroni: C = K(K-1)/2 over the K compared designs
        K = len({name for pair in crn_pairs for name in pair})
        C = K * (K - 1) / 2
        for pair in crn_pairs:
            if len(pair) != 2:
                print(f"[warn] skipping CRN entry (needs 2 names): {pair}")
                continue
            sc_a = sc_index.get(pair[0])
            sc_b = sc_index.get(pair[1])
            if sc_a and sc_b:
                print(f"\nCRN & Bonferroni Comparison: {sc_a['name']} vs {sc_b['name']} (replications={replications}, seeds shared)")
                run_crn(cfg, sc_a, sc_b, replications, default_seed, confidence, C)
            else:
                print(f"[warn] CRN pair not found: {pair}")

if __name__ == "__main__":
    main()
