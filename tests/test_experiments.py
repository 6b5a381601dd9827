import os

import pytest

from experiments import run_experiments
from experiments.run_experiments import apply_overrides, load_cfg, mean_ci, run_crn, series
from experiments.scenarios import SCENARIOS
from mm1sim.simulation import run_one


def test_baseline_config_loads():
    cfg = load_cfg()
    assert cfg["sim"]["arrival_rate"] == 0.8
    assert cfg["sim"]["stop"]["by"] == "time"
    assert cfg["experiments"]["replications"] >= 1


def test_apply_overrides_merges_without_touching_base(base_cfg):
    merged = apply_overrides(base_cfg, {"sim": {"service_rate": 2.0, "stop": {"limit": 5.0}}})
    assert merged["sim"]["service_rate"] == 2.0
    assert merged["sim"]["stop"] == {"by": "time", "limit": 5.0}
    assert merged["sim"]["arrival_rate"] == 0.8
    assert base_cfg["sim"]["service_rate"] == 1.0
    assert base_cfg["sim"]["stop"]["limit"] == 1000.0


def test_mean_ci():
    assert mean_ci([], 0.95) == (0.0, 0.0)
    assert mean_ci([3.0], 0.95) == (3.0, 0.0)
    mu, half = mean_ci([1.0, 2.0, 3.0], 0.95)
    assert mu == 2.0
    assert half == pytest.approx(4.302653 / 3 ** 0.5, rel=1e-4)


def test_series_extracts_floats():
    assert series([{"x": 1}, {"x": 2.5}], lambda r: r["x"]) == [1.0, 2.5]


def test_every_scenario_runs(base_cfg):
    names = [sc["name"] for sc in SCENARIOS]
    assert len(names) == len(set(names))
    for sc in SCENARIOS:
        cfg = apply_overrides(load_cfg(), sc["overrides"])
        cfg = apply_overrides(cfg, {"sim": {"stop": {"by": "events", "limit": 200}}})
        assert run_one(cfg)["events"] == 200


def test_crn_comparison_prints_table(base_cfg, capsys):
    sc_a = {"name": "a", "overrides": {}}
    sc_b = {"name": "b", "overrides": {"sim": {"service_rate": 2.0}}}
    mean_diff, half = run_crn(base_cfg, sc_a, sc_b, replications=3, base_seed=1, confidence=0.95, C=1)
    out = capsys.readouterr().out
    assert "CRN paired mean-wait comparison (b - a)" in out
    assert mean_diff < 0.0
    assert half >= 0.0


def test_plot_time_series(base_cfg, tmp_path, monkeypatch):
    monkeypatch.setattr(run_experiments, "ROOT", str(tmp_path))
    assert run_experiments.plot_time_series([], "empty") is None
    rows = run_one(base_cfg)["time_series"]
    path = run_experiments.plot_time_series(rows, "Base Line")
    assert path.endswith("base_line_time_series.png")
    assert os.path.exists(path)
