"""Tests for the replication harness and reporting helpers."""

from __future__ import annotations

import math

import pytest

from experiments import run_experiments as rx


class TestMeanCI:

    def test_known_interval(self):
        mu, half = rx.mean_ci([1.0, 2.0, 3.0], 0.95)
        assert mu == pytest.approx(2.0)
        # t(0.975, df=2) = 4.3027
        assert half == pytest.approx(4.302653 / math.sqrt(3), rel=1e-4)

    def test_bonferroni_widens_interval(self):
        _, narrow = rx.mean_ci([1.0, 2.0, 4.0, 8.0], 0.95)
        _, wide = rx.mean_ci([1.0, 2.0, 4.0, 8.0], 0.95, n_comparisons=3)
        assert wide > narrow

    def test_single_value_has_no_width(self):
        assert rx.mean_ci([5.0], 0.95) == (5.0, 0.0)

    def test_empty(self):
        mu, half = rx.mean_ci([], 0.95)
        assert math.isnan(mu) and half == 0.0


class TestHelpers:

    def test_series_drops_nan(self):
        results = [{"v": 1.0}, {"v": math.nan}, {"v": 3.0}]
        assert rx.series(results, lambda r: r["v"]) == [1.0, 3.0]

    def test_avg_nested(self):
        results = [{"u": {"teller": 0.5}}, {"u": {"teller": 1.0}}]
        assert rx.avg_nested(results, "u") == {"teller": 0.75}

    def test_sample_stddev_short(self):
        assert rx.sample_stddev([1.0]) == 0.0

    def test_format_stats(self):
        lines = rx.format_stats({
            "clients_served": 3,
            "transactions_completed": 40,
            "average_time_in_system": 1234.5,
        })
        assert lines == [
            "Number of clients: 3",
            "Number of transactions: 40",
            "Average time passed in bank: 1234.50",
        ]


class TestReplications:

    def test_seeds_advance_per_replication(self):
        cfg = {"sim": {"horizon": 5000, "seed": 10}}
        runs = rx.run_replications(cfg, 3, 10)
        assert [seed for seed, _ in runs] == [10, 11, 12]
        assert runs[0][1] != runs[1][1]

    def test_crn_pair_shares_seeds(self, capsys):
        cfg = {"sim": {"horizon": 20000, "seed": 0}}
        same = {"name": "a", "overrides": {}}
        out = rx.run_crn(cfg, same, {"name": "b", "overrides": {}}, 3, 0, 0.95)
        # Identical scenarios under common random numbers differ by exactly zero
        assert out["mean_diff"] == 0.0
        assert out["half_width"] == 0.0
        assert "CRN paired time-in-system comparison" in capsys.readouterr().out

    def test_plot_written(self, tmp_path, monkeypatch):
        monkeypatch.setattr(rx, "OUTPUT_DIR", str(tmp_path))
        path = rx.plot_replications([(0, 100.0), (1, 120.0)], "Base Line")
        assert path.endswith("base_line_time_in_system.png")
        assert (tmp_path / "base_line_time_in_system.png").exists()

    def test_plot_skipped_without_data(self):
        assert rx.plot_replications([], "empty") is None


class TestMain:

    def test_main_reports_every_scenario(self, tmp_path, capsys):
        path = tmp_path / "tiny.yaml"
        path.write_text(
            "sim:\n  horizon: 20000\n  seed: 3\n"
            "experiments:\n  replications: 2\n"
            "  crn_compare:\n    - [baseline, fast_staff]\n    - [baseline]\n    - [baseline, nope]\n"
        )
        summaries = rx.main([str(path)])
        out = capsys.readouterr().out
        assert [s["name"] for s in summaries] == [sc["name"] for sc in rx.SCENARIOS]
        assert "Scenario: baseline (replications=2" in out
        assert "CRN & Bonferroni Comparison: baseline vs fast_staff" in out
        assert "[warn] skipping CRN entry" in out
        assert "[warn] CRN pair not found" in out

    def test_single_replication_prints_original_report(self, tmp_path, capsys):
        path = tmp_path / "one.yaml"
        path.write_text("sim:\n  horizon: 20000\nexperiments:\n  replications: 1\n")
        rx.main([str(path)])
        out = capsys.readouterr().out
        assert "Number of clients:" in out
        assert "CRN" not in out
