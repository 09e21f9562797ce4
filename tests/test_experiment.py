from pathlib import Path

import pytest

from linfit.classic.linear import Coefficients
from linfit.core.io import save_yaml
from linfit.datasets.toy import make_line, make_noisy_line
from linfit.errors import EquivalenceError, InvalidArgument
from linfit.experiment import ExperimentConfig, check_equivalence, compare_solvers, load_experiment_config


def test_all_solvers_recover_exact_line():
    ds = make_line([0.0, 1.0, 2.0, 3.0, 4.0], slope=2.0, intercept=1.0)
    cfg = ExperimentConfig(lr=0.01, epochs=5000, init_slope=0.0, init_intercept=0.0)
    cmp = compare_solvers(ds, cfg)
    for name, coef in cmp.fits().items():
        assert coef.slope == pytest.approx(2.0, abs=1e-6), name
        assert coef.intercept == pytest.approx(1.0, abs=1e-6), name
    table = cmp.table()
    assert list(table["solver"]) == ["closed_form", "statistical", "gradient_descent"]
    assert (table["mse"] < 1e-10).all()


def test_noisy_comparison_summary():
    ds = make_noisy_line(n=100, noise_scale=10.0, seed=42)
    cmp = compare_solvers(ds, ExperimentConfig(epochs=2000))
    s = cmp.summary()
    assert s["n"] == 100
    assert set(s["fits"]) == {"closed_form", "statistical", "gradient_descent"}
    assert s["gd"]["iterations"] == 2000
    assert 0.9 < s["reg"] <= 1.0
    assert len(cmp.gd.log) == 21


def test_tolerance_policy_from_config():
    ds = make_line([0.0, 1.0, 2.0, 3.0, 4.0], slope=2.0, intercept=1.0)
    cfg = ExperimentConfig(lr=0.01, epochs=100_000, tol=1e-12)
    assert compare_solvers(ds, cfg).gd.stop_reason == "tolerance"


def test_equivalence_check():
    check_equivalence(Coefficients.line(2.0, 1.0), Coefficients.line(2.0 + 1e-9, 1.0))
    with pytest.raises(EquivalenceError):
        check_equivalence(Coefficients.line(2.0, 1.0), Coefficients.line(2.1, 1.0))


def test_load_config_with_overrides(tmp_path: Path):
    p = tmp_path / "cfg.yaml"
    save_yaml(p, {"n": 30, "lr": 0.001, "tol": 1e-9})
    cfg = load_experiment_config(p, n=40, seed=None)
    assert cfg.n == 40 and cfg.lr == 0.001 and cfg.seed == 42
    assert cfg.stop_policy().tol == 1e-9


def test_load_config_rejects_unknown_keys(tmp_path: Path):
    p = tmp_path / "cfg.yaml"
    save_yaml(p, {"learning_rate": 0.1})
    with pytest.raises(InvalidArgument):
        load_experiment_config(p)
