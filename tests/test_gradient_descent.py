import warnings

import numpy as np
import pytest

from linfit.classic.linear import (
    Coefficients,
    CostTolerance,
    EpochBudget,
    Observation,
    ObservationLog,
    descent_path,
    gradient_descent,
    normal_equation,
)
from linfit.datasets.toy import make_linear_regression, make_noisy_line
from linfit.errors import DivergenceDetected, InvalidArgument

X5 = np.array([0.0, 1.0, 2.0, 3.0, 4.0])
Y5 = np.array([1.0, 3.0, 5.0, 7.0, 9.0])


def test_exact_line_converges_from_origin():
    res = gradient_descent(X5, Y5, init=Coefficients.line(0.0, 0.0), lr=0.01, epochs=2000)
    assert abs(res.slope - 2.0) < 1e-2
    assert abs(res.intercept - 1.0) < 1e-2
    assert res.iterations == 2000
    assert res.stop_reason == "epochs"


def test_zero_noise_round_trip():
    ds = make_noisy_line(n=5, noise_scale=0.0)  # y = x exactly
    res = gradient_descent(ds.x, ds.y, lr=0.05, epochs=5000)
    assert res.slope == pytest.approx(1.0, abs=1e-8)
    assert res.intercept == pytest.approx(0.0, abs=1e-8)


def test_cost_non_increasing_for_small_lr():
    ds = make_noisy_line(n=50, noise_scale=5.0, seed=0)
    costs = np.array([s.cost for s in descent_path(ds.x, ds.y, lr=1e-4, stop=EpochBudget(3000))])
    assert np.all(np.diff(costs[5:]) <= 1e-12)
    assert costs[-1] < costs[0]


def test_path_is_restartable_and_deterministic():
    path = descent_path(X5, Y5, lr=0.01, stop=EpochBudget(50))
    first = [(s.iteration, s.cost) for s in path]
    second = [(s.iteration, s.cost) for s in path]
    assert first == second
    assert [i for i, _ in first] == list(range(51))


def test_path_can_be_cut_short():
    path = descent_path(X5, Y5, lr=0.01, stop=EpochBudget(10_000))
    for s in path:
        if s.iteration == 3:
            break
    assert s.iteration == 3


def test_zero_epochs_yields_initial_state_only():
    init = Coefficients.line(1.0, 1.0)
    states = list(descent_path(X5, Y5, init=init, stop=EpochBudget(0)))
    assert len(states) == 1
    assert states[0].coef.allclose(init)
    assert states[0].cost == pytest.approx(np.mean((Y5 - (X5 + 1.0)) ** 2))


def test_every_k_includes_terminal_state():
    path = descent_path(X5, Y5, lr=0.01, stop=EpochBudget(250))
    assert [s.iteration for s in path.every(100)] == [0, 100, 200, 250]


def test_observation_log_stride():
    res = gradient_descent(X5, Y5, lr=0.01, epochs=250, stride=100)
    assert res.log.iterations.tolist() == [0, 100, 200, 250]
    assert res.log[-1].cost == pytest.approx(res.cost)
    assert np.all(np.diff(res.log.costs) < 0)
    df = res.log.to_frame()
    assert list(df.columns) == ["iteration", "intercept", "slope", "cost"]


def test_observation_log_is_append_only():
    log = ObservationLog()
    log.append(Observation(0, 0.0, (1.0,), 5.0))
    log.append(Observation(100, 0.5, (1.5,), 1.0))
    with pytest.raises(InvalidArgument):
        log.append(Observation(50, 0.5, (1.5,), 1.0))
    assert len(log) == 2
    assert not hasattr(log, "pop")


def test_cost_tolerance_stops_early():
    res = gradient_descent(X5, Y5, lr=0.01, stop=CostTolerance(tol=1e-12, max_epochs=100_000))
    assert res.stop_reason == "tolerance"
    assert res.iterations < 100_000
    assert abs(res.slope - 2.0) < 1e-3


def test_cost_tolerance_cap():
    res = gradient_descent(X5, Y5, lr=0.01, stop=CostTolerance(tol=1e-30, max_epochs=20))
    assert res.stop_reason == "max_epochs"
    assert res.iterations == 20


def test_multivariate_matches_closed_form():
    ds, _, _ = make_linear_regression(n=100, d=3, noise=0.1, seed=0)
    res = gradient_descent(ds.x, ds.y, lr=0.1, epochs=2000)
    cf = normal_equation(ds.x, ds.y)
    assert res.coef.allclose(cf, rtol=1e-4, atol=1e-4)


def test_large_lr_warns_divergence():
    with pytest.warns(DivergenceDetected):
        res = gradient_descent(X5, Y5, lr=1.0, epochs=50)
    assert not np.isfinite(res.cost) or res.cost > 1e6


def test_large_lr_raise_mode():
    with pytest.raises(DivergenceDetected):
        gradient_descent(X5, Y5, lr=1.0, epochs=50, divergence="raise")


def test_small_lr_does_not_warn():
    with warnings.catch_warnings():
        warnings.simplefilter("error", DivergenceDetected)
        gradient_descent(X5, Y5, lr=0.01, epochs=500)


@pytest.mark.parametrize(
    "kwargs",
    [dict(lr=0.0), dict(lr=-1.0), dict(epochs=-1), dict(stride=0), dict(divergence="shout")],
)
def test_invalid_arguments(kwargs):
    with pytest.raises(InvalidArgument):
        gradient_descent(X5, Y5, **kwargs)


def test_init_width_must_match_features():
    with pytest.raises(InvalidArgument):
        descent_path(X5, Y5, init=Coefficients(0.0, [1.0, 2.0]))


def test_zero_epoch_driver_returns_initial_state():
    init = Coefficients.line(1.0, 1.0)
    res = gradient_descent(X5, Y5, init=init, epochs=0, stride=100)
    assert res.iterations == 0
    assert res.coef == init
    assert res.log.iterations.tolist() == [0]
