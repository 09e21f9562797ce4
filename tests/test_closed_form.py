import numpy as np
import pytest

from linfit.classic.linear import design_matrix, normal_equation, predict
from linfit.core.config import NumericConfig
from linfit.datasets.toy import make_linear_regression
from linfit.errors import InvalidArgument, SingularMatrix

X5 = [0.0, 1.0, 2.0, 3.0, 4.0]
Y5 = [1.0, 3.0, 5.0, 7.0, 9.0]


def test_design_matrix_prepends_ones():
    D = design_matrix([2.0, 3.0, 5.0])
    assert D.shape == (3, 2)
    assert np.all(D[:, 0] == 1.0)
    assert np.allclose(D[:, 1], [2.0, 3.0, 5.0])
    D2 = design_matrix(np.arange(6.0).reshape(3, 2))
    assert D2.shape == (3, 3)


def test_design_matrix_rejects_empty():
    with pytest.raises(InvalidArgument):
        design_matrix([])


def test_exact_line_scenario():
    coef = normal_equation(X5, Y5)
    assert coef.slope == pytest.approx(2.0, abs=1e-9)
    assert coef.intercept == pytest.approx(1.0, abs=1e-9)
    assert float(predict(coef, 10.0)) == pytest.approx(21.0, abs=1e-8)


def test_multivariate_recovers_weights():
    ds, w_true, b_true = make_linear_regression(n=200, d=3, noise=0.0, seed=3)
    coef = normal_equation(ds.x, ds.y)
    assert np.allclose(coef.weights, w_true, atol=1e-8)
    assert coef.intercept == pytest.approx(b_true, abs=1e-8)


def test_identical_columns_are_singular():
    rng = np.random.default_rng(0)
    col = rng.normal(size=50)
    with pytest.raises(SingularMatrix):
        normal_equation(np.c_[col, col], rng.normal(size=50))


def test_too_few_samples_is_singular():
    with pytest.raises(SingularMatrix):
        normal_equation(np.ones((2, 3)), [1.0, 2.0])


def test_constant_feature_is_singular():
    # a constant column duplicates the intercept column
    with pytest.raises(SingularMatrix):
        normal_equation([3.0, 3.0, 3.0, 3.0], [1.0, 2.0, 3.0, 4.0])


def test_singular_is_a_linalg_error():
    with pytest.raises(np.linalg.LinAlgError):
        normal_equation([1.0, 1.0], [0.0, 1.0])


def test_length_mismatch():
    with pytest.raises(InvalidArgument):
        normal_equation([1.0, 2.0, 3.0], [1.0, 2.0])


def test_float32_config():
    coef = normal_equation(X5, Y5, NumericConfig(dtype="float32"))
    assert coef.slope == pytest.approx(2.0, abs=1e-4)
    assert coef.intercept == pytest.approx(1.0, abs=1e-4)
