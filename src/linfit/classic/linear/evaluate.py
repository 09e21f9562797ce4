from __future__ import annotations

from typing import Optional

import numpy as np

from ...core.config import NumericConfig, resolve
from ...errors import InvalidArgument
from .coefficients import Coefficients
from .design import ArrayLike, as_features


def predict(coef: Coefficients, x: ArrayLike | float, config: Optional[NumericConfig] = None) -> np.ndarray:
    """y_hat = x . w + b, pointwise. Reads `coef`, never mutates it."""
    x_arr = np.asarray(x, dtype=resolve(config).np_dtype)
    if x_arr.ndim <= 1 and coef.p == 1:
        return x_arr * coef.weights[0] + coef.intercept
    X = as_features(x_arr, config)
    if X.shape[1] != coef.p:
        raise InvalidArgument(f"x has {X.shape[1]} feature(s) but the coefficients expect {coef.p}")
    return X @ coef.weights + coef.intercept


def mse(coef: Coefficients, x: ArrayLike, y: ArrayLike) -> float:
    y = np.asarray(y, dtype=np.float64).reshape(-1)
    diff = predict(coef, x).reshape(-1) - y
    return float((diff @ diff) / y.shape[0])


def r2_score(coef: Coefficients, x: ArrayLike, y: ArrayLike) -> float:
    y = np.asarray(y, dtype=np.float64).reshape(-1)
    ss_res = mse(coef, x, y) * y.shape[0]
    ss_tot = float(np.sum((y - y.mean()) ** 2))
    if ss_tot == 0.0:
        return 1.0 if ss_res == 0.0 else 0.0
    return 1.0 - ss_res / ss_tot
