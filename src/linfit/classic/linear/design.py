from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from ...core.config import NumericConfig, resolve
from ...errors import InvalidArgument

ArrayLike = Sequence[float] | np.ndarray


def as_features(x: ArrayLike, config: Optional[NumericConfig] = None) -> np.ndarray:
    """Coerce x to an (n, p) float array. A 1-D x is one feature column."""
    X = np.asarray(x, dtype=resolve(config).np_dtype)
    if X.ndim == 1:
        X = X.reshape(-1, 1)
    if X.ndim != 2:
        raise InvalidArgument(f"x must be 1-D or 2-D, got shape {X.shape}")
    if X.shape[0] == 0:
        raise InvalidArgument("x is empty (n = 0)")
    if X.shape[1] == 0:
        raise InvalidArgument("x has no feature columns")
    return X


def as_targets(y: ArrayLike, n: int, config: Optional[NumericConfig] = None) -> np.ndarray:
    """Coerce y to an (n, 1) column and check it lines up with x."""
    y = np.asarray(y, dtype=resolve(config).np_dtype).reshape(-1, 1)
    if y.shape[0] != n:
        raise InvalidArgument(f"x has {n} samples but y has {y.shape[0]}")
    return y


def design_matrix(x: ArrayLike, config: Optional[NumericConfig] = None) -> np.ndarray:
    """
    [1 | X]: an (n, p+1) matrix whose first column is the intercept term.
    """
    X = as_features(x, config)
    return np.c_[np.ones((X.shape[0], 1), dtype=X.dtype), X]
