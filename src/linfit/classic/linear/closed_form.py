from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from ...core.config import NumericConfig, resolve
from ...errors import SingularMatrix
from .coefficients import Coefficients
from .design import ArrayLike, as_targets, design_matrix

log = logging.getLogger("linfit.closed_form")


def normal_equation(x: ArrayLike, y: ArrayLike, config: Optional[NumericConfig] = None) -> Coefficients:
    """
    Ordinary least squares through the normal equations:

        W* = (X^T X)^-1 X^T y,   X = [1 | x]

    The Gram matrix X^T X is (p+1)x(p+1); inverting it is O((p+1)^3) and the products are
    O(n (p+1)^2), so for a single feature the cost is linear in n.

    Raises SingularMatrix when X^T X is not invertible: identical/collinear columns,
    or fewer samples than coefficients (n < p+1).
    """
    cfg = resolve(config)
    X = design_matrix(x, cfg)
    y = as_targets(y, X.shape[0], cfg)
    n, k = X.shape

    if n < k:
        raise SingularMatrix(f"X^T X is singular: {n} samples cannot determine {k} coefficients (need n >= p+1)")
    # rank test on X rather than det(X^T X): identical columns survive rounding in the Gram matrix
    rank = int(np.linalg.matrix_rank(X, tol=cfg.rank_tol))
    if rank < k:
        raise SingularMatrix(
            f"X^T X is singular: design matrix has rank {rank} < {k} (collinear or constant feature columns)"
        )

    G = X.T @ X  # Gram matrix
    try:
        G_inv = np.linalg.inv(G)
    except np.linalg.LinAlgError as e:
        raise SingularMatrix(f"X^T X is singular: {e}") from e
    W = G_inv @ X.T @ y  # (p+1, 1)
    if not np.all(np.isfinite(W)):
        raise SingularMatrix("X^T X is numerically singular: solution is not finite")

    coef = Coefficients.from_vector(W[:, 0])
    log.debug("normal equation n=%d p=%d -> %r", n, k - 1, coef)
    return coef


def fit_dataset(dataset, config: Optional[NumericConfig] = None) -> Coefficients:
    return normal_equation(dataset.x, dataset.y, config)
