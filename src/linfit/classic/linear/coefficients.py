from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

import numpy as np

from ...errors import InvalidArgument


@dataclass(frozen=True, eq=False)
class Coefficients:
    """
    Fitted line / hyperplane  y = intercept + weights . x

    `weights` has one entry per feature; the univariate case exposes it as `slope`.
    """

    intercept: float
    weights: np.ndarray  # (p,)

    def __post_init__(self):
        w = np.array(self.weights, dtype=np.float64).reshape(-1)
        if w.size == 0:
            raise InvalidArgument("Coefficients need at least one weight")
        w.setflags(write=False)
        object.__setattr__(self, "weights", w)
        object.__setattr__(self, "intercept", float(self.intercept))

    @classmethod
    def line(cls, slope: float, intercept: float) -> "Coefficients":
        return cls(intercept=intercept, weights=np.array([slope]))

    @classmethod
    def from_vector(cls, W: np.ndarray) -> "Coefficients":
        """W = [b, w_1, ..., w_p], the layout produced by a bias-first design matrix."""
        W = np.asarray(W, dtype=np.float64).reshape(-1)
        if W.size < 2:
            raise InvalidArgument(f"coefficient vector needs p+1 >= 2 entries, got {W.size}")
        return cls(intercept=float(W[0]), weights=W[1:])

    @property
    def p(self) -> int:
        return int(self.weights.shape[0])

    @property
    def slope(self) -> float:
        if self.p != 1:
            raise InvalidArgument(f"slope is only defined for one feature, these coefficients have {self.p}")
        return float(self.weights[0])

    def as_vector(self) -> np.ndarray:
        return np.concatenate([[self.intercept], self.weights])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Coefficients):
            return NotImplemented
        return self.intercept == other.intercept and np.array_equal(self.weights, other.weights)

    def __hash__(self) -> int:
        return hash((self.intercept, tuple(self.weights.tolist())))

    def allclose(self, other: "Coefficients", rtol: float = 1e-6, atol: float = 1e-9) -> bool:
        return self.p == other.p and bool(
            np.allclose(self.as_vector(), other.as_vector(), rtol=rtol, atol=atol)
        )

    def to_dict(self) -> Dict[str, object]:
        out: Dict[str, object] = {"intercept": self.intercept, "weights": self.weights.tolist()}
        if self.p == 1:
            out["slope"] = self.slope
        return out

    def __repr__(self) -> str:
        if self.p == 1:
            return f"Coefficients(slope={self.slope:.6g}, intercept={self.intercept:.6g})"
        return f"Coefficients(intercept={self.intercept:.6g}, weights={np.round(self.weights, 6).tolist()})"
