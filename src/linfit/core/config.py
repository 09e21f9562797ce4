from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass(frozen=True)
class NumericConfig:
    """
    Numeric context handed to every solver call explicitly (no process-wide default backend).

    dtype     floating dtype used for design matrices, targets and coefficients
    rank_tol  singular-value cutoff for the rank test on X; None -> numpy's default
              (S.max * max(n, p+1) * eps)
    """

    dtype: str = "float64"
    rank_tol: Optional[float] = None

    def __post_init__(self):
        if np.dtype(self.dtype).kind != "f":
            raise ValueError(f"NumericConfig.dtype must be a floating dtype, got {self.dtype!r}")
        if self.rank_tol is not None and self.rank_tol < 0:
            raise ValueError("NumericConfig.rank_tol must be >= 0")

    @property
    def np_dtype(self) -> np.dtype:
        return np.dtype(self.dtype)


def resolve(config: Optional[NumericConfig]) -> NumericConfig:
    return config if config is not None else NumericConfig()
