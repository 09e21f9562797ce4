from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from ..errors import InvalidArgument


@dataclass(frozen=True, eq=False)
class Dataset:
    """
    Ordered samples (x_i, y_i). x is (n,) for a single feature or (n, p); y is (n,).
    Arrays are copied and made read-only, so a Dataset never changes once built.
    """

    x: np.ndarray
    y: np.ndarray

    def __post_init__(self):
        x = np.array(self.x, dtype=np.float64)
        y = np.array(self.y, dtype=np.float64).reshape(-1)
        if x.ndim not in (1, 2):
            raise InvalidArgument(f"x must be 1-D or 2-D, got shape {x.shape}")
        if x.shape[0] == 0:
            raise InvalidArgument("Dataset needs at least one sample")
        if x.shape[0] != y.shape[0]:
            raise InvalidArgument(f"x has {x.shape[0]} samples but y has {y.shape[0]}")
        x.setflags(write=False)
        y.setflags(write=False)
        object.__setattr__(self, "x", x)
        object.__setattr__(self, "y", y)

    @property
    def n(self) -> int:
        return int(self.y.shape[0])

    @property
    def p(self) -> int:
        return 1 if self.x.ndim == 1 else int(self.x.shape[1])

    def __len__(self) -> int:
        return self.n

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dataset):
            return NotImplemented
        return np.array_equal(self.x, other.x) and np.array_equal(self.y, other.y)

    def __hash__(self) -> int:
        return hash((self.x.shape, self.x.tobytes(), self.y.tobytes()))

    def samples(self) -> list[tuple]:
        return list(zip(self.x.tolist(), self.y.tolist()))


def _rng(seed: Optional[int], rng: Optional[np.random.Generator]) -> np.random.Generator:
    if rng is not None:
        return rng
    return np.random.default_rng(seed)


def make_noisy_line(
    n: int = 100,
    noise_scale: float = 1.0,
    start: int = 0,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
) -> Dataset:
    """
    x_i = start, start+1, ..., start+n-1 and y_i = x_i + U[0, noise_scale).

    Pass `seed` or a seeded `rng` for reproducible data; with neither, fresh OS entropy is used.
    """
    if n <= 0:
        raise InvalidArgument(f"n must be positive, got {n}")
    if noise_scale < 0:
        raise InvalidArgument(f"noise_scale must be >= 0, got {noise_scale}")
    x = np.arange(start, start + n, dtype=np.float64)
    noise = _rng(seed, rng).uniform(0.0, noise_scale, size=n) if noise_scale > 0 else np.zeros(n)
    return Dataset(x, x + noise)


def make_line(
    x: Sequence[float] | np.ndarray,
    slope: float,
    intercept: float,
    noise_scale: float = 0.0,
    rng: Optional[np.random.Generator] = None,
) -> Dataset:
    """y = slope * x + intercept, plus optional U[0, noise_scale) noise."""
    x = np.asarray(x, dtype=np.float64)
    if x.ndim != 1 or x.size == 0:
        raise InvalidArgument("make_line expects a non-empty 1-D x")
    if noise_scale < 0:
        raise InvalidArgument(f"noise_scale must be >= 0, got {noise_scale}")
    y = slope * x + intercept
    if noise_scale > 0:
        y = y + _rng(None, rng).uniform(0.0, noise_scale, size=x.shape[0])
    return Dataset(x, y)


def make_linear_regression(n: int = 200, d: int = 1, noise: float = 0.1, seed: int = 42):
    """Gaussian features, random true weights/bias and Gaussian noise. Returns (Dataset, w_true, b_true)."""
    if n <= 0 or d <= 0:
        raise InvalidArgument(f"n and d must be positive, got n={n}, d={d}")
    rng = np.random.default_rng(seed)
    X = rng.normal(size=(n, d))
    w_true = rng.normal(size=(d, 1))
    b_true = rng.normal(size=(1,))
    y = X @ w_true + b_true + noise * rng.normal(size=(n, 1))
    return Dataset(X, y.squeeze(1)), w_true.squeeze(1), float(b_true[0])
