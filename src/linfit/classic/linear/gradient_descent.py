from __future__ import annotations

import logging
import math
import warnings
from collections.abc import Sequence as SequenceABC
from dataclasses import dataclass
from typing import Iterator, Optional, Union

import numpy as np
import pandas as pd

from ...core.config import NumericConfig, resolve
from ...errors import DivergenceDetected, InvalidArgument, LinfitError
from .coefficients import Coefficients
from .design import ArrayLike, as_targets, design_matrix

log = logging.getLogger("linfit.gd")


# -------------------------------
# Cost and gradient
# -------------------------------


def mse_cost(X: np.ndarray, y: np.ndarray, W: np.ndarray) -> float:
    # C(W) = mean((y - XW)^2)
    r = X @ W - y
    return float(np.mean(r * r))


def mse_grad(X: np.ndarray, y: np.ndarray, W: np.ndarray) -> np.ndarray:
    # dC/dW = 2/n * X^T (XW - y); with X = [1 | x] that is
    # dC/db = mean(-2 (y - y_hat)), dC/dm = mean(-2 x (y - y_hat))
    return (2.0 / X.shape[0]) * (X.T @ (X @ W - y))


# -------------------------------
# Stop policies
# -------------------------------


@dataclass(frozen=True)
class EpochBudget:
    """Run exactly `epochs` updates (states 0..epochs)."""

    epochs: int = 1000

    def __post_init__(self):
        if self.epochs < 0:
            raise InvalidArgument(f"epochs must be >= 0, got {self.epochs}")

    def done(self, iteration: int, prev_cost: Optional[float], cost: float) -> bool:
        return iteration >= self.epochs

    def reason(self, iteration: int) -> str:
        return "epochs"


@dataclass(frozen=True)
class CostTolerance:
    """Stop after the first update whose |cost change| < tol, or after `max_epochs` updates."""

    tol: float = 1e-10
    max_epochs: int = 100_000

    def __post_init__(self):
        if self.tol <= 0:
            raise InvalidArgument(f"tol must be > 0, got {self.tol}")
        if self.max_epochs < 0:
            raise InvalidArgument(f"max_epochs must be >= 0, got {self.max_epochs}")

    def done(self, iteration: int, prev_cost: Optional[float], cost: float) -> bool:
        if iteration >= self.max_epochs:
            return True
        return prev_cost is not None and abs(prev_cost - cost) < self.tol

    def reason(self, iteration: int) -> str:
        return "max_epochs" if iteration >= self.max_epochs else "tolerance"


StopPolicy = Union[EpochBudget, CostTolerance]


# -------------------------------
# States and the observation log
# -------------------------------


@dataclass(frozen=True)
class OptimizationState:
    iteration: int
    coef: Coefficients
    cost: float


@dataclass(frozen=True)
class Observation:
    iteration: int
    intercept: float
    weights: tuple
    cost: float

    @property
    def slope(self) -> float:
        if len(self.weights) != 1:
            raise InvalidArgument("slope is only defined for one feature")
        return self.weights[0]

    @classmethod
    def of(cls, state: OptimizationState) -> "Observation":
        return cls(state.iteration, state.coef.intercept, tuple(state.coef.weights.tolist()), state.cost)


class ObservationLog(SequenceABC):
    """
    Append-only record of (iteration, intercept, weights, cost) snapshots, iterations strictly increasing.
    """

    def __init__(self):
        self._rows: list[Observation] = []

    def append(self, obs: Observation) -> None:
        if self._rows and obs.iteration <= self._rows[-1].iteration:
            raise InvalidArgument(
                f"observation log is append-only by iteration: {obs.iteration} after {self._rows[-1].iteration}"
            )
        self._rows.append(obs)

    def __len__(self) -> int:
        return len(self._rows)

    def __getitem__(self, i):
        return self._rows[i]

    def __iter__(self) -> Iterator[Observation]:
        return iter(list(self._rows))

    def __repr__(self) -> str:
        return f"ObservationLog({len(self)} rows)"

    @property
    def iterations(self) -> np.ndarray:
        return np.array([o.iteration for o in self._rows], dtype=np.int64)

    @property
    def costs(self) -> np.ndarray:
        return np.array([o.cost for o in self._rows], dtype=np.float64)

    @property
    def intercepts(self) -> np.ndarray:
        return np.array([o.intercept for o in self._rows], dtype=np.float64)

    @property
    def slopes(self) -> np.ndarray:
        return np.array([o.slope for o in self._rows], dtype=np.float64)

    def to_frame(self) -> pd.DataFrame:
        rows = []
        for o in self._rows:
            row = {"iteration": o.iteration, "intercept": o.intercept}
            if len(o.weights) == 1:
                row["slope"] = o.weights[0]
            else:
                row.update({f"w{j + 1}": w for j, w in enumerate(o.weights)})
            row["cost"] = o.cost
            rows.append(row)
        return pd.DataFrame(rows)


# -------------------------------
# The iteration
# -------------------------------


class DescentPath:
    """
    Lazy, finite sequence of OptimizationState for full-batch gradient descent on MSE.

    State 0 is `init` with its cost; every following state is one update W <- W - lr * grad C(W).
    Each call to iter() replays the path from `init`, so the same path can be consumed
    fully, cut short, or sampled every k-th step.
    """

    def __init__(
        self,
        x: ArrayLike,
        y: ArrayLike,
        init: Optional[Coefficients] = None,
        lr: float = 0.01,
        stop: Optional[StopPolicy] = None,
        config: Optional[NumericConfig] = None,
    ):
        if not lr > 0 or not math.isfinite(lr):
            raise InvalidArgument(f"learning rate must be a positive finite number, got {lr}")
        cfg = resolve(config)
        self.X = design_matrix(x, cfg)
        self.y = as_targets(y, self.X.shape[0], cfg)
        k = self.X.shape[1]
        if init is None:
            init = Coefficients(0.0, np.zeros(k - 1))
        if init.p != k - 1:
            raise InvalidArgument(f"init has {init.p} weight(s) but x has {k - 1} feature(s)")
        self.init = init
        self.lr = float(lr)
        self.stop = stop if stop is not None else EpochBudget()
        self._W0 = init.as_vector().astype(cfg.np_dtype).reshape(-1, 1)

    def _state(self, iteration: int, W: np.ndarray, cost: float) -> OptimizationState:
        return OptimizationState(iteration, Coefficients.from_vector(W[:, 0]), cost)

    def __iter__(self) -> Iterator[OptimizationState]:
        X, y, lr = self.X, self.y, self.lr
        W = self._W0.copy()
        it = 0
        cost = mse_cost(X, y, W)
        prev: Optional[float] = None
        yield self._state(it, W, cost)
        while not self.stop.done(it, prev, cost):
            # a divergent lr overflows; DivergenceDetected reports it instead of numpy warnings
            with np.errstate(over="ignore", invalid="ignore"):
                W = W - lr * mse_grad(X, y, W)
                prev, cost = cost, mse_cost(X, y, W)
            it += 1
            yield self._state(it, W, cost)

    def every(self, k: int) -> Iterator[OptimizationState]:
        """Every k-th state (iteration % k == 0) plus the terminal one."""
        if k < 1:
            raise InvalidArgument(f"stride must be >= 1, got {k}")
        last = None
        for s in self:
            last = s
            if s.iteration % k == 0:
                yield s
        if last is not None and last.iteration % k != 0:
            yield last


def descent_path(
    x: ArrayLike,
    y: ArrayLike,
    init: Optional[Coefficients] = None,
    lr: float = 0.01,
    stop: Optional[StopPolicy] = None,
    config: Optional[NumericConfig] = None,
) -> DescentPath:
    return DescentPath(x, y, init=init, lr=lr, stop=stop, config=config)


# -------------------------------
# Divergence diagnostic
# -------------------------------


class _DivergenceMonitor:
    def __init__(self, mode: str, patience: int):
        if mode not in ("warn", "raise", "ignore"):
            raise InvalidArgument("divergence must be one of {warn, raise, ignore}")
        if patience < 1:
            raise InvalidArgument(f"patience must be >= 1, got {patience}")
        self.mode = mode
        self.patience = patience
        self.rises = 0
        self.fired = False

    def update(self, prev_cost: Optional[float], state: OptimizationState) -> None:
        if self.fired or self.mode == "ignore":
            return
        msg = None
        if not math.isfinite(state.cost):
            msg = f"cost became non-finite at iteration {state.iteration}; learning rate is too large"
        elif prev_cost is not None and state.cost > prev_cost:
            self.rises += 1
            if self.rises >= self.patience:
                msg = (
                    f"cost increased {self.rises} iterations in a row "
                    f"(now {state.cost:.6g} at iteration {state.iteration}); learning rate is too large"
                )
        else:
            self.rises = 0
        if msg is None:
            return
        self.fired = True
        log.warning(msg)
        if self.mode == "raise":
            raise DivergenceDetected(msg)
        warnings.warn(msg, DivergenceDetected, stacklevel=3)


# -------------------------------
# Driver
# -------------------------------


@dataclass(frozen=True)
class DescentResult:
    coef: Coefficients
    cost: float
    iterations: int
    log: ObservationLog
    stop_reason: str

    @property
    def slope(self) -> float:
        return self.coef.slope

    @property
    def intercept(self) -> float:
        return self.coef.intercept


def gradient_descent(
    x: ArrayLike,
    y: ArrayLike,
    init: Optional[Coefficients] = None,
    lr: float = 0.01,
    epochs: int = 1000,
    stop: Optional[StopPolicy] = None,
    stride: int = 100,
    divergence: str = "warn",
    patience: int = 10,
    config: Optional[NumericConfig] = None,
) -> DescentResult:
    """
    Fit by gradient descent on MSE and keep a convergence log.

    The default stop policy is a fixed budget of `epochs` updates; pass `stop=CostTolerance(...)`
    to stop early on a small cost change instead (`stop` wins over `epochs`).
    Every `stride`-th state, and the terminal state, goes into the observation log.
    A too-large `lr` is reported through DivergenceDetected (warned, raised, or ignored), never corrected.
    """
    if stride < 1:
        raise InvalidArgument(f"stride must be >= 1, got {stride}")
    policy = stop if stop is not None else EpochBudget(epochs)
    path = DescentPath(x, y, init=init, lr=lr, stop=policy, config=config)
    monitor = _DivergenceMonitor(divergence, patience)

    obs_log = ObservationLog()
    prev: Optional[OptimizationState] = None
    state: Optional[OptimizationState] = None
    for state in path:
        monitor.update(prev.cost if prev is not None else None, state)
        if state.iteration % stride == 0:
            obs_log.append(Observation.of(state))
        prev = state
    if state is None:
        raise LinfitError("descent path produced no states")
    if state.iteration % stride != 0:
        obs_log.append(Observation.of(state))

    reason = policy.reason(state.iteration)
    log.info(
        "gd stop=%s iterations=%d lr=%g cost=%.6g -> %r", reason, state.iteration, path.lr, state.cost, state.coef
    )
    return DescentResult(coef=state.coef, cost=state.cost, iterations=state.iteration, log=obs_log, stop_reason=reason)
