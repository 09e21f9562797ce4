from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd

from .classic.linear.closed_form import normal_equation
from .classic.linear.coefficients import Coefficients
from .classic.linear.evaluate import mse
from .classic.linear.gradient_descent import CostTolerance, DescentResult, EpochBudget, gradient_descent
from .classic.linear.statistical import StatisticalFit, statistical_fit
from .core.config import NumericConfig
from .core.io import load_yaml
from .core.timers import timed
from .datasets.toy import Dataset
from .errors import EquivalenceError, InvalidArgument

log = logging.getLogger("linfit.experiment")


# -------------------------------
# Config
# -------------------------------


@dataclass
class ExperimentConfig:
    # data
    n: int = 100
    noise_scale: float = 10.0
    start: int = 0
    seed: Optional[int] = 42

    # gradient descent
    lr: float = 1e-4
    epochs: int = 20_000
    tol: Optional[float] = None  # set -> stop on cost change < tol (epochs becomes the cap)
    stride: int = 100
    init_slope: float = 1.0
    init_intercept: float = 0.0
    divergence: str = "warn"

    # neural network path
    torch: bool = False
    torch_epochs: int = 2000
    torch_lr: float = 0.1

    # numerics
    dtype: str = "float64"
    rank_tol: Optional[float] = None
    equivalence_rtol: float = 1e-6

    log_level: str = "INFO"

    @property
    def numeric(self) -> NumericConfig:
        return NumericConfig(dtype=self.dtype, rank_tol=self.rank_tol)

    def stop_policy(self):
        if self.tol is not None:
            return CostTolerance(tol=self.tol, max_epochs=self.epochs)
        return EpochBudget(self.epochs)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def load_experiment_config(path: str | Path, **overrides: Any) -> ExperimentConfig:
    """Build an ExperimentConfig from YAML; non-None keyword overrides win over the file."""
    d = load_yaml(path)
    if not isinstance(d, dict):
        raise InvalidArgument(f"{path}: expected a mapping at the top level")
    known = {f.name for f in fields(ExperimentConfig)}
    unknown = sorted(set(d) - known)
    if unknown:
        raise InvalidArgument(f"{path}: unknown config keys {unknown}")
    d.update({k: v for k, v in overrides.items() if v is not None})
    return ExperimentConfig(**d)


# -------------------------------
# Comparison
# -------------------------------


@dataclass
class Comparison:
    dataset: Dataset
    closed_form: Coefficients
    statistical: StatisticalFit
    gd: DescentResult
    torch: Optional[Coefficients] = None
    timings: Dict[str, float] = field(default_factory=dict)

    def fits(self) -> Dict[str, Coefficients]:
        out = {
            "closed_form": self.closed_form,
            "statistical": self.statistical.coef,
            "gradient_descent": self.gd.coef,
        }
        if self.torch is not None:
            out["torch"] = self.torch
        return out

    def table(self) -> pd.DataFrame:
        rows = []
        for name, coef in self.fits().items():
            rows.append(
                {
                    "solver": name,
                    "slope": coef.slope,
                    "intercept": coef.intercept,
                    "mse": mse(coef, self.dataset.x, self.dataset.y),
                    "seconds": self.timings.get(name, np.nan),
                }
            )
        return pd.DataFrame(rows)

    def summary(self) -> Dict[str, Any]:
        return {
            "n": self.dataset.n,
            "fits": {k: v.to_dict() for k, v in self.fits().items()},
            "reg": self.statistical.reg,
            "gd": {
                "cost": self.gd.cost,
                "iterations": self.gd.iterations,
                "stop_reason": self.gd.stop_reason,
            },
            "timings": self.timings,
        }


def check_equivalence(a: Coefficients, b: Coefficients, rtol: float = 1e-6) -> None:
    """Closed-form and statistical solutions are the same line; anything else is a bug or bad numerics."""
    if not a.allclose(b, rtol=rtol, atol=rtol):
        raise EquivalenceError(f"solvers disagree beyond rtol={rtol}: {a!r} vs {b!r}")


def compare_solvers(dataset: Dataset, cfg: Optional[ExperimentConfig] = None) -> Comparison:
    """Fit `dataset` with every solver and cross-check the two closed forms."""
    cfg = cfg or ExperimentConfig()
    if dataset.p != 1:
        raise InvalidArgument("compare_solvers works on single-feature datasets")
    num = cfg.numeric
    timings: Dict[str, float] = {}

    with timed("closed_form", log) as t:
        cf = normal_equation(dataset.x, dataset.y, num)
    timings["closed_form"] = t.elapsed

    with timed("statistical", log) as t:
        st = statistical_fit(dataset.x, dataset.y, num)
    timings["statistical"] = t.elapsed

    check_equivalence(cf, st.coef, rtol=cfg.equivalence_rtol)

    with timed("gradient_descent", log) as t:
        gd = gradient_descent(
            dataset.x,
            dataset.y,
            init=Coefficients.line(cfg.init_slope, cfg.init_intercept),
            lr=cfg.lr,
            stop=cfg.stop_policy(),
            stride=cfg.stride,
            divergence=cfg.divergence,
            config=num,
        )
    timings["gradient_descent"] = t.elapsed

    torch_coef = None
    if cfg.torch:
        from .dl.linear_torch import fit_linear_torch

        with timed("torch", log) as t:
            torch_coef = fit_linear_torch(
                dataset.x,
                dataset.y,
                epochs=cfg.torch_epochs,
                lr=cfg.torch_lr,
                seed=cfg.seed or 0,
                config=num,
            ).coef
        timings["torch"] = t.elapsed

    log.info("closed_form=%r statistical=%r gd=%r reg=%.4f", cf, st.coef, gd.coef, st.reg)
    return Comparison(dataset=dataset, closed_form=cf, statistical=st, gd=gd, torch=torch_coef, timings=timings)
