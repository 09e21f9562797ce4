from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ...core.config import NumericConfig, resolve
from ...errors import DegenerateInput, InvalidArgument
from .coefficients import Coefficients
from .design import ArrayLike

log = logging.getLogger("linfit.statistical")


@dataclass(frozen=True)
class StatisticalFit:
    coef: Coefficients
    reg: float  # cov(x,y)^2 / (var(x) var(y)), in [0, 1]
    cov_xy: float
    var_x: float
    var_y: float

    @property
    def slope(self) -> float:
        return self.coef.slope

    @property
    def intercept(self) -> float:
        return self.coef.intercept


def statistical_fit(x: ArrayLike, y: ArrayLike, config: Optional[NumericConfig] = None) -> StatisticalFit:
    """
    Single-feature least squares from population moments (1/n normalisation):

        slope     = cov(x, y) / var(x)
        intercept = mean(y) - slope * mean(x)
        reg       = cov(x, y)^2 / (var(x) * var(y))

    Same line as the normal equations for p = 1, without building or inverting a matrix.
    """
    dt = resolve(config).np_dtype
    x = np.asarray(x, dtype=dt)
    y = np.asarray(y, dtype=dt)
    if x.ndim == 2 and x.shape[1] == 1:
        x = x[:, 0]
    if x.ndim != 1 or y.ndim != 1:
        raise InvalidArgument(f"statistical_fit needs 1-D x and y, got {x.shape} and {y.shape}")
    if x.shape[0] != y.shape[0]:
        raise InvalidArgument(f"x has {x.shape[0]} samples but y has {y.shape[0]}")
    if x.shape[0] < 2:
        raise InvalidArgument(f"statistical_fit needs n >= 2 samples, got {x.shape[0]}")

    # identical x can still give var(x) ~ 1e-34 once the mean rounds, so check the values
    if np.ptp(x) == 0.0:
        raise DegenerateInput("var(x) = 0: all x values are identical, slope is undefined")
    flat_y = bool(np.ptp(y) == 0.0)

    mx, my = x.mean(), y.mean()
    dx, dy = x - mx, y - my
    var_x = float(np.mean(dx * dx))
    var_y = 0.0 if flat_y else float(np.mean(dy * dy))
    cov_xy = 0.0 if flat_y else float(np.mean(dx * dy))

    if var_x == 0.0:
        raise DegenerateInput("var(x) underflowed to 0: x values are too close together for a slope")

    slope = cov_xy / var_x
    intercept = float(my) - slope * float(mx)
    # constant y lies exactly on the horizontal line through mean(y)
    reg = 1.0 if flat_y else min(1.0, cov_xy * cov_xy / (var_x * var_y))

    log.debug("statistical fit n=%d slope=%.6g intercept=%.6g reg=%.4f", x.shape[0], slope, intercept, reg)
    return StatisticalFit(
        coef=Coefficients.line(slope, intercept), reg=reg, cov_xy=cov_xy, var_x=var_x, var_y=var_y
    )
