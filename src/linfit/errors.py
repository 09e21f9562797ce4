from __future__ import annotations

import numpy as np


class LinfitError(Exception):
    """Base class for every failure raised by linfit."""


class InvalidArgument(LinfitError, ValueError):
    """Malformed or empty input (n <= 0, mismatched lengths, bad hyperparameters)."""


class SingularMatrix(LinfitError, np.linalg.LinAlgError):
    """X^T X is not invertible (collinear features or fewer samples than coefficients)."""


class DegenerateInput(LinfitError, ValueError):
    """Zero variance in x, so the slope cov(x, y) / var(x) is undefined."""


class EquivalenceError(InvalidArgument):
    """Two solvers that must agree on the same dataset did not."""


class DivergenceDetected(RuntimeWarning):
    """Gradient-descent cost grew or became non-finite. Warned or raised, never corrected."""
