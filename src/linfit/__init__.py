# linfit: fit a line three ways (normal equations, covariance/variance, gradient descent).

from .classic.linear import (
    Coefficients as Coefficients,
    CostTolerance as CostTolerance,
    DescentResult as DescentResult,
    EpochBudget as EpochBudget,
    ObservationLog as ObservationLog,
    design_matrix as design_matrix,
    gradient_descent as gradient_descent,
    normal_equation as normal_equation,
    predict as predict,
    statistical_fit as statistical_fit,
)
from .core.config import NumericConfig as NumericConfig
from .datasets.toy import Dataset as Dataset, make_line as make_line, make_noisy_line as make_noisy_line
from .errors import (
    DegenerateInput as DegenerateInput,
    DivergenceDetected as DivergenceDetected,
    InvalidArgument as InvalidArgument,
    SingularMatrix as SingularMatrix,
)

__version__ = "0.1.0"

__all__ = [
    "Coefficients",
    "CostTolerance",
    "Dataset",
    "DegenerateInput",
    "DescentResult",
    "DivergenceDetected",
    "EpochBudget",
    "InvalidArgument",
    "NumericConfig",
    "ObservationLog",
    "SingularMatrix",
    "design_matrix",
    "gradient_descent",
    "make_line",
    "make_noisy_line",
    "normal_equation",
    "predict",
    "statistical_fit",
]
