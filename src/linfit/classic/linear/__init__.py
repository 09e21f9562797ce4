from .closed_form import fit_dataset as fit_dataset, normal_equation as normal_equation
from .coefficients import Coefficients as Coefficients
from .design import design_matrix as design_matrix
from .evaluate import mse as mse, predict as predict, r2_score as r2_score
from .gradient_descent import (
    CostTolerance as CostTolerance,
    DescentPath as DescentPath,
    DescentResult as DescentResult,
    EpochBudget as EpochBudget,
    Observation as Observation,
    ObservationLog as ObservationLog,
    OptimizationState as OptimizationState,
    descent_path as descent_path,
    gradient_descent as gradient_descent,
    mse_cost as mse_cost,
    mse_grad as mse_grad,
)
from .statistical import StatisticalFit as StatisticalFit, statistical_fit as statistical_fit
