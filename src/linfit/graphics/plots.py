from __future__ import annotations

from pathlib import Path
from typing import Dict, Mapping

import matplotlib

matplotlib.use("Agg")  # headless
import matplotlib.pyplot as plt
import numpy as np

from ..classic.linear.coefficients import Coefficients
from ..classic.linear.evaluate import predict
from ..classic.linear.gradient_descent import ObservationLog
from ..core.io import ensure_dir
from ..datasets.toy import Dataset
from ..errors import InvalidArgument


def plot_fit(dataset: Dataset, fits: Mapping[str, Coefficients], out_dir: str | Path) -> Path:
    """Scatter the samples and draw one line per named fit."""
    if dataset.p != 1:
        raise InvalidArgument("plot_fit only draws single-feature datasets")
    fn = ensure_dir(out_dir) / "fit_lines.png"
    xs = np.linspace(dataset.x.min(), dataset.x.max(), 100)
    plt.figure(figsize=(8, 4.5))
    plt.scatter(dataset.x, dataset.y, s=12, alpha=0.7, label="data")
    for name, coef in fits.items():
        plt.plot(xs, predict(coef, xs), lw=1.5, label=f"{name}: y={coef.slope:.3f}x+{coef.intercept:.3f}")
    plt.title("Linear Regression")
    plt.xlabel("x")
    plt.ylabel("y")
    plt.legend()
    plt.tight_layout()
    plt.savefig(fn, dpi=150)
    plt.close()
    return fn


def plot_convergence(obs: ObservationLog, out_dir: str | Path) -> Dict[str, Path]:
    """Cost, slope and intercept against iteration on a log x-axis."""
    out_dir = ensure_dir(out_dir)
    if len(obs) == 0:
        raise InvalidArgument("observation log is empty")
    # log axis: shift by one so iteration 0 is drawable
    it = obs.iterations + 1
    series = {"cost": obs.costs, "intercept": obs.intercepts}
    if len(obs[0].weights) == 1:
        series["slope"] = obs.slopes

    out: Dict[str, Path] = {}
    for name, vals in series.items():
        fn = Path(out_dir) / f"gd_{name}.png"
        plt.figure(figsize=(8, 3))
        plt.plot(it, vals, lw=1.5, marker=".")
        plt.xscale("log")
        if name == "cost" and np.all(vals > 0):
            plt.yscale("log")
        plt.title(f"Gradient descent: {name}")
        plt.xlabel("iteration + 1")
        plt.ylabel(name)
        plt.tight_layout()
        plt.savefig(fn, dpi=150)
        plt.close()
        out[name] = fn
    return out


def plot_losses(losses, out_dir: str | Path, name: str = "torch_loss") -> Path:
    fn = ensure_dir(out_dir) / f"{name}.png"
    plt.figure(figsize=(8, 3))
    plt.plot(np.arange(1, len(losses) + 1), losses, lw=1.5)
    plt.xscale("log")
    plt.yscale("log")
    plt.title("Training loss (MSE)")
    plt.xlabel("epoch")
    plt.ylabel("loss")
    plt.tight_layout()
    plt.savefig(fn, dpi=150)
    plt.close()
    return fn
