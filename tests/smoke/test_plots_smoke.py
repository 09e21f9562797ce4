from pathlib import Path

from linfit.datasets.toy import make_noisy_line
from linfit.experiment import ExperimentConfig, compare_solvers
from linfit.graphics.plots import plot_convergence, plot_fit, plot_losses


def test_plots_write_pngs(tmp_path: Path):
    ds = make_noisy_line(n=40, noise_scale=4.0, seed=0)
    cmp = compare_solvers(ds, ExperimentConfig(epochs=500))
    fit_png = plot_fit(ds, cmp.fits(), tmp_path)
    assert fit_png.exists() and fit_png.stat().st_size > 0
    curves = plot_convergence(cmp.gd.log, tmp_path)
    assert set(curves) == {"cost", "intercept", "slope"}
    assert all(p.exists() for p in curves.values())
    assert plot_losses([4.0, 2.0, 1.0], tmp_path).exists()
