from pathlib import Path
from typing import Optional

import typer

from linfit import __version__
from linfit.core.device import seed_everything
from linfit.core.io import save_json
from linfit.core.logs import setup_logger
from linfit.core.manifest import write_manifest
from linfit.datasets.toy import make_noisy_line
from linfit.experiment import ExperimentConfig, compare_solvers, load_experiment_config
from linfit.graphics.plots import plot_convergence, plot_fit

app = typer.Typer(add_completion=False)


@app.command()
def main(
    config: Optional[Path] = typer.Option(None, help="YAML experiment config"),
    n: Optional[int] = None,
    noise_scale: Optional[float] = None,
    seed: Optional[int] = None,
    lr: Optional[float] = None,
    epochs: Optional[int] = None,
    tol: Optional[float] = typer.Option(None, help="stop GD when the cost change drops below tol"),
    torch: Optional[bool] = typer.Option(None, "--torch/--no-torch", help="also fit a one-layer network"),
    out_dir: Optional[Path] = typer.Option(None, help="write plots, summary.json and manifest.json here"),
):
    overrides = dict(n=n, noise_scale=noise_scale, seed=seed, lr=lr, epochs=epochs, tol=tol, torch=torch)
    if config is not None:
        cfg = load_experiment_config(config, **overrides)
    else:
        cfg = ExperimentConfig(**{k: v for k, v in overrides.items() if v is not None})
    setup_logger("linfit", cfg.log_level, log_file=out_dir / "run.log" if out_dir else None)
    if cfg.seed is not None:
        seed_everything(cfg.seed)

    data = make_noisy_line(n=cfg.n, noise_scale=cfg.noise_scale, start=cfg.start, seed=cfg.seed)
    cmp = compare_solvers(data, cfg)

    typer.echo(cmp.table().to_string(index=False, float_format=lambda v: f"{v:.6f}"))
    typer.echo(f"reg (cov^2 / var_x var_y): {cmp.statistical.reg:.4f}")
    typer.echo(f"GD stop: {cmp.gd.stop_reason} after {cmp.gd.iterations} iterations, cost={cmp.gd.cost:.6f}")

    if out_dir is not None:
        outputs = {"fit": str(plot_fit(data, cmp.fits(), out_dir))}
        outputs.update({f"gd_{k}": str(v) for k, v in plot_convergence(cmp.gd.log, out_dir).items()})
        cmp.gd.log.to_frame().to_csv(out_dir / "gd_log.csv", index=False)
        outputs["gd_log"] = str(out_dir / "gd_log.csv")
        save_json(out_dir / "summary.json", cmp.summary())
        outputs["summary"] = str(out_dir / "summary.json")
        write_manifest(
            out_dir,
            name="classic/run_linreg",
            version=__version__,
            config=str(config) if config else None,
            params=cfg.to_dict(),
            outputs=outputs,
            seed=cfg.seed,
        )
        typer.echo(f"Wrote outputs to {out_dir}")


if __name__ == "__main__":
    app()
