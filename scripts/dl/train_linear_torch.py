import typer

from linfit.classic.linear import normal_equation
from linfit.core.config import NumericConfig
from linfit.core.device import pick_device, seed_everything
from linfit.core.logs import setup_logger
from linfit.datasets.toy import make_noisy_line
from linfit.dl.linear_torch import fit_linear_torch

app = typer.Typer(add_completion=False)


@app.command()
def main(
    n: int = 100,
    noise_scale: float = 10.0,
    epochs: int = 2000,
    lr: float = 0.1,
    seed: int = 0,
    device: str = "cpu",
    log_every: int = 500,
    dtype: str = "float32",
):
    setup_logger("linfit", "INFO")
    seed_everything(seed)
    data = make_noisy_line(n=n, noise_scale=noise_scale, seed=seed)
    dev = pick_device(device)
    fit = fit_linear_torch(
        data.x,
        data.y,
        epochs=epochs,
        lr=lr,
        seed=seed,
        device=dev,
        log_every=log_every,
        config=NumericConfig(dtype=dtype),
    )
    ref = normal_equation(data.x, data.y)
    typer.echo(f"Final loss: {fit.final_loss:.4f}  Device: {dev}")
    typer.echo(f"Network     slope={fit.coef.slope:.4f} intercept={fit.coef.intercept:.4f}")
    typer.echo(f"Closed form slope={ref.slope:.4f} intercept={ref.intercept:.4f}")


if __name__ == "__main__":
    app()
