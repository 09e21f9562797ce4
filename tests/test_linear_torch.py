import numpy as np
import pytest
import torch

from linfit.core.config import NumericConfig
from linfit.datasets.toy import make_line
from linfit.dl.linear_torch import LinearNet, fit_linear_torch


def test_linear_net_exposes_bias_and_kernel():
    torch.manual_seed(0)
    net = LinearNet(in_dim=1)
    with torch.no_grad():
        net.linear.weight.fill_(2.0)
        net.linear.bias.fill_(1.0)
    coef = net.coefficients()
    assert coef.slope == 2.0 and coef.intercept == 1.0
    out = net(torch.tensor([[10.0]]))
    assert out.shape == (1, 1) and abs(out.item() - 21.0) < 1e-6


def test_fit_recovers_exact_line():
    ds = make_line(np.linspace(0.0, 1.0, 21), slope=2.0, intercept=1.0)
    fit = fit_linear_torch(ds.x, ds.y, epochs=3000, lr=0.05, seed=0, device=torch.device("cpu"))
    assert abs(fit.coef.slope - 2.0) < 5e-2
    assert abs(fit.coef.intercept - 1.0) < 5e-2
    assert fit.losses[-1] < 1e-3 < fit.losses[0]
    assert len(fit.losses) == 3000


@pytest.mark.parametrize("dtype,expected", [("float32", torch.float32), ("float64", torch.float64)])
def test_fit_follows_numeric_config_dtype(dtype, expected, monkeypatch):
    seen = []
    orig = LinearNet.forward

    def spy(self, x):
        seen.append((x.dtype, self.linear.weight.dtype))
        return orig(self, x)

    monkeypatch.setattr(LinearNet, "forward", spy)
    ds = make_line(np.linspace(0.0, 1.0, 11), slope=2.0, intercept=1.0)
    fit = fit_linear_torch(ds.x, ds.y, epochs=5, lr=0.05, config=NumericConfig(dtype=dtype))
    assert seen and all(s == (expected, expected) for s in seen)
    assert len(fit.losses) == 5
