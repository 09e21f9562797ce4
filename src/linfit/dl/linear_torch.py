from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import torch
import torch.nn as nn

from ..classic.linear.coefficients import Coefficients
from ..classic.linear.design import ArrayLike, as_features, as_targets
from ..core.config import NumericConfig, resolve
from ..core.device import torch_dtype
from ..errors import InvalidArgument

log = logging.getLogger("linfit.torch")


class LinearNet(nn.Module):
    """One dense layer with a linear (identity) activation: y = x W^T + b."""

    def __init__(self, in_dim: int = 1):
        super().__init__()
        self.linear = nn.Linear(in_dim, 1)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        return self.linear(x)

    def coefficients(self) -> Coefficients:
        # {bias, kernel} -> (intercept, weights)
        w = self.linear.weight.detach().cpu().double().numpy().reshape(-1)
        b = float(self.linear.bias.detach().cpu().double().item())
        return Coefficients(intercept=b, weights=w)


@dataclass
class TorchFit:
    coef: Coefficients
    losses: List[float] = field(default_factory=list)

    @property
    def final_loss(self) -> float:
        return self.losses[-1] if self.losses else float("nan")


def fit_linear_torch(
    x: ArrayLike,
    y: ArrayLike,
    epochs: int = 2000,
    lr: float = 0.1,
    seed: int = 0,
    device: Optional[torch.device] = None,
    log_every: int = 0,
    config: Optional[NumericConfig] = None,
) -> TorchFit:
    """
    Full-batch fit of LinearNet with MSELoss and Adam. Returns the learned line and the loss per epoch.

    Tensors and parameters use `config.dtype` (float64 falls back to float32 on MPS).
    """
    if epochs < 1:
        raise InvalidArgument(f"epochs must be >= 1, got {epochs}")
    if not lr > 0:
        raise InvalidArgument(f"learning rate must be > 0, got {lr}")
    cfg = resolve(config)
    X_np = as_features(x, cfg)
    y_np = as_targets(y, X_np.shape[0], cfg)

    dev = device or torch.device("cpu")
    dt = torch_dtype(cfg.dtype, dev)
    torch.manual_seed(seed)
    X = torch.tensor(X_np, dtype=dt, device=dev)
    y_t = torch.tensor(y_np, dtype=dt, device=dev)

    model = LinearNet(in_dim=X_np.shape[1]).to(device=dev, dtype=dt)
    opt = torch.optim.Adam(model.parameters(), lr=lr)
    loss_fn = nn.MSELoss()

    losses: List[float] = []
    model.train()
    for epoch in range(epochs):
        opt.zero_grad(set_to_none=True)
        loss = loss_fn(model(X), y_t)
        loss.backward()
        opt.step()
        losses.append(loss.item())
        if log_every and (epoch + 1) % log_every == 0:
            log.info("epoch %d/%d loss=%.6f", epoch + 1, epochs, losses[-1])

    model.eval()
    coef = model.coefficients()
    log.info("torch fit epochs=%d lr=%g loss=%.6g -> %r", epochs, lr, losses[-1], coef)
    return TorchFit(coef=coef, losses=losses)
