"""Shared fixtures: seeded random geometry."""

from __future__ import annotations

import pytest
import torch

from curve_engine.primitives import DTYPE

SEEDS = [0, 1, 7, 42, 123]


class RandomGeometry:
    """Reproducible random scalars and vectors (float64)."""

    def __init__(self, seed: int) -> None:
        self.gen = torch.Generator().manual_seed(seed)

    def real(self, low: float = -10.0, high: float = 10.0) -> float:
        u = torch.rand(1, generator=self.gen, dtype=DTYPE)
        return float(low + (high - low) * u)

    def integer(self, low: int, high: int) -> int:
        """Uniform integer in [low, high]."""
        return int(torch.randint(low, high + 1, (1,), generator=self.gen))

    def vector(self, dim: int = 3, scale: float = 1.0) -> torch.Tensor:
        v = 2.0 * torch.rand(dim, generator=self.gen, dtype=DTYPE) - 1.0
        return v * scale

    def nonzero_vector(self, dim: int = 3, scale: float = 1.0) -> torch.Tensor:
        v = self.vector(dim, scale)
        while float(torch.linalg.norm(v)) < 1e-3:
            v = self.vector(dim, scale)
        return v


@pytest.fixture(params=SEEDS)
def rng(request) -> RandomGeometry:
    return RandomGeometry(request.param)


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers and context installed by setup_logging during a test."""
    yield
    from curve_engine import logging_config

    logging_config.setup_logging(log_level="WARNING", to_stderr=False)
    logging_config.pop_context()
