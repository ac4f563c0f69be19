"""Shared test fixtures and helper utilities for VFI unit tests."""

from __future__ import annotations

import numpy as np
import tensorflow as tf

# Force CPU for CI — must be called before any TF ops
tf.config.set_visible_devices([], 'GPU')

import pytest

from growth_vfi.config.economic_params import GrowthParams
from growth_vfi.config.vfi_config import GridConfig


def make_test_params(**overrides) -> GrowthParams:
    """Return GrowthParams with the reference calibration, plus overrides."""
    defaults = dict(
        eta=2.0,
        beta=0.95,
        alpha=0.33,
        delta=0.1,
        mu=0.0,
        rho=0.9,
        sigma=0.02,
    )
    defaults.update(overrides)
    return GrowthParams(**defaults)


def make_test_config(**overrides) -> GridConfig:
    """Return a small GridConfig suitable for fast unit tests."""
    defaults = dict(
        n_capital=20,
        n_productivity=3,
        tauchen_width=3.0,
        tol_vfi=1e-6,
        max_iter_vfi=2000,
    )
    defaults.update(overrides)
    return GridConfig(**defaults)


def make_concave_value(k_grid: np.ndarray, n_z: int, seed: int = 0) -> np.ndarray:
    """Random value function, strictly increasing and concave in capital.

    Built as ``a_j * log(k) + b_j`` with random positive slopes and
    random level shifts per productivity state.
    """
    rng = np.random.default_rng(seed)
    slopes = rng.uniform(0.5, 3.0, size=n_z)
    levels = rng.uniform(-20.0, -5.0, size=n_z)
    return np.log(k_grid)[:, None] * slopes[None, :] + levels[None, :]


@pytest.fixture
def params() -> GrowthParams:
    return make_test_params()


@pytest.fixture
def config() -> GridConfig:
    return make_test_config()


@pytest.fixture
def concave_value():
    """Factory fixture around :func:`make_concave_value`."""
    return make_concave_value


@pytest.fixture
def params_factory():
    """Factory fixture around :func:`make_test_params`."""
    return make_test_params


@pytest.fixture
def config_factory():
    """Factory fixture around :func:`make_test_config`."""
    return make_test_config
