"""Unit tests for GridBuilder: productivity grid, capital grid, initial value."""

from __future__ import annotations

import numpy as np
import tensorflow as tf

tf.config.set_visible_devices([], 'GPU')

import pytest

from growth_vfi.core.errors import InvalidParameter, NonPositiveConsumption
from growth_vfi.econ import SteadyStateCalculator
from growth_vfi.vfi.grids.grid_builder import (
    K_LOWER_SCALE,
    K_UPPER_SCALE,
    GridBuilder,
)


def _kss(params, z):
    user_cost = 1.0 / params.beta - 1.0 + params.delta
    return ((1.0 / (params.alpha * z)) * user_cost) ** (1.0 / (params.alpha - 1.0))


class TestBuildProductivityGrid:
    """Tests for GridBuilder.build_productivity_grid."""

    def test_shapes_and_rows(self, params, config_factory):
        config = config_factory(n_productivity=11)
        z, P, z_min, z_max = GridBuilder.build_productivity_grid(config, params)
        assert z.shape == (11,)
        assert P.shape == (11, 11)
        np.testing.assert_allclose(P.numpy().sum(axis=1), 1.0, atol=1e-9)
        assert np.all(np.diff(z.numpy()) > 0)
        assert z_min == pytest.approx(float(z[0]))
        assert z_max == pytest.approx(float(z[-1]))

    def test_precision_follows_config(self, params, config_factory):
        config = config_factory(precision="float32")
        z, P, _, _ = GridBuilder.build_productivity_grid(config, params)
        assert z.dtype == tf.float32
        assert P.dtype == tf.float32


class TestBuildCapitalGrid:
    """Tests for GridBuilder.build_capital_grid."""

    def test_steady_state_bounds(self, params, config):
        z, _, z_min, z_max = GridBuilder.build_productivity_grid(config, params)
        k_grid, k_min, k_max = GridBuilder.build_capital_grid(config, params, z)

        assert k_min == pytest.approx(K_LOWER_SCALE * _kss(params, z_min), rel=1e-10)
        assert k_max == pytest.approx(K_UPPER_SCALE * _kss(params, z_max), rel=1e-10)
        assert k_grid.shape == (config.n_capital,)
        assert np.all(np.diff(k_grid.numpy()) > 0)
        assert float(k_grid[0]) == pytest.approx(k_min)
        assert float(k_grid[-1]) == pytest.approx(k_max)

    def test_capital_bounds_helper(self, params):
        k_min, k_max = GridBuilder.capital_bounds(params, 0.9, 1.1)
        assert k_min == pytest.approx(0.95 * _kss(params, 0.9))
        assert k_max == pytest.approx(1.05 * _kss(params, 1.1))

    def test_custom_bounds(self, params, config):
        z, _, _, _ = GridBuilder.build_productivity_grid(config, params)
        k_grid, k_min, k_max = GridBuilder.build_capital_grid(
            config, params, z, custom_bounds=(1.0, 4.0)
        )
        assert k_min == 1.0
        assert k_max == pytest.approx(4.0)
        np.testing.assert_allclose(
            k_grid.numpy(), np.linspace(1.0, 4.0, config.n_capital)
        )

    @pytest.mark.parametrize("bounds", [(0.0, 4.0), (-1.0, 4.0), (3.0, 3.0), (4.0, 1.0)])
    def test_degenerate_bounds(self, params, config, bounds):
        z, _, _, _ = GridBuilder.build_productivity_grid(config, params)
        with pytest.raises(InvalidParameter):
            GridBuilder.build_capital_grid(config, params, z, custom_bounds=bounds)

    def test_single_capital_point(self, params, config_factory):
        config = config_factory(n_capital=1)
        z, _, _, _ = GridBuilder.build_productivity_grid(config, params)
        k_grid, k_min, k_max = GridBuilder.build_capital_grid(config, params, z)
        assert k_grid.shape == (1,)
        assert k_max == pytest.approx(k_min)


class TestBuildInitialValue:
    """Tests for GridBuilder.build_initial_value."""

    def test_steady_state_utility(self, params, config):
        z, _, _, _ = GridBuilder.build_productivity_grid(config, params)
        v0 = GridBuilder.build_initial_value(params, z, config.n_capital).numpy()

        assert v0.shape == (config.n_capital, config.n_productivity)
        z_np = z.numpy()
        k_ss = _kss(params, z_np)
        c_ss = z_np * k_ss ** params.alpha - params.delta * k_ss
        expected = c_ss ** (1.0 - params.eta) / (1.0 - params.eta)
        for i in range(config.n_capital):
            np.testing.assert_allclose(v0[i], expected, rtol=1e-10)

    def test_matches_steady_state_calculator(self, params):
        z = tf.constant([0.9, 1.0, 1.1], tf.float64)
        c_ss = SteadyStateCalculator.calculate_consumption(params, z).numpy()
        assert np.all(c_ss > 0)

    def test_non_positive_consumption(self, params_factory):
        """Guard fires when steady-state consumption is not positive.

        With beta > 1 the validated record cannot exist, so the field is
        overwritten after construction to reach the guard.
        """
        params = params_factory(delta=0.5)
        object.__setattr__(params, "beta", 1.6)
        z = tf.constant([0.9, 1.1], tf.float64)
        with pytest.raises(NonPositiveConsumption):
            GridBuilder.build_initial_value(params, z, 5)
