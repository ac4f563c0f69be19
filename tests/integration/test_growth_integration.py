"""Integration test: growth model VFI solve on the reference calibration.

Verifies end-to-end convergence, policy monotonicity, the contraction
of the sup-norm distance, agreement between the two maximizers and
Howard improvement, and the result dict contract.
Runs on CPU — no GPU required.
"""

from __future__ import annotations

import numpy as np
import tensorflow as tf

tf.config.set_visible_devices([], 'GPU')

import pytest

from growth_vfi.config.economic_params import GrowthParams
from growth_vfi.config.vfi_config import GridConfig
from growth_vfi.io.artifacts import load_vfi_results, save_vfi_results
from growth_vfi.io.report import format_solution_table
from growth_vfi.vfi.growth import StochasticGrowthVFI

MAX_ITER = 2000


def _make_params():
    return GrowthParams(
        eta=2.0,
        beta=0.95,
        alpha=0.33,
        delta=0.1,
        mu=0.0,
        rho=0.9,
        sigma=0.02,
    )


def _make_config(**overrides):
    settings = dict(
        n_capital=100,
        n_productivity=11,
        tauchen_width=3.0,
        tol_vfi=1e-6,
        max_iter_vfi=MAX_ITER,
    )
    settings.update(overrides)
    return GridConfig(**settings)


@pytest.fixture(scope="module")
def grid_solution():
    """Solve with exhaustive search once and share across tests."""
    return StochasticGrowthVFI(_make_params(), _make_config()).solve()


@pytest.fixture(scope="module")
def binary_solution():
    config = _make_config(maximization="binary")
    return StochasticGrowthVFI(_make_params(), config).solve()


@pytest.fixture(scope="module")
def howard_solution():
    config = _make_config(howard_steps=10)
    return StochasticGrowthVFI(_make_params(), config).solve()


class TestGrowthIntegration:
    """End-to-end tests for StochasticGrowthVFI.solve()."""

    def test_result_keys(self, grid_solution):
        required = {
            "V", "policy_idx", "policy_k_values",
            "V_flat", "policy_idx_flat", "policy_k_flat",
            "K", "Z", "transition_matrix", "transition_flat",
            "converged", "iterations", "distance", "distance_history",
            "maximizing_steps", "solve_seconds", "k_min", "k_max",
        }
        assert required <= set(grid_solution)

    def test_converges_within_budget(self, grid_solution):
        assert grid_solution["converged"]
        assert grid_solution["iterations"] < MAX_ITER
        assert grid_solution["distance"] < 1e-6

    def test_shapes(self, grid_solution):
        assert grid_solution["V"].shape == (100, 11)
        assert grid_solution["policy_idx"].shape == (100, 11)
        assert grid_solution["K"].shape == (100,)
        assert grid_solution["Z"].shape == (11,)
        assert grid_solution["V_flat"].shape == (1100,)
        assert grid_solution["transition_flat"].shape == (121,)

    def test_policy_valid_and_monotone(self, grid_solution):
        """K'(K, z) is a valid index and non-decreasing in K."""
        idx = grid_solution["policy_idx"]
        assert np.all(idx >= 0)
        assert np.all(idx < 100)
        assert np.all(np.diff(idx, axis=0) >= 0)

    def test_value_increasing_in_capital(self, grid_solution):
        assert np.all(np.diff(grid_solution["V"], axis=0) > 0)

    def test_policy_values_consistent(self, grid_solution):
        np.testing.assert_allclose(
            grid_solution["policy_k_values"],
            grid_solution["K"][grid_solution["policy_idx"]],
        )

    def test_consumption_positive(self, grid_solution):
        K, Z = grid_solution["K"], grid_solution["Z"]
        y = Z[None, :] * K[:, None] ** 0.33 + 0.9 * K[:, None]
        assert np.all(y - grid_solution["policy_k_values"] > 0)

    def test_distance_contracts(self, grid_solution):
        """Sup-norm distance is non-increasing after the first iterations."""
        dist = np.asarray(grid_solution["distance_history"])
        assert all(grid_solution["maximizing_steps"])
        assert np.all(np.diff(dist[5:]) <= 1e-12)

    def test_transition_rows(self, grid_solution):
        np.testing.assert_allclose(
            grid_solution["transition_matrix"].sum(axis=1), 1.0, atol=1e-9
        )

    def test_flat_layout(self, grid_solution):
        V, V_flat = grid_solution["V"], grid_solution["V_flat"]
        nk = V.shape[0]
        for i, j in [(0, 0), (5, 3), (99, 10), (42, 7)]:
            assert V_flat[i + j * nk] == V[i, j]


class TestMaximizerAgreement:
    """Binary search and Howard improvement reach the same fixed point."""

    def test_binary_matches_grid(self, grid_solution, binary_solution):
        assert binary_solution["converged"]
        np.testing.assert_allclose(
            binary_solution["V"], grid_solution["V"], atol=1e-5
        )
        diff = np.abs(binary_solution["policy_idx"] - grid_solution["policy_idx"])
        assert diff.max() <= 1

    def test_howard_matches_grid(self, grid_solution, howard_solution):
        assert howard_solution["converged"]
        np.testing.assert_allclose(
            howard_solution["V"], grid_solution["V"], atol=1e-4
        )
        diff = np.abs(howard_solution["policy_idx"] - grid_solution["policy_idx"])
        assert diff.max() <= 1

    def test_howard_maximizes_less(self, grid_solution, howard_solution):
        assert sum(howard_solution["maximizing_steps"]) < sum(
            grid_solution["maximizing_steps"]
        )
        assert howard_solution["maximizing_steps"][-1]


class TestPersistence:
    """Save → load → report on a real solution."""

    def test_round_trip(self, grid_solution, tmp_path):
        path = str(tmp_path / "results.npz")
        save_vfi_results(grid_solution, path)
        loaded = load_vfi_results(path)

        np.testing.assert_array_equal(loaded["V"], grid_solution["V"])
        np.testing.assert_array_equal(loaded["policy_idx"], grid_solution["policy_idx"])
        assert bool(loaded["converged"])
        assert format_solution_table(loaded) == format_solution_table(grid_solution)
