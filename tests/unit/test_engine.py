"""Unit tests for VFIEngine and the StochasticGrowthVFI orchestrator."""

from __future__ import annotations

import numpy as np
import tensorflow as tf

tf.config.set_visible_devices([], 'GPU')

import pytest

from growth_vfi.core.errors import (
    ConvergenceFailure,
    InfeasibleGrid,
    InvalidConfiguration,
    InvalidParameter,
)
from growth_vfi.vfi.engine import VFIEngine, VFIResult
from growth_vfi.vfi.growth import StochasticGrowthVFI
from growth_vfi.vfi.maximizers import (
    BinarySearchMaximizer,
    GridSearchMaximizer,
    build_maximizer,
)
from growth_vfi.vfi.protocols import Maximizer


def _solver(params, config_factory, **overrides):
    return StochasticGrowthVFI(params, config_factory(**overrides))


class TestVFIEngineStep:
    """Single Bellman steps."""

    def test_howard_idempotent_on_maximizing_policy(self, params, config_factory,
                                                    concave_value):
        """A Howard step at the maximizing policy reproduces the maximized V."""
        solver = _solver(params, config_factory, n_capital=40, n_productivity=5)
        engine = solver.engine
        v0 = tf.constant(
            concave_value(solver.k_grid.numpy(), solver.n_productivity)
        )

        v_max, policy = engine.step(v0)
        v_howard, policy_howard = engine.step(v0, policy, howard=True)

        np.testing.assert_allclose(v_howard.numpy(), v_max.numpy(), rtol=1e-12)
        np.testing.assert_array_equal(policy_howard.numpy(), policy.numpy())

    def test_howard_without_policy_raises(self, params, config_factory):
        solver = _solver(params, config_factory)
        with pytest.raises(InvalidConfiguration):
            solver.engine.step(solver.initial_value(), None, howard=True)

    def test_step_reads_snapshot_only(self, params, config_factory):
        """The input iterate is not modified by a step."""
        solver = _solver(params, config_factory)
        v0 = solver.initial_value()
        before = v0.numpy().copy()
        solver.engine.step(v0)
        np.testing.assert_array_equal(v0.numpy(), before)

    def test_grid_and_binary_steps_agree(self, params, config_factory):
        grid = _solver(params, config_factory, n_capital=50, maximization="grid")
        binary = _solver(params, config_factory, n_capital=50, maximization="binary")
        v0 = grid.initial_value()
        v_g, idx_g = grid.engine.step(v0)
        v_b, idx_b = binary.engine.step(v0)
        np.testing.assert_array_equal(idx_b.numpy(), idx_g.numpy())
        np.testing.assert_allclose(v_b.numpy(), v_g.numpy(), rtol=1e-12)


class TestVFIEnginePreconditions:
    """Construction and input checks of the engine."""

    def test_injected_binary_maximizer_with_howard(self, params, config_factory):
        """Binary search cannot be slipped past the config check."""
        solver = _solver(params, config_factory)
        config = config_factory(howard_steps=5)
        with pytest.raises(InvalidConfiguration):
            VFIEngine(
                params, config, solver.k_grid, solver.z_grid, solver.P,
                maximizer=BinarySearchMaximizer(),
            )

    def test_injected_grid_maximizer_with_howard(self, params, config_factory):
        solver = _solver(params, config_factory)
        config = config_factory(howard_steps=5)
        engine = VFIEngine(
            params, config, solver.k_grid, solver.z_grid, solver.P,
            maximizer=GridSearchMaximizer(),
        )
        assert not engine.maximizer.requires_concavity

    def test_step_rejects_foreign_precision(self, params, config_factory):
        solver = _solver(params, config_factory)
        v0 = tf.cast(solver.initial_value(), tf.float32)
        with pytest.raises(ValueError, match="float32"):
            solver.engine.step(v0)
        with pytest.raises(ValueError, match="float32"):
            solver.engine.run_vfi(v0)

    def test_grid_rejects_foreign_precision(self, params, config_factory):
        solver = _solver(params, config_factory)
        with pytest.raises(ValueError, match="k_grid"):
            VFIEngine(
                params, solver.config, tf.cast(solver.k_grid, tf.float32),
                solver.z_grid, solver.P,
            )


class TestVFIEngineRun:
    """Fixed-point loop and stopping rule."""

    def test_shape_mismatch(self, params, config_factory):
        solver = _solver(params, config_factory)
        with pytest.raises(ValueError):
            solver.engine.run_vfi(tf.zeros((3, 3), tf.float64))

    def test_budget_exhaustion_is_status(self, params, config_factory):
        solver = _solver(params, config_factory, max_iter_vfi=3)
        result = solver.solve_result()
        assert isinstance(result, VFIResult)
        assert not result.converged
        assert result.iterations == 3
        assert len(result.distance_history) == 3
        with pytest.raises(ConvergenceFailure):
            result.raise_for_status()

    def test_converged_status(self, params, config_factory):
        solver = _solver(params, config_factory, n_capital=15, tol_vfi=1e-5)
        result = solver.solve_result()
        assert result.converged
        assert result.distance < 1e-5
        assert result.maximizing_steps[-1]
        assert result.raise_for_status() is result

    def test_howard_cadence_recorded(self, params, config_factory):
        config = config_factory(howard_steps=2, howard_warmup=3, max_iter_vfi=10)
        solver = StochasticGrowthVFI(params, config)
        result = solver.solve_result()
        expected = [config.is_maximizing_step(t) for t in range(10)]
        assert result.maximizing_steps == expected

    def test_custom_maximizer(self, params, config_factory):
        """Any object with a matching maximize() plugs into the engine."""
        calls = []

        class RecordingMaximizer(GridSearchMaximizer):
            def maximize(self, *args):
                calls.append(1)
                return super().maximize(*args)

        solver = _solver(params, config_factory, max_iter_vfi=4)
        engine = VFIEngine(
            params, solver.config, solver.k_grid, solver.z_grid, solver.P,
            maximizer=RecordingMaximizer(),
        )
        engine.run_vfi(solver.initial_value())
        assert len(calls) == 4


class TestBuildMaximizer:
    """Tests for build_maximizer."""

    def test_binary(self, config_factory):
        maximizer = build_maximizer(config_factory(maximization="b"))
        assert isinstance(maximizer, BinarySearchMaximizer)
        assert isinstance(maximizer, Maximizer)

    def test_grid_explicit_chunk(self, config_factory):
        maximizer = build_maximizer(config_factory(kp_chunk_size=5))
        assert isinstance(maximizer, GridSearchMaximizer)
        assert maximizer.kp_chunk_size == 5

    def test_grid_chunk_from_budget(self, config_factory):
        maximizer = build_maximizer(config_factory(n_capital=30))
        assert maximizer.kp_chunk_size == 30


class TestStochasticGrowthVFI:
    """Construction of the orchestrator."""

    @pytest.mark.parametrize("bounds", [(2.0, 1.0), (0.0, 1.0)])
    def test_invalid_bounds(self, params, config, bounds):
        with pytest.raises(InvalidParameter):
            StochasticGrowthVFI(params, config, k_bounds=bounds)

    def test_infeasible_grid(self, params, config):
        """A grid starting far above the steady state is unaffordable."""
        with pytest.raises(InfeasibleGrid):
            StochasticGrowthVFI(params, config, k_bounds=(50.0, 60.0))

    def test_float32_precision(self, params, config_factory):
        solver = _solver(params, config_factory, precision="float32", max_iter_vfi=5)
        assert solver.k_grid.dtype == tf.float32
        result = solver.solve_result()
        assert result.value.dtype == tf.float32
        assert result.policy_idx.dtype == tf.int32

    def test_tiled_solve_matches_single_pass(self, params, config_factory):
        single = _solver(params, config_factory, max_iter_vfi=20)
        tiled = _solver(params, config_factory, max_iter_vfi=20, kp_chunk_size=6)
        r_single = single.solve_result()
        r_tiled = tiled.solve_result()
        np.testing.assert_array_equal(
            r_tiled.policy_idx.numpy(), r_single.policy_idx.numpy()
        )
        np.testing.assert_allclose(
            r_tiled.value.numpy(), r_single.value.numpy(), rtol=1e-12
        )
