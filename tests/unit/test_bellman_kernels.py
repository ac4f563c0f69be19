"""Unit tests for bellman_kernels: EV, objective, Howard update, sup-norm."""

from __future__ import annotations

import numpy as np
import tensorflow as tf

tf.config.set_visible_devices([], 'GPU')

import pytest

from growth_vfi.vfi.kernels.bellman_kernels import (
    compute_ev,
    compute_ev_core,
    crra_core,
    evaluate_choice,
    howard_update,
    sup_norm_diff,
)


def _setup(nk=6, nz=3, seed=0):
    rng = np.random.default_rng(seed)
    k_grid = np.linspace(1.0, 3.0, nk)
    resources = rng.uniform(3.5, 5.0, size=(nk, nz))
    v = rng.normal(size=(nk, nz))
    p = rng.uniform(size=(nz, nz))
    p /= p.sum(axis=1, keepdims=True)
    kp_idx = rng.integers(0, nk, size=(nk, nz)).astype(np.int32)
    return k_grid, resources, v, p, kp_idx


class TestComputeEv:
    """Tests for compute_ev."""

    def test_matches_numpy(self):
        _, _, v, p, _ = _setup()
        ev = compute_ev(tf.constant(v), tf.constant(p), tf.constant(0.95, tf.float64))
        np.testing.assert_allclose(ev.numpy(), 0.95 * v @ p.T, rtol=1e-12)

    def test_core_matches_compiled(self):
        _, _, v, p, _ = _setup(seed=1)
        args = (tf.constant(v), tf.constant(p), tf.constant(0.9, tf.float64))
        np.testing.assert_allclose(
            compute_ev_core(*args).numpy(), compute_ev(*args).numpy(), rtol=1e-12
        )


class TestCrra:
    """Tests for crra_core."""

    def test_values(self):
        c = tf.constant([0.5, 1.0, 2.0], tf.float64)
        eta = tf.constant(2.0, tf.float64)
        np.testing.assert_allclose(crra_core(c, eta).numpy(), [-2.0, -1.0, -0.5])

    def test_eta_below_one(self):
        c = tf.constant([4.0], tf.float64)
        eta = tf.constant(0.5, tf.float64)
        np.testing.assert_allclose(crra_core(c, eta).numpy(), [4.0])


class TestEvaluateChoice:
    """Tests for evaluate_choice."""

    def test_matches_loop(self):
        k_grid, resources, v, p, kp_idx = _setup()
        beta, eta = 0.95, 2.0
        ev = beta * v @ p.T

        result = evaluate_choice(
            tf.constant(kp_idx),
            tf.constant(resources),
            tf.constant(k_grid),
            tf.constant(ev),
            tf.constant(eta, tf.float64),
        ).numpy()

        nk, nz = resources.shape
        expected = np.empty((nk, nz))
        for i in range(nk):
            for j in range(nz):
                c = resources[i, j] - k_grid[kp_idx[i, j]]
                expected[i, j] = c ** (1 - eta) / (1 - eta) + ev[kp_idx[i, j], j]
        np.testing.assert_allclose(result, expected, rtol=1e-12)


class TestHowardUpdate:
    """Tests for howard_update."""

    def test_equals_objective_at_policy(self):
        k_grid, resources, v, p, kp_idx = _setup(seed=2)
        beta = tf.constant(0.95, tf.float64)
        eta = tf.constant(2.0, tf.float64)

        updated = howard_update(
            tf.constant(v), tf.constant(kp_idx), tf.constant(resources),
            tf.constant(k_grid), tf.constant(p), beta, eta,
        )
        ev = compute_ev(tf.constant(v), tf.constant(p), beta)
        expected = evaluate_choice(
            tf.constant(kp_idx), tf.constant(resources),
            tf.constant(k_grid), ev, eta,
        )
        np.testing.assert_allclose(updated.numpy(), expected.numpy(), rtol=1e-12)


class TestSupNormDiff:
    """Tests for sup_norm_diff."""

    def test_value(self):
        a = tf.constant([[1.0, 2.0], [3.0, 4.0]], tf.float64)
        b = tf.constant([[1.5, 2.0], [0.0, 4.25]], tf.float64)
        assert float(sup_norm_diff(a, b)) == pytest.approx(3.0)

    def test_zero_for_equal(self):
        a = tf.ones((4, 2), tf.float64)
        assert float(sup_norm_diff(a, a)) == 0.0
