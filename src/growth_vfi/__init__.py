"""Value function iteration for the stochastic optimal growth model."""

__version__ = "0.1.0"
