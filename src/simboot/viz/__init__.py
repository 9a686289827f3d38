"""Visualization utilities for sampler and bootstrap diagnostics."""

from .sample_plots import plot_replicate_distribution, plot_sample_density

__all__ = ["plot_replicate_distribution", "plot_sample_density"]
