"""Explicit, seeded random streams."""

from .uniform import RandomStream, UniformSource

__all__ = ["RandomStream", "UniformSource"]
