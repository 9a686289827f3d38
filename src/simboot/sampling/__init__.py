"""Inverse-transform and rejection samplers driven by a UniformSource."""

from .inverse_cdf import InverseCDFSampler, cmf_table, invert_cdf, scan_cmf
from .rejection import RejectionSampler

__all__ = [
    "InverseCDFSampler",
    "RejectionSampler",
    "cmf_table",
    "invert_cdf",
    "scan_cmf",
]
