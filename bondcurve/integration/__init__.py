"""
Configuration loading for linear bonding curves
"""

from .config import ConfigError, CurveConfig, load_curve_configs, parse_curve_configs

__all__ = [
    "ConfigError",
    "CurveConfig",
    "load_curve_configs",
    "parse_curve_configs",
]
