"""Morpho Blue rate model: curve parameters and the AdaptiveCurveIRM."""

from .config import (
    TARGET_UTILIZATION,
    CURVE_STEEPNESS,
    MIN_RATE_AT_TARGET,
    MAX_RATE_AT_TARGET,
    INITIAL_RATE_AT_TARGET,
)
from .irm import AdaptiveCurveIRM

__all__ = [
    "TARGET_UTILIZATION",
    "CURVE_STEEPNESS",
    "MIN_RATE_AT_TARGET",
    "MAX_RATE_AT_TARGET",
    "INITIAL_RATE_AT_TARGET",
    "AdaptiveCurveIRM",
]
