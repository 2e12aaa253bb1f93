"""Protocol-specific rate models used by the market state simulator.

Currently supported:
- Morpho Blue AdaptiveCurveIRM (src.protocols.morpho)
"""
