"""Configuration module for the rebalancing engine."""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
