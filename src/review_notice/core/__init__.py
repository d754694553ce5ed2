"""
Core utilities for Review Notice.
"""

from .config import AppConfig, get_config, reload_config

__all__ = ["AppConfig", "get_config", "reload_config"]
