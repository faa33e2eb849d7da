"""Configuration module -- exports Settings and load_config."""

from yodo.config.loader import load_config
from yodo.config.settings import Settings

__all__ = ["Settings", "load_config"]
