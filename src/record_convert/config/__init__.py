"""Configuration management helpers."""

from .loader import load_config
from .schema import AppConfig, ConvertDefaults

__all__ = ["AppConfig", "ConvertDefaults", "load_config"]
