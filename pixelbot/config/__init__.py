"""Configuration module for pixelbot."""

from pixelbot.config.loader import get_config_path, load_config
from pixelbot.config.schema import Config

__all__ = ["Config", "load_config", "get_config_path"]
