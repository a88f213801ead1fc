"""Configuration module for hqbridge."""

from hqbridge.config.loader import get_config_path, load_config
from hqbridge.config.schema import Config

__all__ = ["Config", "load_config", "get_config_path"]
