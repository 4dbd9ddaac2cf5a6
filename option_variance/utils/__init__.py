"""Configuration and logging helpers."""
from .config_loader import load_config, setup_logging, DEFAULT_CONFIG

__all__ = ['load_config', 'setup_logging', 'DEFAULT_CONFIG']
