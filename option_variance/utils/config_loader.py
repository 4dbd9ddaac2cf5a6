"""
Configuration loader utility.
"""
import copy
import logging
import os
from typing import Dict

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    'market': {
        'underlying_price': 5000.0,
        'underlying_volatility': 0.20,
        'risk_free_rate': 0.05
    },
    'logging': {
        'level': 'INFO',
        'file': None
    },
    'reporting': {
        'export_path': 'data/reports/'
    }
}


def _merge(base: Dict, override: Dict) -> Dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if value is None and key in merged:
            continue
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: str = 'config/config.yaml') -> Dict:
    """
    Load configuration from YAML file.

    Sections missing from the file take their values from DEFAULT_CONFIG.

    Args:
        config_path: Path to config file

    Returns:
        Configuration dictionary
    """
    try:
        with open(config_path, 'r') as f:
            loaded = yaml.safe_load(f) or {}
        logger.info(f"Loaded configuration from {config_path}")
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Error loading config {config_path}: {e}, using defaults")
        loaded = {}

    if not isinstance(loaded, dict):
        logger.error(f"Config {config_path} is not a mapping, using defaults")
        loaded = {}

    return _merge(DEFAULT_CONFIG, loaded)


def setup_logging(log_level: str = 'INFO', log_file: str = None):
    """
    Setup logging configuration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path, its directory is created if needed
    """
    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    handlers = [logging.StreamHandler()]

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=log_format,
        handlers=handlers,
        force=True
    )

    logger.debug(f"Logging configured at {log_level} level")
