"""
Utilities Module
Configuration and logging utilities
"""

from .config import load_config, create_default_config, validate_config, Config, DEFAULT_CONFIG
from .logger import setup_logger

__all__ = [
    'load_config',
    'create_default_config',
    'validate_config',
    'Config',
    'DEFAULT_CONFIG',
    'setup_logger'
]
