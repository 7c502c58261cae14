"""Shared utilities: logging, configuration, file and AWS helpers."""
from .logger import get_logger, setup_logging
from .config_loader import ConfigLoader, DEFAULT_CONFIG
from .file_utils import ensure_dir, key_from_path, path_from_key

__all__ = [
    'get_logger',
    'setup_logging',
    'ConfigLoader',
    'DEFAULT_CONFIG',
    'ensure_dir',
    'key_from_path',
    'path_from_key',
]
