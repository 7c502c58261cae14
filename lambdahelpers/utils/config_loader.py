"""
Configuration loader for JSON files
"""
import copy
import os
import json
from pathlib import Path
from typing import Optional, Dict, Any

from .logger import get_logger

log = get_logger(__name__)

CONFIG_ENV_VAR = "LAMBDAHELPERS_CONFIG"

# Values used when no config.json exists or a key is missing from it.
DEFAULT_CONFIG: Dict[str, Any] = {
    "aws_profile": "",
    "aws_region": "eu-west-1",
    "bucket_name": "",
    "staging_dir": "/tmp/site/",
    "extra_dirs": ["public"],
    "post_key_prefix": "/content/post/",
    "post_key_suffix": ".md",
    "default_content_type": "text/html",
    "content_types": {".css": "text/css"},
    "dir_mode": 0o777,
    "mail_subject": "S3Reader Raw",
    "mail_charset": "UTF-8",
    "mail_sender": "",
    "transfer_multipart_threshold": 8 * 1024 * 1024,
    "transfer_max_concurrency": 10,
}


class ConfigLoader:
    """Handles loading and saving configuration files."""

    @staticmethod
    def get_config_path(path: Optional[str] = None) -> str:
        """
        Get full path to the configuration file.

        Resolution order: explicit *path*, the ``LAMBDAHELPERS_CONFIG``
        environment variable, then ``config.json`` in the working directory.

        Args:
            path: Optional explicit path

        Returns:
            Full path to config file
        """
        if path:
            return str(path)

        env_path = os.environ.get(CONFIG_ENV_VAR, "").strip()
        if env_path:
            return env_path

        return str(Path.cwd() / "config.json")

    @staticmethod
    def load_config_json(path: Optional[str] = None) -> Dict[str, Any]:
        """
        Load the config.json file merged over the defaults.

        A missing file is not an error: the defaults are returned as-is.

        Args:
            path: Optional explicit path to the config file

        Returns:
            Configuration dictionary with defaults

        Raises:
            ValueError: The file exists but is not a JSON object
        """
        config = copy.deepcopy(DEFAULT_CONFIG)
        config_path = ConfigLoader.get_config_path(path)

        if not os.path.exists(config_path):
            log.debug("No config file at %s, using defaults", config_path)
            return config

        try:
            with open(config_path, 'r') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            log.error("Invalid JSON in %s: %s", config_path, e)
            raise ValueError(f"Invalid JSON in config file {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Config file {config_path} must contain a JSON object")

        unknown = sorted(set(data) - set(DEFAULT_CONFIG))
        if unknown:
            log.warning("Ignoring unknown config key(s): %s", ", ".join(unknown))

        for key, value in data.items():
            if key in DEFAULT_CONFIG:
                config[key] = value

        log.debug("Loaded config from %s", config_path)
        return config

    @staticmethod
    def save_config_json(config: Dict[str, Any], path: Optional[str] = None) -> str:
        """
        Save configuration to disk.

        Args:
            config: Configuration dictionary
            path: Optional explicit path to the config file

        Returns:
            Path the configuration was written to
        """
        config_path = Path(ConfigLoader.get_config_path(path))
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, 'w') as f:
            json.dump(config, f, indent=2)

        log.info("Saved config to %s", config_path)
        return str(config_path)


def get_content_types(config: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """Extract the extension to content-type mapping with normalized keys.

    Example:
        >>> get_content_types({'content_types': {'CSS': 'text/css'}})
        {'.css': 'text/css'}
        >>> get_content_types(None)
        {'.css': 'text/css'}
    """
    mapping = (config or {}).get('content_types') or DEFAULT_CONFIG['content_types']
    normalized = {}
    for ext, content_type in mapping.items():
        ext = ext.strip().lower()
        if not ext.startswith('.'):
            ext = f".{ext}"
        normalized[ext] = content_type
    return normalized
