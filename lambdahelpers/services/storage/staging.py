"""
Staging directory helpers.

A site build pulls the whole bucket into the configured ``staging_dir``
(creating each of ``extra_dirs`` under it), runs a generator there, then
pushes one sub-directory of the staging tree back to a bucket.
"""
import os
from typing import Any, Dict, Optional

from .bucket import Bucket
from ...utils.config_loader import ConfigLoader


def _config(config: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return config if config is not None else ConfigLoader.load_config_json()


def staging_path(config: Optional[Dict[str, Any]] = None, subdir: str = "") -> str:
    """Return *subdir* inside the configured staging directory."""
    return os.path.join(_config(config)["staging_dir"], subdir)


def download_site(bucket: Bucket, config: Optional[Dict[str, Any]] = None) -> int:
    """Download every object of *bucket* into ``staging_dir``.

    Each entry of ``extra_dirs`` is created under ``staging_dir`` even when
    the bucket has nothing in it.

    Returns:
        Number of objects downloaded
    """
    config = _config(config)
    return bucket.download_all_objects_in_bucket(config["staging_dir"], *config["extra_dirs"])


def upload_site(bucket: Bucket, subdir: str, config: Optional[Dict[str, Any]] = None,
                key_prefix: str = "") -> int:
    """Upload ``staging_dir/subdir`` to *bucket*.

    Keys are relative to ``staging_dir/subdir``, e.g. ``public/index.html``
    is uploaded as ``index.html`` when *subdir* is ``public``.

    Returns:
        Number of files uploaded
    """
    return bucket.upload(staging_path(config, subdir), key_prefix)
