"""AWS utilities for session and client creation.

Credentials are resolved by boto3's default chain (environment, shared
config, instance/Lambda role); these helpers only pick the profile and
region and wire clients into the service classes.
"""
import copy
from typing import Any, Dict, Optional

import boto3
from boto3.s3.transfer import TransferConfig
from botocore.config import Config as BotoConfig

from ..config_loader import ConfigLoader, DEFAULT_CONFIG, get_content_types
from ..logger import get_logger

log = get_logger(__name__)

_RETRY_CONFIG = {"max_attempts": 3, "mode": "standard"}


def create_boto3_session(
    profile_name: Optional[str] = None,
    region_name: Optional[str] = None
):
    """Create a boto3 session.

    Args:
        profile_name: Optional AWS profile name; empty means the default chain
        region_name: Optional AWS region

    Returns:
        boto3.Session object

    Example:
        >>> session = create_boto3_session('site-publisher', 'eu-west-1')
        >>> s3 = session.client('s3')
    """
    return boto3.Session(profile_name=profile_name or None, region_name=region_name or None)


def build_client(service_name: str, session=None, region_name: Optional[str] = None) -> Any:
    """Return a boto3 client for *service_name* with standard retries.

    Args:
        service_name: e.g. ``s3``, ``ses``, ``sns``
        session: Optional boto3 session (a default session is created otherwise)
        region_name: Optional region override
    """
    session = session or create_boto3_session(region_name=region_name)
    config = BotoConfig(region_name=region_name or session.region_name, retries=_RETRY_CONFIG)
    log.with_fields(service=service_name, region=config.region_name).debug("Creating client")
    return session.client(service_name, config=config)


def _resolve(config: Optional[Dict[str, Any]], session):
    if config is None:
        config = ConfigLoader.load_config_json()
    else:
        config = {**copy.deepcopy(DEFAULT_CONFIG), **config}
    if session is None:
        session = create_boto3_session(config.get("aws_profile"), config.get("aws_region"))
    return config, session


def build_bucket(config: Optional[Dict[str, Any]] = None, session=None, bucket_name: Optional[str] = None):
    """Build a :class:`~lambdahelpers.services.storage.Bucket` from configuration.

    Args:
        config: Configuration dictionary (loaded from config.json if omitted)
        session: Optional boto3 session
        bucket_name: Overrides ``bucket_name`` from the configuration

    Returns:
        Bucket instance

    Raises:
        ValueError: No bucket name configured
    """
    from ...services.storage import Bucket, S3Client, S3TransferManager

    config, session = _resolve(config, session)
    name = bucket_name or config.get("bucket_name", "")
    if not name:
        raise ValueError("bucket_name is not configured")

    s3 = build_client("s3", session, config.get("aws_region"))
    transfer_config = TransferConfig(
        multipart_threshold=config["transfer_multipart_threshold"],
        max_concurrency=config["transfer_max_concurrency"],
    )

    return Bucket(
        client=S3Client(s3),
        transfer_manager=S3TransferManager(s3, transfer_config),
        name=name,
        post_key_prefix=config["post_key_prefix"],
        post_key_suffix=config["post_key_suffix"],
        content_types=get_content_types(config),
        default_content_type=config["default_content_type"],
        dir_mode=config["dir_mode"],
    )


def build_mailer(config: Optional[Dict[str, Any]] = None, session=None):
    """Build an SES :class:`~lambdahelpers.services.notifications.Mailer`."""
    from ...services.notifications import Mailer

    config, session = _resolve(config, session)
    return Mailer(
        build_client("ses", session, config.get("aws_region")),
        subject=config["mail_subject"],
        charset=config["mail_charset"],
        sender=config["mail_sender"],
    )


def build_sms(config: Optional[Dict[str, Any]] = None, session=None):
    """Build an SNS :class:`~lambdahelpers.services.notifications.SMS`."""
    from ...services.notifications import SMS

    config, session = _resolve(config, session)
    return SMS(build_client("sns", session, config.get("aws_region")))
