"""AWS utilities sub-package.

Contains boto3 session creation and factories that build the bucket and
notifier helpers from configuration.
"""
from .aws_utils import (
    build_bucket,
    build_client,
    build_mailer,
    build_sms,
    create_boto3_session,
)

__all__ = [
    'build_bucket',
    'build_client',
    'build_mailer',
    'build_sms',
    'create_boto3_session',
]
