"""
S3 bucket storage package.

- :mod:`base`       — object store capability interfaces
- :mod:`s3_client`  — boto3 implementations of those capabilities
- :mod:`bucket`     — directory upload, bucket download, read/delete helpers
- :mod:`staging`    — config-driven download to / upload from the staging directory
- :mod:`exceptions` — bucket domain errors
"""
from .base import ListingPage, ObjectStoreClient, TransferManager
from .bucket import Bucket
from .exceptions import BucketError, NoFilesInBucketError, PathInspectionError
from .s3_client import S3Client, S3TransferManager
from .staging import download_site, staging_path, upload_site

__all__ = [
    'Bucket',
    'BucketError',
    'ListingPage',
    'NoFilesInBucketError',
    'ObjectStoreClient',
    'PathInspectionError',
    'S3Client',
    'S3TransferManager',
    'TransferManager',
    'download_site',
    'staging_path',
    'upload_site',
]
