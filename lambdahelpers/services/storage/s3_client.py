"""
boto3 bindings for the object store capabilities.

Both classes wrap an already configured ``boto3`` S3 client; credentials,
region and retry policy are the client's concern.
"""
from typing import Any, BinaryIO, Dict, Optional

from boto3.s3.transfer import TransferConfig

from .base import ListingPage, ObjectStoreClient, TransferManager
from ...utils.logger import get_logger

log = get_logger(__name__)


class S3Client(ObjectStoreClient):
    """Object store client backed by the S3 API.

    Args:
        s3_client: boto3 S3 client
        waiter_config: Optional ``WaiterConfig`` (``Delay``/``MaxAttempts``)
            for the object-not-exists waiter
    """

    def __init__(self, s3_client: Any, waiter_config: Optional[Dict[str, int]] = None):
        self.s3_client = s3_client
        self.waiter_config = waiter_config

    def list_page(self, bucket, continuation_token=None):
        kwargs = {"Bucket": bucket}
        if continuation_token:
            kwargs["ContinuationToken"] = continuation_token

        response = self.s3_client.list_objects_v2(**kwargs)

        keys = tuple(obj["Key"] for obj in response.get("Contents", []))
        truncated = bool(response.get("IsTruncated", False))
        next_token = response.get("NextContinuationToken") if truncated else None

        log.with_fields(bucket=bucket, truncated=truncated).debug("Listed %d object(s)", len(keys))
        return ListingPage(keys=keys, truncated=truncated, next_token=next_token)

    def get_object(self, bucket, key):
        response = self.s3_client.get_object(Bucket=bucket, Key=key)
        body = response["Body"]
        try:
            return body.read()
        finally:
            body.close()

    def delete_object(self, bucket, key):
        self.s3_client.delete_object(Bucket=bucket, Key=key)

    def wait_until_absent(self, bucket, key):
        waiter = self.s3_client.get_waiter("object_not_exists")
        kwargs = {"Bucket": bucket, "Key": key}
        if self.waiter_config:
            kwargs["WaiterConfig"] = self.waiter_config
        waiter.wait(**kwargs)


class S3TransferManager(TransferManager):
    """Managed (multipart-capable) transfers through boto3's transfer layer.

    Args:
        s3_client: boto3 S3 client
        transfer_config: Optional :class:`boto3.s3.transfer.TransferConfig`
    """

    def __init__(self, s3_client: Any, transfer_config: Optional[TransferConfig] = None):
        self.s3_client = s3_client
        self.transfer_config = transfer_config or TransferConfig()

    def upload(self, bucket: str, key: str, fileobj: BinaryIO, content_type: str) -> None:
        self.s3_client.upload_fileobj(
            fileobj,
            bucket,
            key,
            ExtraArgs={"ContentType": content_type},
            Config=self.transfer_config,
        )

    def download(self, bucket: str, key: str, fileobj: BinaryIO) -> int:
        start = fileobj.tell()
        self.s3_client.download_fileobj(bucket, key, fileobj, Config=self.transfer_config)
        return fileobj.tell() - start
