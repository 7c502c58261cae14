"""Errors raised by the bucket helpers.

Store access errors (botocore ``ClientError`` and friends) and local
``OSError``s are not wrapped; they reach the caller unchanged.
"""


class BucketError(Exception):
    """Base class for bucket domain errors."""


class NoFilesInBucketError(BucketError):
    """The bucket listing was empty, so there is nothing to process."""

    def __init__(self, bucket_name):
        self.bucket_name = bucket_name
        super().__init__(f"No files in bucket {bucket_name}")


class PathInspectionError(BucketError, OSError):
    """A local path could not be inspected while walking a directory tree."""

    def __init__(self, path, reason=None):
        self.path = path
        self.reason = reason
        message = f"Failed to inspect path {path}"
        if reason is not None:
            message = f"{message}: {reason}"
        super().__init__(message)
