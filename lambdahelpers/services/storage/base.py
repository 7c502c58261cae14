"""
Object store capabilities the bucket helpers depend on.

Two small interfaces are enough for every bucket operation:

- :class:`ObjectStoreClient` — listing, whole-object reads, deletes and
  waiting for a delete to become visible
- :class:`TransferManager` — streamed upload and download of object bytes

Concrete boto3 bindings live in :mod:`.s3_client`; tests supply mocks.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO, Optional, Tuple


@dataclass(frozen=True)
class ListingPage:
    """One page of a bucket listing.

    Attributes:
        keys: Object keys in the order the store returned them
        truncated: True when more pages remain
        next_token: Continuation token for the next page, if any
    """

    keys: Tuple[str, ...] = ()
    truncated: bool = False
    next_token: Optional[str] = None


class ObjectStoreClient(ABC):
    """Metadata and small-object operations against an object store."""

    @abstractmethod
    def list_page(self, bucket: str, continuation_token: Optional[str] = None) -> ListingPage:
        """Return one page of the bucket listing starting at *continuation_token*."""

    @abstractmethod
    def get_object(self, bucket: str, key: str) -> bytes:
        """Return the full content of an object."""

    @abstractmethod
    def delete_object(self, bucket: str, key: str) -> None:
        """Issue a delete request for an object."""

    @abstractmethod
    def wait_until_absent(self, bucket: str, key: str) -> None:
        """Block until the store reports the object no longer exists."""


class TransferManager(ABC):
    """Streamed transfers of object bytes."""

    @abstractmethod
    def upload(self, bucket: str, key: str, fileobj: BinaryIO, content_type: str) -> None:
        """Upload the readable binary stream *fileobj* to *key*."""

    @abstractmethod
    def download(self, bucket: str, key: str, fileobj: BinaryIO) -> int:
        """Download *key* into the writable binary stream and return the byte count."""
