"""
Bucket synchronization helpers.

A :class:`Bucket` binds an object store client, a transfer manager and a
bucket name, and offers:

- directory tree upload (:meth:`Bucket.upload`)
- whole-bucket download into a local tree (:meth:`Bucket.download_all_objects_in_bucket`)
- "pop one pending item" reads (:meth:`Bucket.read_file`)
- delete with confirmation (:meth:`Bucket.delete_object`)
- writing a string body as a post object (:meth:`Bucket.upload_file`)

Every operation is synchronous and fails fast: the first error is logged and
re-raised, and side effects that already happened are not rolled back.
"""
import io
import os
import stat
from typing import Dict, Iterator, Optional, Tuple

from .base import ListingPage, ObjectStoreClient, TransferManager
from .exceptions import BucketError, NoFilesInBucketError, PathInspectionError
from ...utils.config_loader import DEFAULT_CONFIG
from ...utils.file_utils import ensure_dir, key_from_path, path_from_key
from ...utils.logger import get_logger

log = get_logger(__name__)

POST_CONTENT_TYPE = "text/markdown; charset=utf-8"


class Bucket:
    """A single S3 bucket and the capabilities used to reach it.

    Args:
        client: Listing/get/delete/wait capability
        transfer_manager: Upload/download capability
        name: Bucket name; fixed for the lifetime of the instance
        post_key_prefix: Key prefix used by :meth:`upload_file`
        post_key_suffix: Key suffix used by :meth:`upload_file`
        content_types: File extension to content type mapping for uploads
        default_content_type: Content type for unmapped extensions
        dir_mode: Permission bits for directories created by downloads
    """

    def __init__(
        self,
        client: ObjectStoreClient,
        transfer_manager: TransferManager,
        name: str,
        post_key_prefix: str = DEFAULT_CONFIG["post_key_prefix"],
        post_key_suffix: str = DEFAULT_CONFIG["post_key_suffix"],
        content_types: Optional[Dict[str, str]] = None,
        default_content_type: str = DEFAULT_CONFIG["default_content_type"],
        dir_mode: int = DEFAULT_CONFIG["dir_mode"],
    ):
        self.client = client
        self.transfer_manager = transfer_manager
        self._name = name
        self.post_key_prefix = post_key_prefix
        self.post_key_suffix = post_key_suffix
        self.content_types = dict(DEFAULT_CONFIG["content_types"] if content_types is None else content_types)
        self.default_content_type = default_content_type
        self.dir_mode = dir_mode
        self._log = log.with_fields(bucket=name)

    @property
    def name(self) -> str:
        return self._name

    def __repr__(self):
        return f"Bucket(name={self._name!r})"

    # ------------------------------------------------------------------
    # Single object helpers
    # ------------------------------------------------------------------

    def read_file(self) -> Tuple[str, str]:
        """Read the first object in the bucket.

        Only the first listing page is requested. The object returned is the
        first one in the store's listing order, which for S3 is ascending
        key order.

        The body is decoded as UTF-8 with ``surrogateescape``, so bytes that
        are not UTF-8 (e.g. 8-bit latin-1 parts of a raw email) never fail
        the read and ``body.encode("utf-8", "surrogateescape")`` gives back
        the exact object bytes.

        Returns:
            Tuple of (body, key)

        Raises:
            NoFilesInBucketError: The listing was empty
        """
        self._log.debug("Reading bucket")

        try:
            page = self.client.list_page(self._name)
        except Exception:
            self._log.error("Unable to query bucket")
            raise

        if not page.keys:
            raise NoFilesInBucketError(self._name)

        key = page.keys[0]
        flog = self._log.with_fields(key=key)
        flog.debug("Reading file")

        try:
            body = self.client.get_object(self._name, key)
        except Exception:
            flog.error("Failed to get the file")
            raise

        return body.decode("utf-8", errors="surrogateescape"), key

    def delete_object(self, key: str) -> None:
        """Delete *key* and block until the store confirms it is gone.

        Args:
            key: Object key
        """
        flog = self._log.with_fields(key=key)

        try:
            self.client.delete_object(self._name, key)
        except Exception:
            flog.error("Failed to delete")
            raise

        try:
            self.client.wait_until_absent(self._name, key)
        except Exception:
            flog.error("Failed to confirm deletion")
            raise

        flog.info("Successfully deleted")

    def upload_file(self, file_name: str, body: str) -> str:
        """Write a string body to the post object named *file_name*.

        The key is ``post_key_prefix + file_name + post_key_suffix``.

        Args:
            file_name: Post name
            body: Text content

        Returns:
            The key that was written
        """
        key = f"{self.post_key_prefix}{file_name}{self.post_key_suffix}"

        try:
            self.transfer_manager.upload(
                self._name, key, io.BytesIO(body.encode("utf-8")), POST_CONTENT_TYPE
            )
        except Exception:
            self._log.error("Failed to upload", extra={"fields": {"key": key}})
            raise

        self._log.info("Uploaded post", extra={"fields": {"key": key}})
        return key

    # ------------------------------------------------------------------
    # Directory tree upload
    # ------------------------------------------------------------------

    def content_type_for(self, key: str) -> str:
        """Pick the upload content type from the key's file extension."""
        ext = os.path.splitext(key)[1].lower()
        return self.content_types.get(ext, self.default_content_type)

    def upload(self, local_path: str, key_prefix: str = "") -> int:
        """Upload every regular file under *local_path*.

        Keys are the file paths relative to *local_path* with ``/``
        separators, optionally placed under *key_prefix*. Files are visited
        top-down with names sorted at each directory level. Every call
        uploads every file again; nothing is compared with the bucket.

        Args:
            local_path: Directory to upload
            key_prefix: Optional key prefix

        Returns:
            Number of files uploaded

        Raises:
            PathInspectionError: A path under *local_path* (or *local_path*
                itself) could not be inspected
        """
        uploaded = 0

        try:
            for file_path in self._iter_files(local_path):
                self._upload_one(local_path, file_path, key_prefix)
                uploaded += 1
        except PathInspectionError as e:
            self._log.with_fields(path=local_path, error=e).error("Failed to get file paths to upload")
            raise

        self._log.with_fields(path=local_path).info("Uploaded %d file(s)", uploaded)
        return uploaded

    def _iter_files(self, root: str) -> Iterator[str]:
        def on_error(err):
            raise PathInspectionError(err.filename or root, err.strerror) from err

        for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
            dirnames.sort()
            for filename in sorted(filenames):
                file_path = os.path.join(dirpath, filename)
                if _is_regular_file(file_path):
                    yield file_path

    def _upload_one(self, root: str, file_path: str, key_prefix: str) -> None:
        key = key_from_path(root, file_path, key_prefix)
        content_type = self.content_type_for(key)
        flog = self._log.with_fields(path=file_path, key=key)
        flog.debug("File being uploaded", extra={"fields": {"content_type": content_type}})

        try:
            fh = open(file_path, "rb")
        except OSError:
            flog.error("Unable to open file for upload")
            raise

        with fh:
            try:
                self.transfer_manager.upload(self._name, key, fh, content_type)
            except Exception:
                flog.error("Unable to upload file")
                raise

    # ------------------------------------------------------------------
    # Whole bucket download
    # ------------------------------------------------------------------

    def download_all_objects_in_bucket(self, dest_dir: str, *extra_dirs: str) -> int:
        """Download every object in the bucket into *dest_dir*.

        *dest_dir* and each of *extra_dirs* (relative to it) are created
        first. Objects whose local file already exists are skipped without
        being compared, so running this twice downloads nothing the second
        time.

        Args:
            dest_dir: Destination directory
            *extra_dirs: Directories to create under *dest_dir* regardless of
                the bucket's content

        Returns:
            Number of objects downloaded
        """
        dest_dir = os.path.join(dest_dir, "")

        ensure_dir(dest_dir, self.dir_mode)
        for extra_dir in extra_dirs:
            ensure_dir(os.path.join(dest_dir, extra_dir), self.dir_mode)

        downloaded = 0
        continuation_token = None

        while True:
            try:
                page = self.client.list_page(self._name, continuation_token)
            except Exception:
                self._log.with_fields(continuation_token=continuation_token).error(
                    "Failed to list objects"
                )
                raise

            downloaded += self._download_page(page, dest_dir)

            if not page.truncated:
                break
            if not page.next_token:
                raise BucketError(
                    f"Listing of bucket {self._name} is truncated but has no continuation token"
                )
            continuation_token = page.next_token

        self._log.with_fields(dest_dir=dest_dir).info("Downloaded %d object(s)", downloaded)
        return downloaded

    def _download_page(self, page: ListingPage, dest_dir: str) -> int:
        downloaded = 0
        for key in page.keys:
            if self._download_object(key, dest_dir):
                downloaded += 1
        return downloaded

    def _download_object(self, key: str, dest_dir: str) -> bool:
        rel_path = path_from_key(key)
        flog = self._log.with_fields(key=key)

        # Folder markers only need their directory
        if not rel_path or key.endswith("/"):
            ensure_dir(os.path.join(dest_dir, rel_path), self.dir_mode)
            flog.debug("Skipping folder marker")
            return False

        dest_path = os.path.join(dest_dir, rel_path)
        flog = flog.with_fields(dest_path=dest_path)
        ensure_dir(os.path.dirname(dest_path), self.dir_mode)

        if os.path.lexists(dest_path):
            flog.debug("Destination exists, skipping")
            return False

        flog.debug("Creating file")
        try:
            fh = open(dest_path, "xb")
        except OSError:
            flog.error("Failed to create file to download into")
            raise

        try:
            with fh:
                size = self.transfer_manager.download(self._name, key, fh)
        except Exception:
            flog.error("Failed to download file")
            _remove_partial(dest_path)
            raise

        flog.debug("Downloaded %s bytes", size)
        return True


def _is_regular_file(path: str) -> bool:
    try:
        mode = os.stat(path).st_mode
    except OSError as e:
        log.with_fields(path=path, error=e).error("Failed to figure out if path was a regular file")
        raise PathInspectionError(path, e.strerror) from e
    return stat.S_ISREG(mode)


def _remove_partial(path: str) -> None:
    try:
        os.remove(path)
    except OSError as e:
        log.with_fields(path=path, error=e).warning("Could not remove partial download")
