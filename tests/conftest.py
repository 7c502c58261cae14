"""Shared fixtures for the lambdahelpers test suite."""
from unittest.mock import MagicMock

import pytest

from lambdahelpers.services.storage import Bucket, ListingPage, ObjectStoreClient, TransferManager


@pytest.fixture
def store_client():
    client = MagicMock(spec=ObjectStoreClient)
    client.list_page.return_value = ListingPage()
    return client


@pytest.fixture
def transfer_manager():
    return MagicMock(spec=TransferManager)


@pytest.fixture
def bucket(store_client, transfer_manager) -> Bucket:
    return Bucket(client=store_client, transfer_manager=transfer_manager, name="test-bucket")


@pytest.fixture
def recorded_uploads(transfer_manager):
    """Capture (content, content type) per key while the upload stream is still open."""
    uploads = {}

    def fake_upload(bucket_name, key, fileobj, content_type):
        uploads[key] = (fileobj.read(), content_type)

    transfer_manager.upload.side_effect = fake_upload
    return uploads


@pytest.fixture
def fake_download(transfer_manager):
    """Write ``content:<key>`` into the destination file for every download."""

    def download(bucket_name, key, fileobj):
        return fileobj.write(f"content:{key}".encode())

    transfer_manager.download.side_effect = download
    return download
