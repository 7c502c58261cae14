"""Tests for the single-object Bucket helpers."""
from unittest.mock import call

import pytest
from botocore.exceptions import ClientError

from lambdahelpers.services.notifications import parse_body
from lambdahelpers.services.storage import Bucket, BucketError, ListingPage, NoFilesInBucketError


def _client_error(operation="GetObject", code="NoSuchKey"):
    return ClientError({"Error": {"Code": code, "Message": "boom"}}, operation)


class TestReadFile:
    def test_empty_bucket_raises_no_files_error(self, bucket: Bucket, store_client):
        store_client.list_page.return_value = ListingPage(keys=())

        with pytest.raises(NoFilesInBucketError) as exc_info:
            bucket.read_file()

        assert isinstance(exc_info.value, BucketError)
        assert exc_info.value.bucket_name == "test-bucket"
        store_client.get_object.assert_not_called()

    def test_returns_first_key_and_body(self, bucket: Bucket, store_client):
        store_client.list_page.return_value = ListingPage(keys=("Object1", "Object2"))
        store_client.get_object.return_value = b"Hello"

        body, key = bucket.read_file()

        assert (body, key) == ("Hello", "Object1")
        store_client.get_object.assert_called_once_with("test-bucket", "Object1")

    def test_only_requests_the_first_page(self, bucket: Bucket, store_client):
        store_client.list_page.return_value = ListingPage(keys=("a",), truncated=True, next_token="t")
        store_client.get_object.return_value = b""

        bucket.read_file()

        store_client.list_page.assert_called_once_with("test-bucket")

    def test_listing_error_propagates(self, bucket: Bucket, store_client):
        error = _client_error("ListObjectsV2", "AccessDenied")
        store_client.list_page.side_effect = error

        with pytest.raises(ClientError) as exc_info:
            bucket.read_file()

        assert exc_info.value is error

    def test_get_object_error_propagates(self, bucket: Bucket, store_client):
        store_client.list_page.return_value = ListingPage(keys=("Object1",))
        store_client.get_object.side_effect = _client_error()

        with pytest.raises(ClientError):
            bucket.read_file()

    def test_latin1_email_reads_and_parses(self, bucket: Bucket, store_client):
        raw = (
            "Subject: Caf\xe9\r\n"
            "MIME-Version: 1.0\r\n"
            'Content-Type: text/plain; charset="iso-8859-1"\r\n'
            "Content-Transfer-Encoding: 8bit\r\n"
            "\r\n"
            "d\xe9j\xe0 vu\r\n"
        ).encode("latin-1")
        store_client.list_page.return_value = ListingPage(keys=("inbox/mail1",))
        store_client.get_object.return_value = raw

        body, key = bucket.read_file()

        assert key == "inbox/mail1"
        assert body.encode("utf-8", "surrogateescape") == raw
        message = parse_body(body)
        assert "déjà vu" in message.body
        assert message.subject.startswith("Caf")


class TestDeleteObject:
    def test_deletes_then_waits_once_each(self, bucket: Bucket, store_client):
        bucket.delete_object("k")

        store_client.delete_object.assert_called_once_with("test-bucket", "k")
        store_client.wait_until_absent.assert_called_once_with("test-bucket", "k")
        assert store_client.method_calls == [
            call.delete_object("test-bucket", "k"),
            call.wait_until_absent("test-bucket", "k"),
        ]

    def test_delete_failure_skips_wait(self, bucket: Bucket, store_client):
        store_client.delete_object.side_effect = _client_error("DeleteObject", "AccessDenied")

        with pytest.raises(ClientError):
            bucket.delete_object("k")

        store_client.wait_until_absent.assert_not_called()

    def test_wait_failure_propagates(self, bucket: Bucket, store_client):
        store_client.wait_until_absent.side_effect = RuntimeError("waiter gave up")

        with pytest.raises(RuntimeError, match="waiter gave up"):
            bucket.delete_object("k")


class TestUploadFile:
    def test_writes_body_under_post_prefix_and_suffix(self, bucket: Bucket, recorded_uploads):
        key = bucket.upload_file("TestFile", "Some content")

        assert key == "/content/post/TestFile.md"
        content, content_type = recorded_uploads[key]
        assert content == b"Some content"
        assert content_type.startswith("text/markdown")

    def test_prefix_and_suffix_are_configurable(self, store_client, transfer_manager, recorded_uploads):
        bucket = Bucket(
            store_client, transfer_manager, "posts",
            post_key_prefix="drafts/", post_key_suffix=".txt",
        )

        assert bucket.upload_file("hello", "x") == "drafts/hello.txt"
        assert transfer_manager.upload.call_args.args[0] == "posts"

    def test_upload_error_propagates(self, bucket: Bucket, transfer_manager):
        transfer_manager.upload.side_effect = _client_error("PutObject", "AccessDenied")

        with pytest.raises(ClientError):
            bucket.upload_file("TestFile", "Some content")


def test_name_is_read_only(bucket: Bucket):
    with pytest.raises(AttributeError):
        bucket.name = "other"

    assert bucket.name == "test-bucket"
