"""Tests for uploading a local directory tree."""
import os

import pytest
from botocore.exceptions import ClientError

from lambdahelpers.services.storage import Bucket, PathInspectionError


@pytest.fixture
def input_dir(tmp_path):
    root = tmp_path / "input"
    upload_dir = root / "testUpload"
    upload_dir.mkdir(parents=True)
    (upload_dir / "Object1.txt").write_text("one")
    (upload_dir / "Object2.md").write_text("two")
    return root


class TestUpload:
    def test_sends_all_files_with_root_relative_keys(self, bucket: Bucket, input_dir, recorded_uploads):
        count = bucket.upload(str(input_dir))

        assert count == 2
        assert set(recorded_uploads) == {"testUpload/Object1.txt", "testUpload/Object2.md"}
        assert recorded_uploads["testUpload/Object1.txt"][0] == b"one"

    def test_key_prefix_places_files_under_prefix(self, bucket: Bucket, input_dir, recorded_uploads):
        bucket.upload(str(input_dir / "testUpload"), key_prefix="testUpload")

        assert set(recorded_uploads) == {"testUpload/Object1.txt", "testUpload/Object2.md"}

    def test_uploads_to_the_bucket_name(self, bucket: Bucket, input_dir, transfer_manager, recorded_uploads):
        bucket.upload(str(input_dir))

        assert {c.args[0] for c in transfer_manager.upload.call_args_list} == {"test-bucket"}

    def test_walks_nested_directories_in_sorted_order(self, bucket: Bucket, tmp_path, recorded_uploads):
        (tmp_path / "b" / "c").mkdir(parents=True)
        (tmp_path / "a").mkdir()
        (tmp_path / "z.html").write_text("z")
        (tmp_path / "a" / "y.html").write_text("y")
        (tmp_path / "b" / "c" / "x.html").write_text("x")

        bucket.upload(str(tmp_path))

        assert list(recorded_uploads) == ["z.html", "a/y.html", "b/c/x.html"]

    def test_content_type_by_extension(self, bucket: Bucket, tmp_path, recorded_uploads):
        (tmp_path / "style.css").write_text("body {}")
        (tmp_path / "index.html").write_text("<html/>")
        (tmp_path / "notes.md").write_text("# notes")

        bucket.upload(str(tmp_path))

        assert recorded_uploads["style.css"][1] == "text/css"
        assert recorded_uploads["index.html"][1] == "text/html"
        assert recorded_uploads["notes.md"][1] == "text/html"

    def test_custom_content_types(self, store_client, transfer_manager, tmp_path, recorded_uploads):
        bucket = Bucket(
            store_client, transfer_manager, "site",
            content_types={".css": "text/css", ".js": "application/javascript"},
        )
        (tmp_path / "app.js").write_text("1")

        bucket.upload(str(tmp_path))

        assert recorded_uploads["app.js"][1] == "application/javascript"

    def test_repeated_upload_always_transfers(self, bucket: Bucket, input_dir, transfer_manager, recorded_uploads):
        bucket.upload(str(input_dir))
        bucket.upload(str(input_dir))

        assert transfer_manager.upload.call_count == 4

    def test_empty_directory_uploads_nothing(self, bucket: Bucket, tmp_path, transfer_manager):
        (tmp_path / "empty").mkdir()

        assert bucket.upload(str(tmp_path)) == 0
        transfer_manager.upload.assert_not_called()

    def test_closes_files_after_upload(self, bucket: Bucket, input_dir, transfer_manager):
        streams = []
        transfer_manager.upload.side_effect = lambda b, k, fh, ct: streams.append(fh)

        bucket.upload(str(input_dir))

        assert streams and all(fh.closed for fh in streams)


class TestUploadFailures:
    def test_first_upload_error_aborts_walk(self, bucket: Bucket, tmp_path, transfer_manager):
        for name in ("a.html", "b.html", "c.html"):
            (tmp_path / name).write_text(name)
        transfer_manager.upload.side_effect = [
            None,
            ClientError({"Error": {"Code": "AccessDenied", "Message": "no"}}, "PutObject"),
            None,
        ]

        with pytest.raises(ClientError):
            bucket.upload(str(tmp_path))

        assert transfer_manager.upload.call_count == 2

    def test_stream_closed_when_upload_fails(self, bucket: Bucket, tmp_path, transfer_manager):
        (tmp_path / "a.html").write_text("a")
        streams = []

        def failing_upload(bucket_name, key, fileobj, content_type):
            streams.append(fileobj)
            raise RuntimeError("network down")

        transfer_manager.upload.side_effect = failing_upload

        with pytest.raises(RuntimeError):
            bucket.upload(str(tmp_path))

        assert streams[0].closed

    def test_missing_root_raises_path_inspection_error(self, bucket: Bucket, tmp_path):
        missing = tmp_path / "missing"

        with pytest.raises(PathInspectionError) as exc_info:
            bucket.upload(str(missing))

        assert exc_info.value.path == str(missing)
        assert isinstance(exc_info.value, OSError)

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_dangling_symlink_raises_path_inspection_error(self, bucket: Bucket, tmp_path, transfer_manager):
        os.symlink(str(tmp_path / "nowhere"), str(tmp_path / "link"))

        with pytest.raises(PathInspectionError) as exc_info:
            bucket.upload(str(tmp_path))

        assert exc_info.value.path == str(tmp_path / "link")
        transfer_manager.upload.assert_not_called()
