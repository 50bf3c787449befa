"""Tests for ImageValue and StorageEvent models."""

import pytest
from pydantic import ValidationError

from image_derivatives.core.exceptions import StorageError
from image_derivatives.core.models import ImageValue, StorageEvent, split_key
from image_derivatives.testing.fakes import create_s3_event


class TestSplitKey:
    """Tests for split_key."""

    @pytest.mark.parametrize(
        "key, expected",
        [
            ("HappyFace.jpg", ("", "HappyFace", ".jpg")),
            ("a/b/HappyFace.jpg", ("a/b/", "HappyFace", ".jpg")),
            ("photos/README", ("photos/", "README", "")),
            ("archive.tar.gz", ("", "archive.tar", ".gz")),
            (".hidden", ("", ".hidden", "")),
        ],
    )
    def test_split_key(self, key, expected):
        assert split_key(key) == expected

    def test_parts_concatenate_back(self):
        assert "".join(split_key("x/y/z.png")) == "x/y/z.png"


class TestImageValue:
    """Tests for ImageValue."""

    def test_properties(self):
        image = ImageValue(bucket="sourcebucket", key="photos/HappyFace.JPG", data=b"abc")

        assert image.directory == "photos/"
        assert image.basename == "HappyFace.JPG"
        assert image.stem == "HappyFace"
        assert image.extension == ".JPG"
        assert image.content_type == "image/jpeg"

    def test_unknown_extension_content_type(self):
        image = ImageValue(bucket="b", key="blob", data=b"")
        assert image.content_type == "application/octet-stream"

    def test_is_frozen(self):
        image = ImageValue(bucket="b", key="k.png", data=b"abc")

        with pytest.raises(ValidationError):
            image.key = "other.png"

    def test_with_data_returns_new_value(self):
        image = ImageValue(bucket="b", key="k.png", data=b"abc")

        changed = image.with_data(b"xyz")

        assert changed is not image
        assert (changed.bucket, changed.key, changed.data) == ("b", "k.png", b"xyz")
        assert image.data == b"abc"

    def test_with_identity_keeps_bytes(self):
        image = ImageValue(bucket="b", key="k.png", data=b"abc")

        moved = image.with_identity("other", "dir/k.png")

        assert (moved.bucket, moved.key) == ("other", "dir/k.png")
        assert moved.data is image.data

    def test_repr_hides_bytes(self):
        image = ImageValue(bucket="b", key="k.png", data=b"\x00" * 2048)
        assert "size=2048" in repr(image)


class TestStorageEvent:
    """Tests for StorageEvent."""

    def test_from_record(self):
        payload = create_s3_event("sourcebucket", "HappyFace.jpg")

        event = StorageEvent.from_record(payload["Records"][0])

        assert event == StorageEvent(bucket="sourcebucket", key="HappyFace.jpg")
        assert str(event) == "s3://sourcebucket/HappyFace.jpg"

    def test_from_record_decodes_key(self):
        payload = create_s3_event("b", "my+photos/Happy%28Face%29.jpg")

        event = StorageEvent.from_record(payload["Records"][0])

        assert event.key == "my photos/Happy(Face).jpg"

    def test_from_notification_all_records(self):
        payload = create_s3_event("b", "one.jpg")
        payload["Records"].append(create_s3_event("c", "two.png")["Records"][0])

        events = StorageEvent.from_notification(payload)

        assert [(e.bucket, e.key) for e in events] == [("b", "one.jpg"), ("c", "two.png")]

    def test_from_notification_without_records(self):
        assert StorageEvent.from_notification({}) == []

    @pytest.mark.parametrize("payload", [[], ["Records"], {"Records": {"s3": {}}}])
    def test_from_notification_rejects_non_notification(self, payload):
        with pytest.raises(StorageError, match="S3 notification"):
            StorageEvent.from_notification(payload)

    def test_malformed_record(self):
        with pytest.raises(StorageError, match="Malformed S3 event record"):
            StorageEvent.from_record({"s3": {"bucket": {"name": "b"}}})
