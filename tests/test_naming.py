"""Tests for the naming policy."""

import pytest

from image_derivatives.core.image_utils import ImageFormat
from image_derivatives.core.naming import (
    decorate_key,
    destination_for,
    relocate_key,
    replace_extension,
)
from image_derivatives.core.operations import (
    BackupOperation,
    ReduceOperation,
    ResizeOperation,
)


class TestReduceNaming:
    """Reduce keeps the name and optionally moves it."""

    def test_defaults_keep_identity(self):
        assert destination_for("sourcebucket", "HappyFace.jpg", ReduceOperation()) == (
            "sourcebucket",
            "HappyFace.jpg",
        )

    def test_defaults_keep_nested_key(self):
        assert destination_for("b", "photos/2024/a.png", ReduceOperation()) == (
            "b",
            "photos/2024/a.png",
        )

    def test_bucket_and_directory(self):
        operation = ReduceOperation(bucket="foo", directory="some")
        assert destination_for("sourcebucket", "HappyFace.jpg", operation) == (
            "foo",
            "some/HappyFace.jpg",
        )

    @pytest.mark.parametrize(
        "directory, expected",
        [
            ("some", "some/a.jpg"),
            ("some/", "some/a.jpg"),
            ("/some/deeper/", "some/deeper/a.jpg"),
            ("./reduced", "photos/reduced/a.jpg"),
            ("./", "photos/a.jpg"),
            ("", "a.jpg"),
        ],
    )
    def test_relocate_key(self, directory, expected):
        assert relocate_key("photos/a.jpg", directory) == expected

    def test_extension_never_changes(self):
        _, key = destination_for("b", "x.png", ReduceOperation(directory="d"))
        assert key.endswith(".png")


class TestBackupNaming:
    """Backup stays in the source bucket and decorates the stem."""

    def test_prefix_and_suffix(self):
        operation = BackupOperation(prefix="a_", suffix="_b")
        assert destination_for("sourcebucket", "HappyFace.jpg", operation) == (
            "sourcebucket",
            "a_HappyFace_b.jpg",
        )

    def test_keeps_source_directory(self):
        assert decorate_key("photos/x.png", "orig-", "") == "photos/orig-x.png"

    def test_no_extension(self):
        assert decorate_key("photos/README", "a_", "_b") == "photos/a_README_b"

    def test_empty_prefix_and_suffix_is_same_key(self):
        assert destination_for("b", "x.jpg", BackupOperation()) == ("b", "x.jpg")


class TestResizeNaming:
    """Resize only touches the extension, and only when asked."""

    @pytest.mark.parametrize("image_format", [None, ImageFormat.PNG, ImageFormat.GIF])
    def test_key_unchanged_without_change_extension(self, image_format):
        operation = ResizeOperation(size=100, format=image_format)
        assert destination_for("b", "HappyFace.jpg", operation) == ("b", "HappyFace.jpg")

    @pytest.mark.parametrize(
        "image_format, expected",
        [
            (ImageFormat.PNG, "HappyFace.png"),
            (ImageFormat.GIF, "HappyFace.gif"),
            (ImageFormat.JPEG, "HappyFace.jpg"),
            (ImageFormat.WEBP, "HappyFace.webp"),
        ],
    )
    def test_change_extension(self, image_format, expected):
        operation = ResizeOperation(size=100, format=image_format, change_extension=True)
        assert destination_for("b", "HappyFace.jpg", operation) == ("b", expected)

    def test_change_extension_without_format_is_noop(self):
        operation = ResizeOperation(size=100, change_extension=True)
        assert destination_for("b", "HappyFace.jpg", operation) == ("b", "HappyFace.jpg")

    def test_change_extension_appends_when_missing(self):
        assert replace_extension("photos/HappyFace", ".png") == "photos/HappyFace.png"

    def test_bucket_never_changes(self):
        operation = ResizeOperation(size=100, format=ImageFormat.PNG, change_extension=True)
        bucket, _ = destination_for("sourcebucket", "a/b.jpg", operation)
        assert bucket == "sourcebucket"


def test_unknown_operation():
    with pytest.raises(TypeError):
        destination_for("b", "k.jpg", object())
