"""Tests for capture/upload normalization."""

import base64
from io import BytesIO

import pytest
from PIL import Image as PILImage

from medside.application.services.image_source import ImageSource, UploadedFile
from medside.config.settings import UploadConfig
from medside.cross_cutting.validation import normalize_mime_type, resolve_declared_type
from medside.domain.exceptions import ErrorKind, UnreadableFileError, UnsupportedFormatError


class ExplodingFile:
    """Upload handle that must never be read."""

    filename = "box.bmp"
    content_type = "image/bmp"

    def read(self):
        raise AssertionError("file was read")


@pytest.fixture
def source() -> ImageSource:
    return ImageSource()


class TestFromCapture:

    def test_jpeg_bytes(self, source, jpeg_bytes):
        image = source.from_capture(jpeg_bytes)

        assert image.mime_type == "image/jpeg"
        assert image.data == jpeg_bytes

    def test_data_url(self, source, jpeg_bytes):
        data_url = "data:image/jpeg;base64," + base64.b64encode(jpeg_bytes).decode()
        assert source.from_capture(data_url).data == jpeg_bytes

    def test_raw_base64(self, source, jpeg_bytes):
        assert source.from_capture(base64.b64encode(jpeg_bytes).decode()).data == jpeg_bytes

    def test_empty_frame(self, source):
        with pytest.raises(UnreadableFileError):
            source.from_capture(b"")

    def test_garbage_bytes(self, source):
        with pytest.raises(UnreadableFileError):
            source.from_capture(b"not an image at all")

    def test_invalid_base64(self, source):
        with pytest.raises(UnreadableFileError):
            source.from_capture("data:image/jpeg;base64,@@@not-base64@@@")


class TestFromUpload:

    def test_png_upload(self, source, png_bytes):
        image = source.from_upload(UploadedFile("box.png", "image/png", png_bytes))
        assert image.mime_type == "image/png"

    def test_gif_upload(self, source, gif_bytes):
        image = source.from_upload(UploadedFile("anim.gif", "image/gif", gif_bytes))
        assert image.mime_type == "image/gif"

    def test_jpg_alias(self, source, jpeg_bytes):
        image = source.from_upload(UploadedFile("box.jpg", "image/jpg", jpeg_bytes))
        assert image.mime_type == "image/jpeg"

    def test_extension_used_without_content_type(self, source, png_bytes):
        image = source.from_upload(UploadedFile("box.PNG", None, png_bytes))
        assert image.mime_type == "image/png"

    def test_path_upload(self, source, tmp_path, jpeg_bytes):
        path = tmp_path / "photo.jpeg"
        path.write_bytes(jpeg_bytes)

        image = source.from_upload(path)

        assert image.mime_type == "image/jpeg"
        assert image.data == jpeg_bytes

    def test_file_object_upload(self, source, png_bytes):
        handle = BytesIO(png_bytes)
        image = source.from_upload(handle, content_type="image/png", filename="x.png")
        assert image.data == png_bytes

    def test_content_detected_over_declared(self, source, png_bytes):
        image = source.from_upload(UploadedFile("mislabeled.jpg", "image/jpeg", png_bytes))
        assert image.mime_type == "image/png"

    def test_bmp_rejected_before_read(self, source):
        with pytest.raises(UnsupportedFormatError) as exc_info:
            source.from_upload(ExplodingFile())

        assert exc_info.value.kind == ErrorKind.UNSUPPORTED_FORMAT
        assert exc_info.value.declared_type == "image/bmp"

    def test_bmp_content_with_allowed_label(self, source, bmp_bytes):
        with pytest.raises(UnsupportedFormatError):
            source.from_upload(UploadedFile("box.png", "image/png", bmp_bytes))

    def test_empty_upload(self, source):
        with pytest.raises(UnreadableFileError):
            source.from_upload(UploadedFile("box.png", "image/png", b""))

    def test_corrupt_upload(self, source, png_bytes):
        with pytest.raises(UnreadableFileError):
            source.from_upload(UploadedFile("box.png", "image/png", png_bytes[:20]))

    def test_missing_path(self, source, tmp_path):
        with pytest.raises(UnreadableFileError):
            source.from_upload(tmp_path / "nope.png")

    def test_closed_handle(self, source, png_bytes):
        handle = BytesIO(png_bytes)
        handle.close()

        with pytest.raises(UnreadableFileError):
            source.from_upload(handle, content_type="image/png", filename="x.png")

    def test_decompression_bomb(self, source, png_bytes, monkeypatch):
        monkeypatch.setattr(PILImage, "MAX_IMAGE_PIXELS", 100)

        with pytest.raises(UnreadableFileError):
            source.from_upload(UploadedFile("box.png", "image/png", png_bytes))

    def test_size_limit(self, png_bytes):
        small = ImageSource(UploadConfig(max_file_size_bytes=10))
        with pytest.raises(UnreadableFileError):
            small.from_upload(UploadedFile("box.png", "image/png", png_bytes))

    def test_verification_can_be_disabled(self):
        lenient = ImageSource(UploadConfig(verify_images=False))
        image = lenient.from_upload(UploadedFile("box.png", "image/png", b"opaque"))
        assert image.mime_type == "image/png"


class TestFromUploads:

    def test_first_file_wins(self, source, png_bytes, jpeg_bytes):
        image = source.from_uploads([
            UploadedFile("first.png", "image/png", png_bytes),
            UploadedFile("second.jpg", "image/jpeg", jpeg_bytes),
        ])
        assert image.data == png_bytes

    def test_extra_files_not_read(self, source, png_bytes):
        image = source.from_uploads([UploadedFile("first.png", "image/png", png_bytes), ExplodingFile()])
        assert image.mime_type == "image/png"

    def test_empty_drop(self, source):
        with pytest.raises(UnreadableFileError):
            source.from_uploads([])


class TestDeclaredType:

    @pytest.mark.parametrize(
        "declared, expected",
        [
            ("image/jpeg", "image/jpeg"),
            ("image/JPG", "image/jpeg"),
            ("image/png; charset=binary", "image/png"),
            (".gif", "image/gif"),
            ("image/webp", None),
            (None, None),
        ],
    )
    def test_normalize(self, declared, expected):
        assert normalize_mime_type(declared) == expected

    def test_octet_stream_falls_back_to_extension(self):
        assert resolve_declared_type("application/octet-stream", "scan.gif") == "image/gif"

    def test_unknown_everything(self):
        with pytest.raises(UnsupportedFormatError):
            resolve_declared_type(None, "README")
