"""
Image Source

Normalizes camera frames and uploaded files into a CanonicalImage.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional, Union
import base64
import binascii
import logging

from ...config.settings import UploadConfig
from ...cross_cutting.validation import resolve_declared_type, validate_image_bytes
from ...domain.exceptions import UnreadableFileError
from ...domain.value_objects.canonical_image import CanonicalImage, JPEG


logger = logging.getLogger(__name__)


@dataclass
class UploadedFile:
    """
    Minimal in-memory file handle.

    Anything with `read()` plus optional `filename`/`content_type`
    attributes works as an upload handle; this one is for callers that
    already hold the bytes.
    """

    filename: Optional[str]
    content_type: Optional[str]
    data: bytes = field(repr=False, default=b"")

    def read(self) -> bytes:
        return self.data


FileHandle = Union[UploadedFile, Path, str, Any]


class ImageSource:
    """
    Turns capture and upload input into the canonical image form.

    Capture frames are always JPEG. Uploads are checked against the
    allow-set {jpeg, jpg, png, gif} by their declared type before any
    bytes are read, then decoded with Pillow when verification is on.

    Usage:
        source = ImageSource()
        image = source.from_capture(frame_bytes)
        image = source.from_upload(UploadedFile("box.png", "image/png", data))
        image = source.from_uploads(dropped_files)  # first file only
    """

    def __init__(self, config: Optional[UploadConfig] = None):
        self.config = config or UploadConfig()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def from_capture(self, frame: Union[bytes, str]) -> CanonicalImage:
        """
        Normalize a still frame from the camera.

        Args:
            frame: Encoded JPEG bytes, or a JPEG data URL / base64 string
                as produced by browser camera widgets

        Returns:
            CanonicalImage with mime type image/jpeg

        Raises:
            UnreadableFileError: If the frame is empty or cannot be decoded
        """
        if isinstance(frame, str):
            frame = self._decode_base64_frame(frame)

        if not frame:
            raise UnreadableFileError("Captured frame is empty")

        validate_image_bytes(
            frame,
            max_size=self.config.max_file_size_bytes,
            verify=self.config.verify_images,
        )

        image = CanonicalImage(data=bytes(frame), mime_type=JPEG)
        self.logger.debug(f"Normalized capture frame: {image}")
        return image

    def from_upload(
        self,
        file_handle: FileHandle,
        content_type: Optional[str] = None,
        filename: Optional[str] = None
    ) -> CanonicalImage:
        """
        Normalize one uploaded file.

        Args:
            file_handle: File-like object, UploadedFile, or filesystem path
            content_type: Declared MIME type override
            filename: Filename override

        Returns:
            CanonicalImage

        Raises:
            UnsupportedFormatError: Declared type outside the allow-set
            UnreadableFileError: The file cannot be read or decoded
        """
        if isinstance(file_handle, (str, Path)):
            path = Path(file_handle)
            filename = filename or path.name
        else:
            path = None
            filename = filename or getattr(file_handle, "filename", None) or self._name_of(file_handle)
            content_type = content_type or getattr(file_handle, "content_type", None)

        # Declared type is checked before reading anything
        mime_type = resolve_declared_type(content_type, filename)

        data = self._read(path if path is not None else file_handle, filename)

        detected = validate_image_bytes(
            data,
            max_size=self.config.max_file_size_bytes,
            verify=self.config.verify_images,
            filename=filename,
        )
        if detected and detected != mime_type:
            self.logger.info(f"Declared type {mime_type} for {filename!r} but content is {detected}")
            mime_type = detected

        image = CanonicalImage(data=data, mime_type=mime_type)
        self.logger.debug(f"Normalized upload {filename!r}: {image}")
        return image

    def from_uploads(self, file_handles: Iterable[FileHandle]) -> CanonicalImage:
        """
        Normalize a drop of one or more files. Only the first file is used.

        Raises:
            UnreadableFileError: If the drop contains no files
        """
        handles = list(file_handles or [])
        if not handles:
            raise UnreadableFileError("No file was provided")

        if len(handles) > 1:
            self.logger.debug(f"Ignoring {len(handles) - 1} extra file(s) in drop")

        return self.from_upload(handles[0])

    def _read(self, handle: Any, filename: Optional[str]) -> bytes:
        try:
            if isinstance(handle, Path):
                data = handle.read_bytes()
            elif hasattr(handle, "file") and hasattr(handle.file, "read"):
                # Starlette/FastAPI UploadFile
                data = handle.file.read()
            else:
                data = handle.read()
        except (OSError, ValueError) as e:
            raise UnreadableFileError(f"Failed to read file: {e}", filename=filename)

        if isinstance(data, str) or data is None:
            raise UnreadableFileError("File did not yield binary content", filename=filename)
        return bytes(data)

    @staticmethod
    def _name_of(handle: Any) -> Optional[str]:
        name = getattr(handle, "name", None)
        if isinstance(name, str):
            return Path(name).name
        return None

    @staticmethod
    def _decode_base64_frame(frame: str) -> bytes:
        payload = frame.strip()
        if payload.startswith("data:"):
            if "," not in payload:
                raise UnreadableFileError("Malformed data URL")
            payload = payload.split(",", 1)[1]
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise UnreadableFileError(f"Captured frame is not valid base64: {e}")
