"""
Input Validation

Validation utilities for image inputs.
"""

from io import BytesIO
from pathlib import PurePath
from typing import Optional

from PIL import Image as PILImage, UnidentifiedImageError

from ..domain.exceptions import UnreadableFileError, UnsupportedFormatError
from ..domain.value_objects.canonical_image import ALLOWED_MIME_TYPES, JPEG, PNG, GIF


# Declared upload types, normalized to canonical MIME types
SUPPORTED_FORMATS = {
    "jpeg": JPEG,
    "jpg": JPEG,
    "png": PNG,
    "gif": GIF,
}

# Maximum image dimensions
MAX_IMAGE_DIMENSION = 8192

# Maximum file size (10 MB)
MAX_FILE_SIZE = 10 * 1024 * 1024

# Pillow format names -> MIME
_PIL_FORMATS = {
    "JPEG": JPEG,
    "MPO": JPEG,  # multi-picture JPEG written by some phone cameras
    "PNG": PNG,
    "GIF": GIF,
}


def normalize_mime_type(declared: Optional[str]) -> Optional[str]:
    """
    Map a declared content type or extension to a canonical MIME type.

    Accepts "image/jpg", "image/png; charset=binary", "png", ".jpeg" and so on.

    Returns:
        Canonical MIME type, or None if outside the allow-set
    """
    if not declared:
        return None

    value = declared.split(";", 1)[0].strip().lower()
    if value.startswith("image/"):
        value = value[len("image/"):]
    value = value.lstrip(".")

    return SUPPORTED_FORMATS.get(value)


def resolve_declared_type(
    content_type: Optional[str] = None,
    filename: Optional[str] = None
) -> str:
    """
    Resolve an upload's declared MIME type.

    The content type wins; the filename extension is used when the
    content type is missing or generic (application/octet-stream).

    Raises:
        UnsupportedFormatError: If the declared type is outside the allow-set
    """
    declared = content_type
    if not declared or declared.split(";", 1)[0].strip().lower() == "application/octet-stream":
        declared = PurePath(filename).suffix if filename else None

    mime_type = normalize_mime_type(declared)
    if mime_type is None:
        raise UnsupportedFormatError(
            declared or content_type,
            supported=sorted(SUPPORTED_FORMATS),
            details={"filename": filename} if filename else None,
        )
    return mime_type


def validate_image_bytes(
    data: bytes,
    max_size: int = MAX_FILE_SIZE,
    verify: bool = True,
    filename: Optional[str] = None
) -> Optional[str]:
    """
    Validate raw image bytes.

    Args:
        data: Encoded image bytes
        max_size: Maximum accepted size in bytes
        verify: Decode with Pillow to make sure the image is readable
        filename: Optional name for error details

    Returns:
        MIME type detected by Pillow when `verify` is set, else None

    Raises:
        UnreadableFileError: Empty, oversized or undecodable data
        UnsupportedFormatError: The decoded format is outside the allow-set
    """
    if not data:
        raise UnreadableFileError("Image is empty", filename=filename)

    if len(data) > max_size:
        raise UnreadableFileError(
            f"Image size exceeds maximum ({max_size / 1024 / 1024:.1f} MB)",
            filename=filename,
        )

    if not verify:
        return None

    try:
        pil_image = PILImage.open(BytesIO(data))
        pil_image.verify()
        # Reopen because verify() can only be called once
        pil_image = PILImage.open(BytesIO(data))
        width, height = pil_image.size
        img_format = pil_image.format
    except (UnidentifiedImageError, PILImage.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
        raise UnreadableFileError(f"Invalid image data: {e}", filename=filename)

    if width > MAX_IMAGE_DIMENSION or height > MAX_IMAGE_DIMENSION:
        raise UnreadableFileError(
            f"Image dimensions exceed maximum ({MAX_IMAGE_DIMENSION}x{MAX_IMAGE_DIMENSION})",
            filename=filename,
        )

    mime_type = _PIL_FORMATS.get(img_format or "")
    if mime_type not in ALLOWED_MIME_TYPES:
        raise UnsupportedFormatError(
            (img_format or "unknown").lower(),
            supported=sorted(SUPPORTED_FORMATS),
        )
    return mime_type
