"""
Canonical Image Value Object

The single in-memory image representation every input source is
normalized to before analysis.
"""

from dataclasses import dataclass, field
import base64


JPEG = "image/jpeg"
PNG = "image/png"
GIF = "image/gif"

ALLOWED_MIME_TYPES = frozenset({JPEG, PNG, GIF})


@dataclass(frozen=True)
class CanonicalImage:
    """
    Immutable value object holding raw image bytes and their MIME type.

    Attributes:
        data: Raw encoded image bytes (never empty)
        mime_type: One of image/jpeg, image/png, image/gif
    """

    data: bytes = field(repr=False)
    mime_type: str = JPEG

    def __post_init__(self) -> None:
        """Validate the allow-set and non-empty payload."""
        if not self.data:
            raise ValueError("CanonicalImage data cannot be empty")
        if self.mime_type not in ALLOWED_MIME_TYPES:
            raise ValueError(
                f"CanonicalImage mime_type must be one of {sorted(ALLOWED_MIME_TYPES)}, "
                f"got {self.mime_type!r}"
            )

    @property
    def base64_string(self) -> str:
        """Base64 encoded payload."""
        return base64.b64encode(self.data).decode("utf-8")

    @property
    def data_url(self) -> str:
        """RFC 2397 data URL, as accepted by OpenAI-style image inputs."""
        return f"data:{self.mime_type};base64,{self.base64_string}"

    @property
    def format(self) -> str:
        """Short format name (jpeg, png, gif)."""
        return self.mime_type.split("/", 1)[1]

    def __len__(self) -> int:
        return len(self.data)

    def __str__(self) -> str:
        return f"CanonicalImage({self.mime_type}, {len(self.data)} bytes)"
