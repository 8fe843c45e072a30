"""Decoders turning downloaded bytes into image objects"""

from io import BytesIO
from typing import Protocol

from PIL import Image as PILImage


class ImageDecoder(Protocol):
    """Protocol for the decoder the image fetcher depends on."""

    def decode(self, content: bytes) -> PILImage.Image:  # pragma: no cover
        """Decode `content` into an image.

        Raises:
            Exception: Any error when the bytes are not a valid image.
        """
        ...


class PillowImageDecoder:
    """Decode images with Pillow, loading pixel data so truncated files fail early."""

    def decode(self, content: bytes) -> PILImage.Image:
        """Open and fully load the image held in `content`."""
        image = PILImage.open(BytesIO(content))
        image.load()
        return image
