"""Metadata removal by re-encoding raw pixels."""

import logging
from datetime import UTC, datetime
from io import BytesIO
from pathlib import Path

from PIL import Image, ImageOps

from photo_privacy_analyzer.config import SANITIZED_FILENAME_PREFIX, STRIP_JPEG_QUALITY
from photo_privacy_analyzer.errors import DecodeError, EncodeError

logger = logging.getLogger(__name__)


def strip(source: bytes | str | Path, quality: int = STRIP_JPEG_QUALITY) -> bytes:
    """Return a JPEG copy of ``source`` that carries no metadata at all.

    The image is decoded to a pixel surface and that surface alone is
    encoded again, so EXIF, XMP, ICC and text chunks cannot survive.
    The output is lossy and always JPEG, whatever the input format.

    Raises:
        DecodeError: the source could not be read or decoded.
        EncodeError: the pixel surface could not be encoded.
    """
    surface = _decode(_read_source(source))

    buffer = BytesIO()
    try:
        surface.save(buffer, format="JPEG", quality=quality)
    except (OSError, ValueError) as e:
        raise EncodeError(f"Could not encode sanitized image: {e}") from e

    content = buffer.getvalue()
    logger.info("Stripped image %dx%d -> %d bytes", surface.width, surface.height, len(content))
    return content


def sanitized_filename(when: datetime | None = None) -> str:
    """Download name for a sanitized image, embedding the strip time in ms."""
    when = when or datetime.now(UTC)
    return f"{SANITIZED_FILENAME_PREFIX}_{int(when.timestamp() * 1000)}.jpg"


def _read_source(source: bytes | str | Path) -> bytes:
    if isinstance(source, bytes):
        return source
    try:
        return Path(source).read_bytes()
    except OSError as e:
        raise DecodeError(f"Could not read image {source}: {e}") from e


def _decode(content: bytes) -> Image.Image:
    """Decode to an RGB surface at native size, detached from the container."""
    try:
        with Image.open(BytesIO(content)) as img:
            # Bake the orientation tag into the pixels before it is dropped
            upright = ImageOps.exif_transpose(img)
            rgb = upright.convert("RGB")
            return Image.frombytes(rgb.mode, rgb.size, rgb.tobytes())
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Could not decode image: {e}") from e
