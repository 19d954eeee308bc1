"""EXIF/GPS tag reading and normalization."""

import logging
import math
from collections.abc import Mapping
from datetime import datetime
from io import BytesIO
from typing import Any

from PIL import ExifTags, Image
from PIL.TiffImagePlugin import IFDRational

from photo_privacy_analyzer.errors import MetadataParseFailure
from photo_privacy_analyzer.models import GpsCoordinate, NormalizedMetadata

logger = logging.getLogger(__name__)

EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"

# Tag names consumed by the normalized schema; everything else goes to ``other``
KNOWN_TAGS = frozenset(
    {
        "Make",
        "Model",
        "Software",
        "DateTime",
        "DateTimeOriginal",
        "DateTimeDigitized",
        "ExposureTime",
        "FNumber",
        "ISOSpeedRatings",
        "PhotographicSensitivity",
        "FocalLength",
        "Flash",
        "Orientation",
        "ColorSpace",
        "XResolution",
        "YResolution",
        "ResolutionUnit",
        "GPSLatitude",
        "GPSLatitudeRef",
        "GPSLongitude",
        "GPSLongitudeRef",
        "GPSAltitude",
        "GPSAltitudeRef",
    }
)

# Offsets to sub-IFDs: container plumbing, not photo metadata
POINTER_TAGS = frozenset({"ExifOffset", "GPSInfo", "ExifInteroperabilityOffset"})

ORIENTATIONS = {
    1: "Horizontal (normal)",
    2: "Mirror horizontal",
    3: "Rotate 180",
    4: "Mirror vertical",
    5: "Mirror horizontal and rotate 270 CW",
    6: "Rotate 90 CW",
    7: "Mirror horizontal and rotate 90 CW",
    8: "Rotate 270 CW",
}
COLOR_SPACES = {1: "sRGB", 2: "Adobe RGB", 65535: "Uncalibrated"}
RESOLUTION_UNITS = {1: "None", 2: "inches", 3: "cm"}


def extract(image_bytes: bytes) -> NormalizedMetadata:
    """Parse embedded metadata into a NormalizedMetadata record.

    Never raises. A photo without readable metadata yields an empty record,
    which is an expected outcome rather than an error.
    """
    try:
        tags = read_tags(image_bytes)
        try:
            return normalize_tags(tags)
        except (TypeError, ValueError, ArithmeticError) as e:
            raise MetadataParseFailure(f"Unreadable tag values: {e}") from e
    except MetadataParseFailure as e:
        logger.warning("No extractable metadata: %s", e)
        return NormalizedMetadata()


def read_tags(image_bytes: bytes) -> dict[str, Any]:
    """Read IFD0, Exif and GPS tags into one name-keyed mapping."""
    try:
        with Image.open(BytesIO(image_bytes)) as img:
            exif = img.getexif()
            tags = _named(exif, ExifTags.TAGS)
            tags.update(_named(exif.get_ifd(ExifTags.IFD.Exif), ExifTags.TAGS))
            tags.update(_named(exif.get_ifd(ExifTags.IFD.GPSInfo), ExifTags.GPSTAGS))
    except Exception as e:
        raise MetadataParseFailure(f"{type(e).__name__}: {e}") from e
    logger.debug("Read %d metadata tags", len(tags))
    return tags


def normalize_tags(tags: Mapping[str, Any]) -> NormalizedMetadata:
    """Map reader-specific tag names onto the normalized schema."""
    plain = {name: _plain(value) for name, value in tags.items() if name not in POINTER_TAGS}
    iso = plain.get("ISOSpeedRatings", plain.get("PhotographicSensitivity"))
    return NormalizedMetadata(
        make=_text(plain.get("Make")),
        model=_text(plain.get("Model")),
        software=_text(plain.get("Software")),
        capture_time=_capture_time(plain),
        gps=_gps(plain),
        exposure_time=_number(plain.get("ExposureTime")),
        f_number=_number(plain.get("FNumber")),
        iso=_integer(iso),
        focal_length=_number(plain.get("FocalLength")),
        flash=_flash(plain.get("Flash")),
        orientation=_enum(ORIENTATIONS, plain.get("Orientation")),
        color_space=_enum(COLOR_SPACES, plain.get("ColorSpace")),
        x_resolution=_number(plain.get("XResolution")),
        y_resolution=_number(plain.get("YResolution")),
        resolution_unit=_enum(RESOLUTION_UNITS, plain.get("ResolutionUnit")),
        other={name: value for name, value in plain.items() if name not in KNOWN_TAGS},
    )


def _named(ifd: Mapping[int, Any], names: Mapping[int, str]) -> dict[str, Any]:
    return {names.get(tag, f"Tag{tag:#06x}"): value for tag, value in ifd.items()}


def _plain(value: Any) -> Any:
    """Turn reader-specific value types into plain Python values."""
    if isinstance(value, IFDRational):
        return float(value)
    if isinstance(value, tuple):
        return tuple(_plain(v) for v in value)
    if isinstance(value, str):
        return value.rstrip("\x00").strip()
    return value


def _text(value: Any) -> str | None:
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace").rstrip("\x00").strip()
    if value is None or value == "":
        return None
    return str(value)


def _number(value: Any) -> float | None:
    if isinstance(value, tuple) and len(value) == 1:
        value = value[0]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    number = float(value)
    return number if math.isfinite(number) else None


def _integer(value: Any) -> int | None:
    number = _number(value)
    return int(number) if number is not None else None


def _flash(value: Any) -> bool | None:
    number = _integer(value)
    if number is None:
        return None
    # Bit 0 of the EXIF Flash bitfield: flash fired
    return bool(number & 1)


def _enum(table: Mapping[int, str], value: Any) -> str | None:
    number = _integer(value)
    if number is None:
        return _text(value) if isinstance(value, str) else None
    return table.get(number, str(number))


def _capture_time(tags: Mapping[str, Any]) -> datetime | str | None:
    for name in ("DateTime", "DateTimeOriginal", "DateTimeDigitized"):
        raw = _text(tags.get(name))
        if raw is None:
            continue
        try:
            return datetime.strptime(raw, EXIF_DATETIME_FORMAT)
        except ValueError:
            return raw
    return None


def _gps(tags: Mapping[str, Any]) -> GpsCoordinate | None:
    latitude = _dms_to_degrees(tags.get("GPSLatitude"), tags.get("GPSLatitudeRef"))
    longitude = _dms_to_degrees(tags.get("GPSLongitude"), tags.get("GPSLongitudeRef"))
    if latitude is None or longitude is None:
        return None

    altitude = _number(tags.get("GPSAltitude"))
    if altitude is not None and _integer(_ref_byte(tags.get("GPSAltitudeRef"))) == 1:
        altitude = -altitude
    return GpsCoordinate(latitude=latitude, longitude=longitude, altitude=altitude)


def _dms_to_degrees(value: Any, ref: Any) -> float | None:
    """Convert a (degrees, minutes, seconds) triple and N/S/E/W ref to decimal degrees."""
    if value is None:
        return None
    if isinstance(value, tuple):
        parts = [_number(v) for v in value[:3]]
        if not parts or any(p is None for p in parts):
            return None
        parts += [0.0] * (3 - len(parts))
        degrees = parts[0] + parts[1] / 60.0 + parts[2] / 3600.0
    else:
        degrees = _number(value)
        if degrees is None:
            return None
    if not math.isfinite(degrees):
        return None

    ref_text = _text(ref)
    if ref_text and ref_text.upper()[0] in ("S", "W"):
        degrees = -degrees
    return degrees


def _ref_byte(value: Any) -> Any:
    # GPSAltitudeRef is stored as a single BYTE; readers return b"\x01" or 1
    if isinstance(value, bytes) and len(value) == 1:
        return value[0]
    return value
