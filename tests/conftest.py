"""Shared test fixtures."""

from io import BytesIO
from typing import Any

import pytest
from PIL import Image

from photo_privacy_analyzer.models import FusedLabel

# EXIF tag ids
MAKE = 0x010F
MODEL = 0x0110
ORIENTATION = 0x0112
SOFTWARE = 0x0131
DATETIME = 0x0132
GPS_IFD = 0x8825


def make_jpeg(
    tags: dict[int, Any] | None = None,
    gps: dict[int, Any] | None = None,
    size: tuple[int, int] = (32, 24),
) -> bytes:
    """Encode a small solid-color JPEG, optionally with IFD0 tags and a GPS IFD."""
    img = Image.new("RGB", size, (200, 40, 40))
    buf = BytesIO()
    if tags or gps:
        exif = Image.Exif()
        for tag, value in (tags or {}).items():
            exif[tag] = value
        if gps:
            exif[GPS_IFD] = gps
        img.save(buf, "JPEG", exif=exif)
    else:
        img.save(buf, "JPEG")
    return buf.getvalue()


def make_gps(
    latitude: tuple[float, float, float] | None = (37.0, 0.0, 0.0),
    latitude_ref: str = "N",
    longitude: tuple[float, float, float] | None = (122.0, 0.0, 0.0),
    longitude_ref: str = "W",
) -> dict[int, Any]:
    """GPS IFD entries keyed by GPS tag id."""
    gps: dict[int, Any] = {}
    if latitude is not None:
        gps[1] = latitude_ref
        gps[2] = latitude
    if longitude is not None:
        gps[3] = longitude_ref
        gps[4] = longitude
    return gps


def make_labels(*pairs: tuple[str, float]) -> list[FusedLabel]:
    """Helper to create fused labels from (description, score) pairs."""
    return [FusedLabel(description, score) for description, score in pairs]


@pytest.fixture
def exif_jpeg() -> bytes:
    """JPEG with device, time and GPS metadata."""
    return make_jpeg(
        tags={
            MAKE: "Acme",
            MODEL: "X1",
            SOFTWARE: "Firmware 1.0",
            DATETIME: "2024:05:01 12:30:00",
        },
        gps=make_gps(),
    )


@pytest.fixture
def plain_jpeg() -> bytes:
    """JPEG without any metadata."""
    return make_jpeg()


@pytest.fixture
def png_bytes() -> bytes:
    img = Image.new("RGBA", (20, 10), (10, 120, 200, 255))
    buf = BytesIO()
    img.save(buf, "PNG")
    return buf.getvalue()


@pytest.fixture
def vision_payload() -> dict[str, Any]:
    """One element of an ``images:annotate`` ``responses`` array."""
    return {
        "labelAnnotations": [
            {"description": "Smile", "score": 0.93},
            {"description": "Beach", "score": 0.88},
            {"description": "Sunglasses", "score": 0.8},
            {"description": "T-shirt", "score": 0.75},
            {"description": "Vacation", "score": 0.7},
            {"description": "Sand", "score": 0.2},
        ],
        "faceAnnotations": [
            {
                "joyLikelihood": "VERY_LIKELY",
                "sorrowLikelihood": "VERY_UNLIKELY",
                "angerLikelihood": "VERY_UNLIKELY",
                "surpriseLikelihood": "UNLIKELY",
                "headwearLikelihood": "VERY_UNLIKELY",
                "detectionConfidence": 0.98,
                "boundingPoly": {
                    "vertices": [
                        {"x": 100, "y": 100},
                        {"x": 300, "y": 100},
                        {"x": 300, "y": 320},
                        {"x": 100, "y": 320},
                    ]
                },
                "landmarks": [
                    {"type": "LEFT_EYE", "position": {"x": 160.0, "y": 180.0, "z": 0.0}},
                    {"type": "RIGHT_EYE", "position": {"x": 230.0, "y": 180.0, "z": 1.5}},
                ],
            }
        ],
        "landmarkAnnotations": [
            {
                "description": "Waikiki Beach",
                "score": 0.82,
                "locations": [{"latLng": {"latitude": 21.27, "longitude": -157.83}}],
            }
        ],
        "localizedObjectAnnotations": [{"name": "Person", "score": 0.91}],
        "safeSearchAnnotation": {
            "adult": "VERY_UNLIKELY",
            "spoof": "UNLIKELY",
            "medical": "VERY_UNLIKELY",
            "violence": "VERY_UNLIKELY",
            "racy": "POSSIBLE",
        },
        "imagePropertiesAnnotation": {
            "dominantColors": {
                "colors": [
                    {
                        "color": {"red": 20, "green": 120, "blue": 200},
                        "score": 0.6,
                        "pixelFraction": 0.4,
                    }
                ]
            }
        },
        "cropHintsAnnotation": {"cropHints": [{"confidence": 0.8, "importanceFraction": 1.0}]},
        "webDetection": {
            "webEntities": [
                {"entityId": "/m/0b3yr", "score": 0.7, "description": "Beach"},
                {"entityId": "/m/x", "score": 0.05, "description": "Noise"},
                {"entityId": "/m/y", "score": 0.5},
            ],
            "bestGuessLabels": [{"label": "waikiki beach", "languageCode": "en"}],
            "pagesWithMatchingImages": [
                {"url": "https://example.com/a", "pageTitle": "Summer at Waikiki Beach"},
                {"url": "https://example.com/b", "pageTitle": "Waikiki Beach travel guide"},
                {"url": "https://example.com/c"},
            ],
            "fullMatchingImages": [{"url": "https://example.com/full.jpg"}],
            "visuallySimilarImages": [{"url": "https://example.com/similar.jpg"}],
        },
    }
