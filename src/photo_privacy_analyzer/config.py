"""Project-wide configuration."""

import os
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(os.environ.get("PHOTO_PRIVACY_PROJECT_ROOT", Path.cwd()))

load_dotenv(PROJECT_ROOT / ".env")

LOG_LEVEL = os.environ.get("PHOTO_PRIVACY_LOG_LEVEL", "INFO")
DEFAULT_LOCALE = os.environ.get("PHOTO_PRIVACY_LOCALE", "en")

# Uploads
MAX_UPLOAD_BYTES = 10 * 1024 * 1024
ALLOWED_MIME_TYPES = ("image/jpeg", "image/png", "image/webp")

# Metadata stripping
STRIP_JPEG_QUALITY = 95
SANITIZED_FILENAME_PREFIX = "metadata_removed"

# Google Cloud Vision
VISION_API_KEY = os.environ.get("GOOGLE_VISION_API_KEY", "")
VISION_API_URL = os.environ.get(
    "VISION_API_URL", "https://vision.googleapis.com/v1/images:annotate"
)
VISION_TIMEOUT = int(os.environ.get("VISION_TIMEOUT", "30"))

VISION_FEATURES = (
    "LABEL_DETECTION",
    "TEXT_DETECTION",
    "FACE_DETECTION",
    "LANDMARK_DETECTION",
    "LOGO_DETECTION",
    "OBJECT_LOCALIZATION",
    "SAFE_SEARCH_DETECTION",
    "IMAGE_PROPERTIES",
    "CROP_HINTS",
    "WEB_DETECTION",
)

# Per-feature maxResults; anything not listed uses VISION_DEFAULT_MAX_RESULTS
VISION_MAX_RESULTS: dict[str, int] = {
    "LABEL_DETECTION": 100,
    "OBJECT_LOCALIZATION": 75,
    "WEB_DETECTION": 75,
    "FACE_DETECTION": 50,
}
VISION_DEFAULT_MAX_RESULTS = 40

# Features that request the newest model explicitly
VISION_LATEST_MODEL_FEATURES = frozenset(
    {"FACE_DETECTION", "LABEL_DETECTION", "LANDMARK_DETECTION", "OBJECT_LOCALIZATION"}
)

VISION_LANGUAGE_HINTS = (
    "zh-CN", "en", "zh-TW", "ja", "ko", "fr", "de", "es", "ru", "it", "pt", "ar",
)
VISION_CROP_ASPECT_RATIOS = (0.8, 1.0, 1.2, 1.5, 0.67)
