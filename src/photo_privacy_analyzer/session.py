"""Upload validation and the per-photo analysis session."""

import logging
import mimetypes
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from photo_privacy_analyzer.config import ALLOWED_MIME_TYPES, DEFAULT_LOCALE, MAX_UPLOAD_BYTES
from photo_privacy_analyzer.errors import ExternalServiceFailure, NoPhotoLoaded, UploadRejected
from photo_privacy_analyzer.metadata.extractor import extract
from photo_privacy_analyzer.metadata.report import build_report
from photo_privacy_analyzer.metadata.stripper import sanitized_filename, strip
from photo_privacy_analyzer.models import (
    AnalysisReport,
    ClassificationBundle,
    NormalizedMetadata,
    VisionResponse,
)
from photo_privacy_analyzer.vision.client import VisionClient
from photo_privacy_analyzer.vision.fusion import LabelSources, fuse
from photo_privacy_analyzer.vision.inference import InferenceEngine, default_bundle
from photo_privacy_analyzer.vision.refine import refine_response

logger = logging.getLogger(__name__)

mimetypes.add_type("image/webp", ".webp")


@dataclass(frozen=True)
class UploadedPhoto:
    """A validated image file held in memory."""

    filename: str
    mime_type: str
    content: bytes


@dataclass(frozen=True)
class PhotoAnalysis:
    """Everything produced for one uploaded photo."""

    upload: UploadedPhoto
    metadata: NormalizedMetadata
    report: AnalysisReport
    bundle: ClassificationBundle | None  # None when vision analysis is disabled
    generation: int
    vision: VisionResponse | None = None  # raw annotations, None when unavailable


@dataclass(frozen=True)
class SanitizedPhoto:
    filename: str
    content: bytes


def validate_upload(filename: str, content: bytes, mime_type: str | None = None) -> UploadedPhoto:
    """Accept only JPEG, PNG or WebP images up to 10 MB.

    The MIME type is guessed from ``filename`` when not given.
    """
    mime_type = mime_type or mimetypes.guess_type(filename)[0]
    if mime_type not in ALLOWED_MIME_TYPES:
        raise UploadRejected(
            f"{filename}: unsupported file type {mime_type or 'unknown'} "
            f"(accepted: {', '.join(ALLOWED_MIME_TYPES)})"
        )
    if len(content) > MAX_UPLOAD_BYTES:
        raise UploadRejected(
            f"{filename}: {len(content)} bytes exceeds the "
            f"{MAX_UPLOAD_BYTES // (1024 * 1024)} MB limit"
        )
    return UploadedPhoto(filename=filename, mime_type=mime_type, content=content)


def load_upload(path: str | Path) -> UploadedPhoto:
    """Read and validate a single image file from disk."""
    path = Path(path)
    if not path.is_file():
        raise UploadRejected(f"{path}: not a file")
    if path.stat().st_size > MAX_UPLOAD_BYTES:
        raise UploadRejected(
            f"{path.name}: file exceeds the {MAX_UPLOAD_BYTES // (1024 * 1024)} MB limit"
        )
    return validate_upload(path.name, path.read_bytes())


class AnalysisSession:
    """Owns the state for the photo currently being analyzed.

    Each ``analyze`` call takes a new generation number. Only the result of
    the most recently started call is kept as ``current``; an older call
    that finishes later still returns its result but does not replace it.
    """

    def __init__(
        self,
        vision_client: VisionClient | None = None,
        engine: InferenceEngine | None = None,
        locale: str = DEFAULT_LOCALE,
        use_vision: bool = True,
    ) -> None:
        self.vision_client = vision_client
        self.engine = engine or InferenceEngine()
        self.locale = locale
        self.use_vision = use_vision
        self.current: PhotoAnalysis | None = None
        self._generation = 0

    async def analyze(self, upload: UploadedPhoto) -> PhotoAnalysis:
        """Run metadata extraction, the privacy report and vision inference."""
        self._generation += 1
        generation = self._generation

        metadata = extract(upload.content)
        report = build_report(upload.filename, metadata, self.locale)
        bundle, vision = None, None
        if self.use_vision:
            bundle, vision = await self._classify(upload.content)

        analysis = PhotoAnalysis(
            upload=upload,
            metadata=metadata,
            report=report,
            bundle=bundle,
            generation=generation,
            vision=vision,
        )
        if generation == self._generation:
            self.current = analysis
        else:
            logger.info("Discarding stale analysis of %s", upload.filename)
        return analysis

    def clear(self) -> None:
        """Forget the current photo; results still in flight are discarded too."""
        self._generation += 1
        self.current = None

    def strip_current(self, when: datetime | None = None) -> SanitizedPhoto:
        """Produce the metadata-free download for the current photo.

        Raises:
            NoPhotoLoaded: nothing has been analyzed, or the session was cleared.
            StripFailure: the image could not be decoded or re-encoded.
        """
        if self.current is None:
            raise NoPhotoLoaded("No photo has been analyzed")
        content = strip(self.current.upload.content)
        return SanitizedPhoto(filename=sanitized_filename(when), content=content)

    async def _classify(
        self, content: bytes
    ) -> tuple[ClassificationBundle, VisionResponse | None]:
        try:
            if self.vision_client is None:
                self.vision_client = VisionClient()
            response = await self.vision_client.annotate(content)
        except ExternalServiceFailure as e:
            logger.warning("Vision analysis unavailable: %s", e)
            bundle = default_bundle()
            bundle.error = str(e)
            return bundle, None

        refined = refine_response(response)
        if not refined.has_signals:
            logger.info("Vision response has no labels, faces or web matches")
            return default_bundle(), response
        labels = fuse(LabelSources.from_response(refined))
        return self.engine.infer(labels, refined.faces, refined.web), response
