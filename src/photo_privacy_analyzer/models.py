"""Data models for photo metadata, vision results and privacy findings."""

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from typing import Any, Literal

RiskType = Literal["location", "device", "time", "other"]
RiskLevel = Literal["high", "medium", "low"]


@dataclass(frozen=True)
class GpsCoordinate:
    """A resolved capture location in signed decimal degrees."""

    latitude: float
    longitude: float
    altitude: float | None = None


@dataclass(frozen=True)
class NormalizedMetadata:
    """Metadata embedded in a single photo, mapped onto a fixed schema."""

    make: str | None = None
    model: str | None = None
    software: str | None = None
    capture_time: datetime | str | None = None  # opaque string when unparsable
    gps: GpsCoordinate | None = None
    exposure_time: float | None = None
    f_number: float | None = None
    iso: int | None = None
    focal_length: float | None = None
    flash: bool | None = None
    orientation: str | None = None
    color_space: str | None = None
    x_resolution: float | None = None
    y_resolution: float | None = None
    resolution_unit: str | None = None
    other: dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.to_dict()

    def to_dict(self) -> dict[str, Any]:
        """Serialize set fields only; an empty record becomes ``{}``."""
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None or (f.name == "other" and not value):
                continue
            if isinstance(value, GpsCoordinate):
                value = {k: v for k, v in asdict(value).items() if v is not None}
            elif isinstance(value, datetime):
                value = value.isoformat()
            data[f.name] = value
        return data


@dataclass(frozen=True)
class PrivacyRisk:
    """One privacy-relevant finding derived from metadata."""

    type: RiskType
    level: RiskLevel
    description: str
    details: str | None = None


@dataclass(frozen=True)
class MetadataItem:
    name: str
    value: str


@dataclass(frozen=True)
class MetadataCategory:
    category: str
    items: list[MetadataItem]


@dataclass(frozen=True)
class RiskSummary:
    risk_score: int  # 0-100
    high_risks: int
    medium_risks: int
    low_risks: int
    recommendation: str


@dataclass(frozen=True)
class AnalysisReport:
    """Privacy report for one photo, built from its metadata."""

    file_name: str
    has_metadata: bool
    risks: list[PrivacyRisk]
    summary: RiskSummary
    detected_metadata: list[MetadataCategory]


@dataclass(frozen=True)
class FusedLabel:
    """A deduplicated concept with a confidence score in [0, 1]."""

    description: str
    score: float


# ── Vision collaborator response ──────────────────────────────────────


@dataclass(frozen=True)
class LatLng:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class EntityAnnotation:
    """A label, logo or landmark annotation."""

    description: str
    score: float
    locations: list[LatLng] = field(default_factory=list)


@dataclass(frozen=True)
class TextAnnotation:
    description: str
    locale: str | None = None


@dataclass(frozen=True)
class LocalizedObject:
    name: str
    score: float


@dataclass(frozen=True)
class Vertex:
    x: float
    y: float


@dataclass(frozen=True)
class FacialLandmark:
    type: str
    x: float
    y: float
    z: float = 0.0


@dataclass(frozen=True)
class FaceAnnotation:
    """A single detected face, with categorical emotion likelihoods."""

    joy_likelihood: str | None = None
    sorrow_likelihood: str | None = None
    anger_likelihood: str | None = None
    surprise_likelihood: str | None = None
    headwear_likelihood: str | None = None
    detection_confidence: float | None = None
    landmarks: list[FacialLandmark] = field(default_factory=list)
    bounding_poly: list[Vertex] = field(default_factory=list)


@dataclass(frozen=True)
class SafeSearch:
    adult: str = "UNKNOWN"
    spoof: str = "UNKNOWN"
    medical: str = "UNKNOWN"
    violence: str = "UNKNOWN"
    racy: str = "UNKNOWN"


@dataclass(frozen=True)
class DominantColor:
    red: int
    green: int
    blue: int
    score: float
    pixel_fraction: float


@dataclass(frozen=True)
class WebEntity:
    entity_id: str | None
    description: str | None
    score: float


@dataclass(frozen=True)
class WebPage:
    url: str
    page_title: str | None = None


@dataclass(frozen=True)
class WebDetection:
    """Web-detection block: entity guesses, captions and matching pages."""

    web_entities: list[WebEntity] = field(default_factory=list)
    best_guess_labels: list[str] = field(default_factory=list)
    pages_with_matching_images: list[WebPage] = field(default_factory=list)
    full_matching_images: list[str] = field(default_factory=list)
    partial_matching_images: list[str] = field(default_factory=list)
    visually_similar_images: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class VisionResponse:
    """Typed view over one ``images:annotate`` response."""

    labels: list[EntityAnnotation] = field(default_factory=list)
    texts: list[TextAnnotation] = field(default_factory=list)
    faces: list[FaceAnnotation] = field(default_factory=list)
    landmarks: list[EntityAnnotation] = field(default_factory=list)
    logos: list[EntityAnnotation] = field(default_factory=list)
    objects: list[LocalizedObject] = field(default_factory=list)
    safe_search: SafeSearch | None = None
    dominant_colors: list[DominantColor] = field(default_factory=list)
    web: WebDetection | None = None

    @property
    def has_signals(self) -> bool:
        return bool(self.labels or self.faces or self.web)


# ── Inference output ──────────────────────────────────────────────────


@dataclass
class ClassificationBundle:
    """Heuristic guesses about the people and lifestyle shown in a photo.

    Every field is a best-effort inference from labels and face geometry,
    not a statement of fact about anyone in the photo.
    """

    people_count: int
    emotions: dict[str, str]
    gender_guess: list[str]
    age_guess: list[str]
    race_guess: list[str]
    clothing: list[str]
    objects: list[str]
    interests: list[str]
    income_range: str
    political_affiliation: str
    targeted_ad_categories: list[str]
    error: str | None = None
