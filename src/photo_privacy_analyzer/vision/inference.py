"""Heuristic inference of people, lifestyle and ad targeting from fused labels."""

import logging
import random
from collections.abc import Iterable, Sequence

from photo_privacy_analyzer.models import (
    ClassificationBundle,
    FaceAnnotation,
    FusedLabel,
    WebDetection,
)
from photo_privacy_analyzer.vision import taxonomy
from photo_privacy_analyzer.vision.faces import (
    DEFAULT_EMOTION_JITTER,
    FaceGeometryClassifier,
    FixedShapeClassifier,
    demographics,
    emotion_for,
)
from photo_privacy_analyzer.vision.fusion import LabelSources, fuse
from photo_privacy_analyzer.vision.taxonomy import KeywordTaxonomy, any_keyword, contains_any

logger = logging.getLogger(__name__)

OBJECT_MIN_SCORE = 0.15
TOP_LABELS_FOR_CONFIDENCE = 10
CONFIDENCE_SCALE = 1.2
CONFIDENCE_BOUNDS = (0.5, 1.0)

DEFAULT_CLOTHING = "Casual clothing"
DEFAULT_INTEREST = "General interests"
DEFAULT_INCOME = "Middle Income"
DEFAULT_POLITICAL = "Neutral/Unknown"


def default_bundle() -> ClassificationBundle:
    """The all-defaults bundle used when there is nothing (or nothing usable) to go on."""
    return ClassificationBundle(
        people_count=1,
        emotions={"Person 1": "Neutral"},
        gender_guess=["Unknown"],
        age_guess=["Adult"],
        race_guess=["Unknown"],
        clothing=[DEFAULT_CLOTHING],
        objects=[],
        interests=[DEFAULT_INTEREST],
        income_range=DEFAULT_INCOME,
        political_affiliation=DEFAULT_POLITICAL,
        targeted_ad_categories=[taxonomy.GENERIC_AD],
    )


def _unique(items: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(items))


class InferenceEngine:
    """Turns fused labels and face annotations into a ClassificationBundle.

    Every guess is a keyword or geometry heuristic. ``infer`` never raises:
    any internal error is logged and the default bundle is returned.
    """

    def __init__(
        self,
        race: KeywordTaxonomy = taxonomy.RACE,
        interests: KeywordTaxonomy = taxonomy.INTERESTS,
        political: KeywordTaxonomy = taxonomy.POLITICAL,
        income: KeywordTaxonomy = taxonomy.INCOME,
        face_classifier: FaceGeometryClassifier | None = None,
        emotion_jitter: float = DEFAULT_EMOTION_JITTER,
        rng: random.Random | None = None,
    ) -> None:
        self.race = race
        self.interests = interests
        self.political = political
        self.income = income
        self.face_classifier = face_classifier or FixedShapeClassifier()
        self.emotion_jitter = emotion_jitter
        self.rng = rng

    def infer(
        self,
        labels: Sequence[FusedLabel],
        faces: Sequence[FaceAnnotation] | None = None,
        web_context: WebDetection | None = None,
    ) -> ClassificationBundle:
        """Build a bundle; with no labels, the web context alone is fused for labels.

        Args:
            labels: Fused labels, any order.
            faces: Face annotations from the vision response.
            web_context: Web-detection block, used when ``labels`` is empty.
        """
        try:
            return self._infer(labels, faces or [], web_context)
        except Exception:
            logger.exception("Inference failed, falling back to defaults")
            return default_bundle()

    def _infer(
        self,
        labels: Sequence[FusedLabel],
        faces: Sequence[FaceAnnotation],
        web_context: WebDetection | None,
    ) -> ClassificationBundle:
        labels = sorted(labels, key=lambda label: label.score, reverse=True)
        if not labels and web_context is not None:
            labels = fuse(LabelSources.from_web(web_context))
        bundle = default_bundle()
        if not labels and not faces:
            return bundle

        if faces:
            self._apply_faces(bundle, faces)
        elif not any_keyword(labels, taxonomy.PERSON_KEYWORDS):
            # Nobody to describe: per-person fields stay empty
            bundle.people_count = 0
            bundle.emotions = {}
            bundle.gender_guess = []
            bundle.age_guess = []

        if labels:
            self._apply_labels(bundle, labels)

        logger.debug(
            "Inferred %d people, interests=%s, income=%s",
            bundle.people_count,
            bundle.interests,
            bundle.income_range,
        )
        return bundle

    def _apply_faces(self, bundle: ClassificationBundle, faces: Sequence[FaceAnnotation]) -> None:
        bundle.people_count = len(faces)
        bundle.emotions = {
            f"Person {i}": emotion_for(face, self.emotion_jitter, self.rng)
            for i, face in enumerate(faces, start=1)
        }
        genders: list[str] = []
        ages: list[str] = []
        for face in faces:
            gender, age = demographics(face, self.face_classifier)
            if gender:
                genders.append(gender)
            if age:
                ages.append(age)
        bundle.gender_guess = _unique(genders) or ["Unknown"]
        bundle.age_guess = _unique(ages) or ["Adult"]

    def _apply_labels(self, bundle: ClassificationBundle, labels: Sequence[FusedLabel]) -> None:
        bundle.clothing = clothing_items(labels) or [DEFAULT_CLOTHING]
        bundle.race_guess = self.race.matches(labels) or ["Unknown"]
        bundle.objects = [label.description for label in labels if label.score > OBJECT_MIN_SCORE]

        detected = self.interests.matches(
            labels, self.interests.threshold * confidence_multiplier(labels)
        )
        fallback = fallback_interests(labels)
        bundle.interests = detected or fallback or [DEFAULT_INTEREST]

        bundle.political_affiliation = self.political.first_match(labels) or political_fallback(
            labels, detected
        )
        bundle.income_range = self.income.first_match(labels) or income_fallback(labels)
        bundle.targeted_ad_categories = ad_categories(
            bundle.interests, bundle.income_range, labels
        )


def confidence_multiplier(labels: Sequence[FusedLabel]) -> float:
    """1.2x the mean of the top-10 scores, clamped to [0.5, 1.0]."""
    top = sorted((label.score for label in labels), reverse=True)[:TOP_LABELS_FOR_CONFIDENCE]
    if not top:
        return CONFIDENCE_BOUNDS[0]
    low, high = CONFIDENCE_BOUNDS
    return min(high, max(low, sum(top) / len(top) * CONFIDENCE_SCALE))


def clothing_items(labels: Sequence[FusedLabel]) -> list[str]:
    """First upper-body item, first lower-body item and every accessory."""
    items = [
        label.description
        for label in labels
        if label.score > taxonomy.CLOTHING_THRESHOLD
        and contains_any(label.description, taxonomy.CLOTHING_KEYWORDS)
    ]
    upper: list[str] = []
    lower: list[str] = []
    accessories: list[str] = []
    for item in items:
        if contains_any(item, taxonomy.UPPER_BODY):
            upper.append(item)
        elif contains_any(item, taxonomy.LOWER_BODY):
            lower.append(item)
        elif contains_any(item, taxonomy.ACCESSORIES):
            accessories.append(item)
    return _unique(upper[:1] + lower[:1] + accessories)


def fallback_interests(labels: Sequence[FusedLabel]) -> list[str]:
    found: list[str] = []
    for keywords, interests in taxonomy.INTEREST_FALLBACKS:
        if any_keyword(labels, keywords):
            found.extend(interests)
    return _unique(found)


def political_fallback(labels: Sequence[FusedLabel], interests: Sequence[str]) -> str:
    if "Nature" in interests and "Travel" in interests and "Technology" not in interests:
        return "Liberal Leaning"
    if any_keyword(
        labels, taxonomy.CONSERVATIVE_CONTEXT, above=taxonomy.CONSERVATIVE_CONTEXT_THRESHOLD
    ):
        return "Conservative Leaning"
    return DEFAULT_POLITICAL


def income_fallback(labels: Sequence[FusedLabel]) -> str:
    if any_keyword(labels, taxonomy.LUXURY_CONTEXT) or any_keyword(
        labels, taxonomy.HIGH_END_ACTIVITIES
    ):
        return "High Income"
    if any_keyword(labels, taxonomy.SIMPLE_LIFESTYLE):
        return "Low Income"
    return DEFAULT_INCOME


def ad_categories(
    interests: Sequence[str], income_range: str, labels: Sequence[FusedLabel]
) -> list[str]:
    """Deduplicated ad categories from interests, income tier and objects, at most 8."""
    ads: list[str] = []
    for interest in interests:
        ads.extend(taxonomy.INTEREST_ADS.get(interest, (taxonomy.GENERIC_AD,)))
    ads.extend(taxonomy.INCOME_ADS.get(income_range, taxonomy.INCOME_ADS["Low Income"]))
    for label in labels:
        if label.score <= taxonomy.OBJECT_AD_THRESHOLD:
            continue
        for keywords, categories in taxonomy.OBJECT_AD_TRIGGERS:
            if contains_any(label.description, keywords):
                ads.extend(categories)
                break
    return _unique(ads)[: taxonomy.MAX_AD_CATEGORIES] or [taxonomy.GENERIC_AD]
