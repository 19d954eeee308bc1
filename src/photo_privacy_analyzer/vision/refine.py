"""Clean-up and emphasis of raw vision labels before fusion."""

import logging
from collections.abc import Iterable
from dataclasses import replace

from photo_privacy_analyzer.models import EntityAnnotation, VisionResponse
from photo_privacy_analyzer.vision import taxonomy
from photo_privacy_analyzer.vision.taxonomy import contains_any

logger = logging.getLogger(__name__)

MIN_LABEL_SCORE = 0.25
CONFIDENT_LABEL_SCORE = 0.7
CONFIDENT_LABEL_BOOST = 1.2
LANDMARK_MIN_SCORE = 0.7
SCENE_BOOST = 1.3
INDOOR_BOOST = 1.25
EVENT_MIN_SCORE = 0.5
EVENT_BOOST = 1.3


def refine_response(response: VisionResponse) -> VisionResponse:
    """Return ``response`` with its labels filtered, boosted and enriched.

    Weak labels are dropped and confident ones strengthened, a confident
    landmark becomes a label, and labels matching the dominant scene
    (nature, urban or indoor) and the main event are emphasized.
    """
    labels = [
        _scaled(label, CONFIDENT_LABEL_BOOST) if label.score > CONFIDENT_LABEL_SCORE else label
        for label in response.labels
        if label.score > MIN_LABEL_SCORE
    ]
    labels.sort(key=lambda label: label.score, reverse=True)
    labels = _with_landmark(labels, response.landmarks)
    labels = _emphasize_scene(labels)
    labels = _emphasize_event(labels)
    return replace(response, labels=labels)


def _scaled(label: EntityAnnotation, factor: float) -> EntityAnnotation:
    return replace(label, score=min(1.0, label.score * factor))


def _score_sum(labels: Iterable[EntityAnnotation], keywords: tuple[str, ...]) -> float:
    return sum(label.score for label in labels if contains_any(label.description, keywords))


def _boost_matching(
    labels: list[EntityAnnotation], keywords: tuple[str, ...], factor: float
) -> list[EntityAnnotation]:
    return [
        _scaled(label, factor) if contains_any(label.description, keywords) else label
        for label in labels
    ]


def _with_landmark(
    labels: list[EntityAnnotation], landmarks: list[EntityAnnotation]
) -> list[EntityAnnotation]:
    if not landmarks:
        return labels
    top = landmarks[0]
    if top.score <= LANDMARK_MIN_SCORE:
        return labels
    name = top.description.lower()
    if any(name in label.description.lower() for label in labels):
        return labels
    logger.debug("Adding landmark %r as a label", top.description)
    return [*labels, EntityAnnotation(description=top.description, score=top.score)]


def _emphasize_scene(labels: list[EntityAnnotation]) -> list[EntityAnnotation]:
    environment = [
        label for label in labels if contains_any(label.description, taxonomy.ENVIRONMENT_KEYWORDS)
    ]
    if not environment:
        return labels

    outdoor = _score_sum(environment, taxonomy.OUTDOOR_KEYWORDS)
    indoor = _score_sum(environment, taxonomy.INDOOR_KEYWORDS)
    if outdoor > indoor:
        nature = _score_sum(environment, taxonomy.NATURE_KEYWORDS)
        urban = _score_sum(environment, taxonomy.URBAN_KEYWORDS)
        keywords = (
            taxonomy.NATURE_BOOST_KEYWORDS if nature > urban else taxonomy.URBAN_BOOST_KEYWORDS
        )
        return _boost_matching(labels, keywords, SCENE_BOOST)
    if indoor > outdoor:
        return _boost_matching(labels, taxonomy.INDOOR_BOOST_KEYWORDS, INDOOR_BOOST)
    return labels


def _emphasize_event(labels: list[EntityAnnotation]) -> list[EntityAnnotation]:
    events = [label for label in labels if contains_any(label.description, taxonomy.EVENT_KEYWORDS)]
    if not events:
        return labels
    top = max(events, key=lambda label: label.score)
    if top.score <= EVENT_MIN_SCORE:
        return labels
    return [
        _scaled(label, EVENT_BOOST) if label.description == top.description else label
        for label in labels
    ]
