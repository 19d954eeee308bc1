"""Per-face heuristics: emotion ranking and landmark-based demographic guesses."""

import random
from collections.abc import Sequence
from typing import Protocol

import numpy as np

from photo_privacy_analyzer.models import FaceAnnotation, FacialLandmark, Vertex

LIKELIHOOD_SCORES = {
    "VERY_LIKELY": 0.95,
    "LIKELY": 0.8,
    "POSSIBLE": 0.6,
    "UNLIKELY": 0.3,
    "VERY_UNLIKELY": 0.1,
}

STRONG_EMOTION = 0.6
NEUTRAL_BASELINE = 0.1
NEUTRAL_FALLBACK = 0.8
SOFT_EMOTIONS = ("Joy", "Surprise")
SOFT_SIGNAL_CEILING = 0.3
DEFAULT_EMOTION_JITTER = 0.25
JITTER_RANGE = (0.2, 0.3)
RANK_THRESHOLD = 0.3
BLEND_MARGIN = 0.3

SHAPE_GENDER = {"square": "Male", "rectangle": "Male", "heart": "Female", "oval": "Female"}

CHILD_EYE_RATIO = 0.3
YOUNG_ADULT_EYE_RATIO = 0.25
# Divisor used when the face has no bounding box
FALLBACK_FACE_WIDTH = 2.0


class FaceGeometryClassifier(Protocol):
    """Classifies face shape from facial landmarks."""

    def face_shape(self, landmarks: Sequence[FacialLandmark]) -> str: ...


class FixedShapeClassifier:
    """Always reports the same face shape."""

    def __init__(self, shape: str = "oval") -> None:
        self.shape = shape

    def face_shape(self, landmarks: Sequence[FacialLandmark]) -> str:
        return self.shape


def likelihood_score(likelihood: str | None) -> float:
    return LIKELIHOOD_SCORES.get(likelihood or "", 0.0)


def emotion_scores(
    face: FaceAnnotation,
    jitter: float = DEFAULT_EMOTION_JITTER,
    rng: random.Random | None = None,
) -> dict[str, float]:
    """Numeric emotion scores for one face.

    Without any strong emotion, Neutral dominates and Joy/Surprise get a
    soft secondary score: ``jitter``, or a draw from 0.2-0.3 when ``rng``
    is given.
    """
    scores = {
        "Joy": likelihood_score(face.joy_likelihood),
        "Sorrow": likelihood_score(face.sorrow_likelihood),
        "Anger": likelihood_score(face.anger_likelihood),
        "Surprise": likelihood_score(face.surprise_likelihood),
        "Neutral": NEUTRAL_BASELINE,
    }
    if not any(score > STRONG_EMOTION for score in scores.values()):
        scores["Neutral"] = NEUTRAL_FALLBACK
        for emotion in SOFT_EMOTIONS:
            if scores[emotion] < SOFT_SIGNAL_CEILING:
                scores[emotion] = rng.uniform(*JITTER_RANGE) if rng else jitter
    return scores


def emotion_for(
    face: FaceAnnotation,
    jitter: float = DEFAULT_EMOTION_JITTER,
    rng: random.Random | None = None,
) -> str:
    """Top emotion, or the top two joined by ", " when they are within 0.3."""
    scores = emotion_scores(face, jitter, rng)
    ranked = sorted(
        ((name, score) for name, score in scores.items() if score > RANK_THRESHOLD),
        key=lambda item: item[1],
        reverse=True,
    )
    if not ranked:
        return "Neutral"
    top = ranked[0]
    if len(ranked) > 1 and top[1] - ranked[1][1] < BLEND_MARGIN:
        return f"{top[0]}, {ranked[1][0]}"
    return top[0]


def eye_distance(landmarks: Sequence[FacialLandmark]) -> float:
    """2D distance between the LEFT_EYE and RIGHT_EYE landmarks, 0 if either is missing."""
    points = {landmark.type: landmark for landmark in landmarks}
    left, right = points.get("LEFT_EYE"), points.get("RIGHT_EYE")
    if left is None or right is None:
        return 0.0
    return float(np.hypot(left.x - right.x, left.y - right.y))


def face_width(vertices: Sequence[Vertex]) -> float:
    if not vertices:
        return 0.0
    xs = np.array([v.x for v in vertices], dtype=float)
    return float(xs.max() - xs.min())


def gender_guess(shape: str) -> str | None:
    return SHAPE_GENDER.get(shape)


def age_guess(face: FaceAnnotation) -> str | None:
    """Age bucket from inter-eye distance relative to face width."""
    distance = eye_distance(face.landmarks)
    if distance <= 0:
        return None
    width = face_width(face.bounding_poly) or FALLBACK_FACE_WIDTH
    ratio = distance / width
    if ratio > CHILD_EYE_RATIO:
        return "Child"
    if ratio > YOUNG_ADULT_EYE_RATIO:
        return "Young Adult"
    return "Adult"


def demographics(
    face: FaceAnnotation, classifier: FaceGeometryClassifier
) -> tuple[str | None, str | None]:
    """(gender, age) guesses for one face; both None without landmarks."""
    if not face.landmarks:
        return None, None
    return gender_guess(classifier.face_shape(face.landmarks)), age_guess(face)
