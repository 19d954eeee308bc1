"""Tests for per-face emotion and demographic heuristics."""

import random

import pytest

from photo_privacy_analyzer.models import FaceAnnotation, FacialLandmark, Vertex
from photo_privacy_analyzer.vision.faces import (
    FixedShapeClassifier,
    age_guess,
    demographics,
    emotion_for,
    emotion_scores,
    eye_distance,
    likelihood_score,
)


def make_face(
    joy: str = "VERY_UNLIKELY",
    sorrow: str = "VERY_UNLIKELY",
    anger: str = "VERY_UNLIKELY",
    surprise: str = "VERY_UNLIKELY",
    eyes: tuple[tuple[float, float], tuple[float, float]] | None = None,
    width: float | None = None,
) -> FaceAnnotation:
    landmarks = []
    if eyes:
        (lx, ly), (rx, ry) = eyes
        landmarks = [FacialLandmark("LEFT_EYE", lx, ly), FacialLandmark("RIGHT_EYE", rx, ry)]
    poly = [Vertex(0, 0), Vertex(width, 0), Vertex(width, width), Vertex(0, width)] if width else []
    return FaceAnnotation(
        joy_likelihood=joy,
        sorrow_likelihood=sorrow,
        anger_likelihood=anger,
        surprise_likelihood=surprise,
        landmarks=landmarks,
        bounding_poly=poly,
    )


def test_likelihood_scores():
    assert likelihood_score("VERY_LIKELY") == 0.95
    assert likelihood_score("VERY_UNLIKELY") == 0.1
    assert likelihood_score("UNKNOWN") == 0.0
    assert likelihood_score(None) == 0.0


def test_strong_joy_alone():
    assert emotion_for(make_face(joy="VERY_LIKELY")) == "Joy"


def test_no_strong_emotion_is_neutral():
    assert emotion_for(make_face()) == "Neutral"
    assert emotion_for(FaceAnnotation()) == "Neutral"


def test_possible_joy_blends_with_neutral():
    assert emotion_for(make_face(joy="POSSIBLE")) == "Neutral, Joy"


def test_close_top_two_are_joined():
    assert emotion_for(make_face(sorrow="LIKELY", anger="LIKELY")) == "Sorrow, Anger"


def test_distant_second_emotion_is_dropped():
    assert emotion_for(make_face(joy="VERY_LIKELY", surprise="POSSIBLE")) == "Joy"


def test_soft_signal_defaults_to_constant():
    scores = emotion_scores(make_face())
    assert scores["Neutral"] == 0.8
    assert scores["Joy"] == 0.25
    assert scores["Surprise"] == 0.25
    assert scores["Sorrow"] == 0.1


def test_soft_signal_jitter_with_rng():
    scores = emotion_scores(make_face(), rng=random.Random(7))
    assert 0.2 <= scores["Joy"] <= 0.3
    assert 0.2 <= scores["Surprise"] <= 0.3
    assert emotion_for(make_face(), rng=random.Random(7)) == "Neutral"


def test_eye_distance():
    assert eye_distance(make_face(eyes=((0, 0), (3, 4))).landmarks) == pytest.approx(5.0)
    assert eye_distance([FacialLandmark("LEFT_EYE", 0, 0)]) == 0.0


@pytest.mark.parametrize(
    ("eye_gap", "expected"),
    [(35, "Child"), (28, "Young Adult"), (20, "Adult")],
)
def test_age_from_eye_ratio(eye_gap, expected):
    face = make_face(eyes=((10, 50), (10 + eye_gap, 50)), width=100)
    assert age_guess(face) == expected


def test_age_without_bounding_box_uses_fallback_width():
    assert age_guess(make_face(eyes=((0, 0), (0.4, 0)))) == "Adult"
    assert age_guess(make_face(eyes=((0, 0), (1.0, 0)))) == "Child"


def test_demographics_default_shape_is_oval():
    face = make_face(eyes=((100, 100), (120, 100)), width=200)
    assert demographics(face, FixedShapeClassifier()) == ("Female", "Adult")


def test_demographics_square_shape():
    face = make_face(eyes=((100, 100), (120, 100)), width=200)
    assert demographics(face, FixedShapeClassifier("square"))[0] == "Male"


def test_demographics_unknown_shape():
    face = make_face(eyes=((100, 100), (120, 100)), width=200)
    assert demographics(face, FixedShapeClassifier("diamond"))[0] is None


def test_demographics_without_landmarks():
    assert demographics(make_face(), FixedShapeClassifier()) == (None, None)
