"""Tests for multi-source label fusion."""

import pytest
from conftest import make_labels

from photo_privacy_analyzer.models import EntityAnnotation, LocalizedObject, WebEntity
from photo_privacy_analyzer.vision.fusion import (
    LabelSources,
    fuse,
    fuse_labels,
    labels_similar,
    page_keywords,
    stem_word,
)


def test_fuse_empty_sources():
    assert fuse(LabelSources()) == []


def test_fuse_labels_empty():
    assert fuse_labels([]) == []


def test_similar_labels_merge_with_quadratic_mean():
    (merged,) = fuse_labels(make_labels(("running shoes", 0.8), ("shoe", 0.6)))
    # Scores within 0.2 are a tie; "running shoes" is closer to 15 characters
    assert merged.description == "running shoes"
    assert merged.score == pytest.approx((0.64 + 0.36) / 1.4)


def test_representative_by_score_when_gap_is_large():
    (merged,) = fuse_labels(make_labels(("dog breed", 0.5), ("dog", 0.9)))
    assert merged.description == "dog"
    assert merged.score == pytest.approx((0.81 + 0.25) / 1.4)


def test_dissimilar_labels_pass_through_sorted():
    fused = fuse_labels(make_labels(("cat", 0.4), ("car", 0.7), ("tree", 0.5)))
    assert [f.description for f in fused] == ["car", "tree", "cat"]
    assert [f.score for f in fused] == pytest.approx([0.7, 0.5, 0.4])


def test_duplicate_descriptions_collapse_case_insensitively():
    fused = fuse_labels(make_labels(("Dog", 0.9), ("dog", 0.3)))
    assert len(fused) == 1


@pytest.mark.parametrize(
    ("word", "stem"),
    [
        ("running", "runn"),
        ("shoes", "shoe"),
        ("painted", "paint"),
        ("painter", "paint"),
        ("sky", "sky"),
    ],
)
def test_stem_word(word, stem):
    assert stem_word(word) == stem


def test_labels_similar_rules():
    assert labels_similar("Dog", "dogs")
    assert labels_similar("Hot Dog", "dog")
    assert labels_similar("walking tour", "walked")
    assert not labels_similar("cat", "car")


def test_stemmer_is_pluggable():
    assert not labels_similar("walking tour", "walked", stemmer=lambda word: word)
    fused = fuse_labels(make_labels(("walking tour", 0.5), ("walked", 0.5)), stemmer=str)
    assert len(fused) == 2


def test_page_keywords_scores():
    keywords = {
        k.description: k.score
        for k in page_keywords(["Visit the Eiffel Tower", "Eiffel Tower at night", ""])
    }
    assert keywords["eiffel"] == pytest.approx(0.9)
    assert keywords["visit"] == pytest.approx(0.8)
    assert keywords["eiffel tower"] == pytest.approx(0.95)
    assert keywords["visit the eiffel"] == pytest.approx(0.95)
    assert "at" not in keywords


def test_page_keywords_strip_punctuation():
    keywords = {k.description for k in page_keywords(["Beach-day: sun & sand!"])}
    assert {"beach", "day", "sun", "sand"} <= keywords


def test_page_keywords_empty():
    assert page_keywords([]) == []


def test_direct_labels_are_boosted():
    (label,) = fuse(LabelSources(labels=[EntityAnnotation("Tree", 0.5)]))
    assert label.score == pytest.approx(0.55)


def test_objects_are_down_weighted():
    (label,) = fuse(LabelSources(objects=[LocalizedObject("Bicycle", 0.8)]))
    assert label.score == pytest.approx(0.72)


def test_weak_or_unnamed_web_entities_are_ignored():
    sources = LabelSources(
        web_entities=[
            WebEntity("/m/1", "Harbor", 0.6),
            WebEntity("/m/2", "Noise", 0.1),
            WebEntity("/m/3", None, 0.9),
        ]
    )
    assert [label.description for label in fuse(sources)] == ["Harbor"]


def test_best_guess_is_boosted_and_capped():
    (label,) = fuse(LabelSources(best_guesses=["golden retriever"]))
    assert label.score == 1.0


def test_labels_from_different_sources_merge():
    sources = LabelSources(
        labels=[EntityAnnotation("Dog", 0.9)],
        objects=[LocalizedObject("Dog", 0.8)],
    )
    (label,) = fuse(sources)
    assert label.description == "Dog"
    assert label.score == pytest.approx((0.99**2 + 0.72**2) / (0.99 + 0.72))


def test_fuse_is_sorted_descending():
    sources = LabelSources(
        labels=[EntityAnnotation("Sky", 0.5), EntityAnnotation("Cloud", 0.9)],
        objects=[LocalizedObject("Kite", 0.7)],
    )
    scores = [label.score for label in fuse(sources)]
    assert scores == sorted(scores, reverse=True)
    assert all(0.0 <= s <= 1.0 for s in scores)


def test_from_response_collects_web_signals(vision_payload):
    from photo_privacy_analyzer.vision.response import parse_response

    sources = LabelSources.from_response(parse_response(vision_payload))
    assert [label.description for label in sources.labels][:2] == ["Smile", "Beach"]
    assert sources.best_guesses == ["waikiki beach"]
    assert sources.page_titles == ["Summer at Waikiki Beach", "Waikiki Beach travel guide"]
    assert [o.name for o in sources.objects] == ["Person"]
