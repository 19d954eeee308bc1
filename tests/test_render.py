"""Tests for terminal rendering."""

import io

from conftest import make_labels
from rich.console import Console

from photo_privacy_analyzer.models import EntityAnnotation, TextAnnotation, VisionResponse
from photo_privacy_analyzer.render import print_bundle, print_vision_details
from photo_privacy_analyzer.vision.inference import InferenceEngine
from photo_privacy_analyzer.vision.response import parse_response


def render(func, value) -> str:
    console = Console(file=io.StringIO(), width=120, color_system=None)
    func(console, value)
    return console.file.getvalue()


def test_vision_details_show_safe_search_and_colors(vision_payload):
    out = render(print_vision_details, parse_response(vision_payload))
    assert "Safe search" in out
    assert "POSSIBLE" in out
    assert "Dominant colors" in out
    assert "40%" in out


def test_vision_details_show_text_and_logos():
    response = VisionResponse(
        texts=[TextAnnotation("Main  St\n42", "en"), TextAnnotation("Main")],
        logos=[EntityAnnotation("Acme", 0.9)],
    )
    out = render(print_vision_details, response)
    assert "Visible text: Main St 42" in out
    assert "Logos: Acme" in out
    assert "Safe search" not in out


def test_bundle_without_people_shows_placeholders():
    bundle = InferenceEngine().infer(make_labels(("Mountain", 0.9)))
    out = render(print_bundle, bundle)
    assert "Person 1" not in out
    assert "People" in out
