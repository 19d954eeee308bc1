"""Tests for the Cloud Vision client."""

import asyncio
import json
import logging

import httpx
import pytest
from tenacity import wait_none

from photo_privacy_analyzer.errors import ExternalServiceFailure, MissingCredentialError
from photo_privacy_analyzer.vision.client import VisionClient, mask_key

API_KEY = "test-key-0123456789"


def make_client(handler) -> VisionClient:
    return VisionClient(api_key=API_KEY, transport=httpx.MockTransport(handler))


def test_missing_key_raises(monkeypatch):
    monkeypatch.setattr("photo_privacy_analyzer.vision.client.VISION_API_KEY", "")
    with pytest.raises(MissingCredentialError):
        VisionClient()


def test_build_request():
    client = VisionClient(api_key=API_KEY)
    body = client.build_request(b"abc", ["LABEL_DETECTION", "TEXT_DETECTION", "WEB_DETECTION"])
    (request,) = body["requests"]
    assert request["image"] == {"content": "YWJj"}
    assert request["features"] == [
        {"type": "LABEL_DETECTION", "maxResults": 100, "model": "builtin/latest"},
        {"type": "TEXT_DETECTION", "maxResults": 40},
        {"type": "WEB_DETECTION", "maxResults": 75},
    ]
    context = request["imageContext"]
    assert context["webDetectionParams"] == {"includeGeoResults": True}
    assert context["cropHintsParams"]["aspectRatios"] == [0.8, 1.0, 1.2, 1.5, 0.67]
    assert "en" in context["languageHints"]


def test_annotate_success(vision_payload):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["key"] = request.headers["x-goog-api-key"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"responses": [vision_payload]})

    response = asyncio.run(make_client(handler).annotate(b"image-bytes"))

    assert seen["key"] == API_KEY
    assert len(seen["body"]["requests"][0]["features"]) == 10
    assert response.labels[0].description == "Smile"
    assert response.faces[0].joy_likelihood == "VERY_LIKELY"


def test_non_2xx_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"error": {"message": "API key not valid"}})

    with pytest.raises(ExternalServiceFailure, match="403"):
        asyncio.run(make_client(handler).annotate(b"image-bytes"))


def test_empty_responses_raise():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"responses": []})

    with pytest.raises(ExternalServiceFailure, match="no results"):
        asyncio.run(make_client(handler).annotate(b"image-bytes"))


def test_error_object_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"responses": [{"error": {"message": "Bad image data"}}]})

    with pytest.raises(ExternalServiceFailure, match="Bad image data"):
        asyncio.run(make_client(handler).annotate(b"image-bytes"))


def test_plain_string_error_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"responses": [{"error": "quota"}]})

    with pytest.raises(ExternalServiceFailure, match="Vision API error: quota"):
        asyncio.run(make_client(handler).annotate(b"image-bytes"))


@pytest.mark.parametrize(
    "payload",
    [
        {"responses": ["oops"]},
        {"responses": {"a": 1}},
        {"responses": 5},
        {"responses": [{"labelAnnotations": [{"description": "Beach", "score": None}]}]},
        {"responses": [{"faceAnnotations": "not-a-list"}]},
    ],
)
def test_malformed_response_raises(payload):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=payload)

    with pytest.raises(ExternalServiceFailure, match="unreadable response"):
        asyncio.run(make_client(handler).annotate(b"image-bytes"))


def test_invalid_json_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>oops</html>")

    with pytest.raises(ExternalServiceFailure, match="invalid JSON"):
        asyncio.run(make_client(handler).annotate(b"image-bytes"))


def test_connection_error_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ExternalServiceFailure, match="ConnectError"):
        asyncio.run(make_client(handler).annotate(b"image-bytes"))


def test_timeouts_are_retried(monkeypatch):
    monkeypatch.setattr(VisionClient._post.retry, "wait", wait_none())
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(ExternalServiceFailure, match="ReadTimeout"):
        asyncio.run(make_client(handler).annotate(b"image-bytes"))
    assert len(calls) == 3


def test_key_never_logged(vision_payload, caplog):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"responses": [vision_payload]})

    with caplog.at_level(logging.DEBUG):
        asyncio.run(make_client(handler).annotate(b"image-bytes"))
    assert API_KEY not in caplog.text


def test_mask_key():
    assert mask_key(API_KEY) == "test...6789"
    assert mask_key("short") == "***"
