"""Google Cloud Vision REST API client."""

import base64
import logging
from collections.abc import Sequence
from typing import Any

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from photo_privacy_analyzer.config import (
    VISION_API_KEY,
    VISION_API_URL,
    VISION_CROP_ASPECT_RATIOS,
    VISION_DEFAULT_MAX_RESULTS,
    VISION_FEATURES,
    VISION_LANGUAGE_HINTS,
    VISION_LATEST_MODEL_FEATURES,
    VISION_MAX_RESULTS,
    VISION_TIMEOUT,
)
from photo_privacy_analyzer.errors import ExternalServiceFailure, MissingCredentialError
from photo_privacy_analyzer.models import VisionResponse
from photo_privacy_analyzer.vision.response import parse_response

logger = logging.getLogger(__name__)

LATEST_MODEL = "builtin/latest"


class VisionClient:
    """Async client for the ``images:annotate`` endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        timeout: int = VISION_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
        api_url: str = VISION_API_URL,
    ) -> None:
        self.api_key = api_key or VISION_API_KEY
        if not self.api_key:
            raise MissingCredentialError(
                "Vision API key is required. Set GOOGLE_VISION_API_KEY in .env file."
            )
        self.timeout = timeout
        self.transport = transport
        self.api_url = api_url

    def build_request(self, image_bytes: bytes, features: Sequence[str]) -> dict[str, Any]:
        """Build the JSON body for a single-image annotate request."""
        return {
            "requests": [
                {
                    "image": {"content": base64.b64encode(image_bytes).decode("ascii")},
                    "features": [_feature(name) for name in features],
                    "imageContext": {
                        "languageHints": list(VISION_LANGUAGE_HINTS),
                        "cropHintsParams": {"aspectRatios": list(VISION_CROP_ASPECT_RATIOS)},
                        "webDetectionParams": {"includeGeoResults": True},
                    },
                }
            ]
        }

    async def annotate(
        self, image_bytes: bytes, features: Sequence[str] = VISION_FEATURES
    ) -> VisionResponse:
        """Annotate one image.

        Raises:
            ExternalServiceFailure: transport error, timeout after retries,
                non-2xx status, unreadable or empty response, or an error
                object in the response.
        """
        body = self.build_request(image_bytes, features)
        logger.info("Requesting %d vision features for %d bytes", len(features), len(image_bytes))
        try:
            data = await self._post(body)
        except httpx.HTTPStatusError as e:
            raise ExternalServiceFailure(
                f"Vision API returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise ExternalServiceFailure(f"Vision API request failed: {type(e).__name__}") from e
        except ValueError as e:
            raise ExternalServiceFailure("Vision API returned invalid JSON") from e

        responses = data.get("responses") if isinstance(data, dict) else None
        if not responses:
            raise ExternalServiceFailure("Vision API returned no results")
        try:
            result = responses[0]
            if "error" in result:
                error = result["error"]
                if isinstance(error, dict):
                    error = error.get("message", "unknown error")
                raise ExternalServiceFailure(f"Vision API error: {error}")
            response = parse_response(result)
        except (TypeError, AttributeError, KeyError, IndexError, ValueError) as e:
            raise ExternalServiceFailure("Vision API returned an unreadable response") from e

        logger.info(
            "Vision response: %d labels, %d faces, %d objects, web=%s",
            len(response.labels),
            len(response.faces),
            len(response.objects),
            response.web is not None,
        )
        return response

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, max=10),
        retry=retry_if_exception_type(httpx.TimeoutException),
        reraise=True,
    )
    async def _post(self, body: dict[str, Any]) -> Any:
        """POST the request body and return the parsed JSON."""
        headers = {"X-Goog-Api-Key": self.api_key, "Accept": "application/json"}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            resp = await client.post(self.api_url, json=body, headers=headers)
            resp.raise_for_status()
        return resp.json()


def _feature(name: str) -> dict[str, Any]:
    feature: dict[str, Any] = {
        "type": name,
        "maxResults": VISION_MAX_RESULTS.get(name, VISION_DEFAULT_MAX_RESULTS),
    }
    if name in VISION_LATEST_MODEL_FEATURES:
        feature["model"] = LATEST_MODEL
    return feature


def mask_key(key: str) -> str:
    """Show only the first and last four characters of a key."""
    if len(key) <= 8:
        return "***"
    return f"{key[:4]}...{key[-4:]}"
