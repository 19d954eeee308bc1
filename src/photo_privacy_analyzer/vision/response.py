"""Parsing of Cloud Vision ``images:annotate`` JSON into typed records."""

from typing import Any

from photo_privacy_analyzer.models import (
    DominantColor,
    EntityAnnotation,
    FaceAnnotation,
    FacialLandmark,
    LatLng,
    LocalizedObject,
    SafeSearch,
    TextAnnotation,
    Vertex,
    VisionResponse,
    WebDetection,
    WebEntity,
    WebPage,
)


def parse_response(payload: dict[str, Any]) -> VisionResponse:
    """Convert one element of ``responses`` into a VisionResponse.

    Missing blocks become empty lists or None; unknown keys are ignored.
    """
    safe = payload.get("safeSearchAnnotation")
    web = payload.get("webDetection")
    colors = (payload.get("imagePropertiesAnnotation") or {}).get("dominantColors") or {}
    return VisionResponse(
        labels=[_entity(a) for a in payload.get("labelAnnotations", [])],
        texts=[
            TextAnnotation(description=a.get("description", ""), locale=a.get("locale"))
            for a in payload.get("textAnnotations", [])
        ],
        faces=[_face(a) for a in payload.get("faceAnnotations", [])],
        landmarks=[_entity(a) for a in payload.get("landmarkAnnotations", [])],
        logos=[_entity(a) for a in payload.get("logoAnnotations", [])],
        objects=[
            LocalizedObject(name=a.get("name", ""), score=float(a.get("score", 0.0)))
            for a in payload.get("localizedObjectAnnotations", [])
        ],
        safe_search=_safe_search(safe) if safe else None,
        dominant_colors=[_color(c) for c in colors.get("colors", [])],
        web=_web(web) if web else None,
    )


def _entity(data: dict[str, Any]) -> EntityAnnotation:
    locations = []
    for location in data.get("locations", []):
        lat_lng = location.get("latLng")
        if lat_lng:
            locations.append(
                LatLng(
                    latitude=float(lat_lng.get("latitude", 0.0)),
                    longitude=float(lat_lng.get("longitude", 0.0)),
                )
            )
    return EntityAnnotation(
        description=data.get("description", ""),
        score=float(data.get("score", 0.0)),
        locations=locations,
    )


def _face(data: dict[str, Any]) -> FaceAnnotation:
    landmarks = [
        FacialLandmark(
            type=lm.get("type", ""),
            x=float(lm.get("position", {}).get("x", 0.0)),
            y=float(lm.get("position", {}).get("y", 0.0)),
            z=float(lm.get("position", {}).get("z", 0.0)),
        )
        for lm in data.get("landmarks", [])
    ]
    poly = data.get("boundingPoly") or data.get("fdBoundingPoly") or {}
    return FaceAnnotation(
        joy_likelihood=data.get("joyLikelihood"),
        sorrow_likelihood=data.get("sorrowLikelihood"),
        anger_likelihood=data.get("angerLikelihood"),
        surprise_likelihood=data.get("surpriseLikelihood"),
        headwear_likelihood=data.get("headwearLikelihood"),
        detection_confidence=data.get("detectionConfidence"),
        landmarks=landmarks,
        bounding_poly=[
            Vertex(x=float(v.get("x", 0.0)), y=float(v.get("y", 0.0)))
            for v in poly.get("vertices", [])
        ],
    )


def _safe_search(data: dict[str, Any]) -> SafeSearch:
    fields = ("adult", "spoof", "medical", "violence", "racy")
    return SafeSearch(**{name: data[name] for name in fields if name in data})


def _color(data: dict[str, Any]) -> DominantColor:
    color = data.get("color", {})
    return DominantColor(
        red=int(color.get("red", 0)),
        green=int(color.get("green", 0)),
        blue=int(color.get("blue", 0)),
        score=float(data.get("score", 0.0)),
        pixel_fraction=float(data.get("pixelFraction", 0.0)),
    )


def _web(data: dict[str, Any]) -> WebDetection:
    return WebDetection(
        web_entities=[
            WebEntity(
                entity_id=e.get("entityId"),
                description=e.get("description"),
                score=float(e.get("score", 0.0)),
            )
            for e in data.get("webEntities", [])
        ],
        best_guess_labels=[g["label"] for g in data.get("bestGuessLabels", []) if g.get("label")],
        pages_with_matching_images=[
            WebPage(url=p.get("url", ""), page_title=p.get("pageTitle"))
            for p in data.get("pagesWithMatchingImages", [])
        ],
        full_matching_images=_urls(data.get("fullMatchingImages")),
        partial_matching_images=_urls(data.get("partialMatchingImages")),
        visually_similar_images=_urls(data.get("visuallySimilarImages")),
    )


def _urls(images: list[dict[str, Any]] | None) -> list[str]:
    return [image["url"] for image in images or [] if image.get("url")]
