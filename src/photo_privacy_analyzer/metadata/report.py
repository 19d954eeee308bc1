"""Privacy report generation from normalized metadata."""

from datetime import datetime

from photo_privacy_analyzer.models import (
    AnalysisReport,
    MetadataCategory,
    MetadataItem,
    NormalizedMetadata,
    PrivacyRisk,
    RiskSummary,
)

HIGH_RISK_POINTS = 30
MEDIUM_RISK_POINTS = 15
LOW_RISK_POINTS = 5
MAX_RISK_SCORE = 100

STRONG_WARNING_THRESHOLD = 70
MODERATE_WARNING_THRESHOLD = 30

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "location_risk": "The photo contains a precise GPS location",
        "device_risk": "The photo contains device information",
        "time_risk": "The photo contains capture time information",
        "latitude": "Latitude",
        "longitude": "Longitude",
        "altitude": "Altitude",
        "meters": "m",
        "location": "Location",
        "device": "Device",
        "make": "Make",
        "model": "Model",
        "software": "Software",
        "time": "Time",
        "capture_time": "Capture time",
        "camera": "Camera settings",
        "exposure_time": "Exposure time",
        "seconds": "s",
        "aperture": "Aperture",
        "iso": "ISO",
        "focal_length": "Focal length",
        "recommend_strong": (
            "Strongly recommended: remove the photo's metadata before sharing, "
            "especially the location"
        ),
        "recommend_moderate": "Consider removing metadata before sharing sensitive photos",
        "recommend_mild": (
            "The photo contains a little metadata; consider removing it when "
            "sharing sensitive content"
        ),
        "recommend_none": "No privacy risks detected",
    },
    "zh": {
        "location_risk": "照片包含精确的GPS位置信息",
        "device_risk": "照片包含设备信息",
        "time_risk": "照片包含时间信息",
        "latitude": "纬度",
        "longitude": "经度",
        "altitude": "海拔",
        "meters": "米",
        "location": "位置信息",
        "device": "设备信息",
        "make": "设备品牌",
        "model": "设备型号",
        "software": "软件",
        "time": "时间信息",
        "capture_time": "拍摄时间",
        "camera": "相机参数",
        "exposure_time": "曝光时间",
        "seconds": "秒",
        "aperture": "光圈",
        "iso": "ISO",
        "focal_length": "焦距",
        "recommend_strong": "强烈建议在分享前清除照片元数据，特别是位置信息",
        "recommend_moderate": "建议在分享敏感照片前清除元数据",
        "recommend_mild": "照片包含少量元数据，分享敏感内容时应考虑清除",
        "recommend_none": "未检测到隐私风险",
    },
}


def build_report(
    file_name: str, metadata: NormalizedMetadata, locale: str = "en"
) -> AnalysisReport:
    """Classify the privacy risks in ``metadata`` and summarize them.

    Pure and total: an empty record yields a report with no risks.
    Unknown locales fall back to English.
    """
    msg = MESSAGES.get(locale, MESSAGES["en"])
    risks: list[PrivacyRisk] = []
    detected: list[MetadataCategory] = []

    gps = metadata.gps
    if gps is not None:
        altitude = (
            f"{gps.altitude:.1f}{msg['meters']}" if gps.altitude is not None else None
        )
        details = f"{msg['latitude']}: {gps.latitude:.6f}, {msg['longitude']}: {gps.longitude:.6f}"
        if altitude:
            details += f", {msg['altitude']}: {altitude}"
        risks.append(PrivacyRisk("location", "high", msg["location_risk"], details))

        items = [
            MetadataItem(msg["latitude"], f"{gps.latitude:.6f}"),
            MetadataItem(msg["longitude"], f"{gps.longitude:.6f}"),
        ]
        if altitude:
            items.append(MetadataItem(msg["altitude"], altitude))
        detected.append(MetadataCategory(msg["location"], items))

    if metadata.make or metadata.model:
        device = f"{metadata.make or ''} {metadata.model or ''}".strip()
        risks.append(PrivacyRisk("device", "medium", msg["device_risk"], device))

        items = []
        if metadata.make:
            items.append(MetadataItem(msg["make"], metadata.make))
        if metadata.model:
            items.append(MetadataItem(msg["model"], metadata.model))
        if metadata.software:
            items.append(MetadataItem(msg["software"], metadata.software))
        detected.append(MetadataCategory(msg["device"], items))

    if metadata.capture_time is not None:
        when = _format_time(metadata.capture_time)
        risks.append(PrivacyRisk("time", "low", msg["time_risk"], when))
        detected.append(MetadataCategory(msg["time"], [MetadataItem(msg["capture_time"], when)]))

    camera = _camera_items(metadata, msg)
    if camera:
        detected.append(MetadataCategory(msg["camera"], camera))

    high = sum(1 for r in risks if r.level == "high")
    medium = sum(1 for r in risks if r.level == "medium")
    low = sum(1 for r in risks if r.level == "low")
    score = risk_score(high, medium, low)

    return AnalysisReport(
        file_name=file_name,
        has_metadata=not metadata.is_empty,
        risks=risks,
        summary=RiskSummary(
            risk_score=score,
            high_risks=high,
            medium_risks=medium,
            low_risks=low,
            recommendation=recommendation(score, locale),
        ),
        detected_metadata=detected,
    )


def risk_score(high: int, medium: int, low: int) -> int:
    """Weighted risk count, clamped to 100."""
    raw = HIGH_RISK_POINTS * high + MEDIUM_RISK_POINTS * medium + LOW_RISK_POINTS * low
    return min(MAX_RISK_SCORE, raw)


def recommendation(score: int, locale: str = "en") -> str:
    msg = MESSAGES.get(locale, MESSAGES["en"])
    if score >= STRONG_WARNING_THRESHOLD:
        return msg["recommend_strong"]
    if score >= MODERATE_WARNING_THRESHOLD:
        return msg["recommend_moderate"]
    if score > 0:
        return msg["recommend_mild"]
    return msg["recommend_none"]


def _format_time(value: datetime | str) -> str:
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    return value


def _camera_items(metadata: NormalizedMetadata, msg: dict[str, str]) -> list[MetadataItem]:
    items = []
    if metadata.exposure_time is not None:
        items.append(
            MetadataItem(
                msg["exposure_time"], f"{_exposure(metadata.exposure_time)}{msg['seconds']}"
            )
        )
    if metadata.f_number is not None:
        items.append(MetadataItem(msg["aperture"], f"f/{metadata.f_number:g}"))
    if metadata.iso is not None:
        items.append(MetadataItem(msg["iso"], str(metadata.iso)))
    if metadata.focal_length is not None:
        items.append(MetadataItem(msg["focal_length"], f"{metadata.focal_length:g}mm"))
    return items


def _exposure(seconds: float) -> str:
    """Render sub-second exposures as a fraction (1/250)."""
    if 0 < seconds < 1:
        return f"1/{round(1 / seconds)}"
    return f"{seconds:g}"
