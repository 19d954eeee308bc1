"""Terminal and JSON rendering of analysis results."""

import json
from dataclasses import asdict, is_dataclass
from datetime import datetime
from typing import Any

from rich.console import Console
from rich.table import Table

from photo_privacy_analyzer.models import (
    AnalysisReport,
    ClassificationBundle,
    NormalizedMetadata,
    VisionResponse,
)

LEVEL_STYLES = {"high": "bold red", "medium": "yellow", "low": "cyan"}
SAFE_SEARCH_STYLES = {"LIKELY": "yellow", "VERY_LIKELY": "bold red"}
SAFE_SEARCH_FIELDS = ("adult", "spoof", "medical", "violence", "racy")
MAX_COLORS = 5
MAX_TEXT_CHARS = 200


def to_json(value: Any) -> str:
    """Dump dataclasses (or plain data) as indented JSON."""
    if isinstance(value, NormalizedMetadata):
        value = value.to_dict()
    elif is_dataclass(value) and not isinstance(value, type):
        value = asdict(value)
    return json.dumps(value, indent=2, ensure_ascii=False, default=_json_default)


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, bytes):
        return value.hex() if len(value) <= 64 else f"<{len(value)} bytes>"
    if isinstance(value, tuple):
        return list(value)
    return str(value)


def print_metadata(console: Console, metadata: NormalizedMetadata) -> None:
    data = metadata.to_dict()
    if not data:
        console.print("No metadata found.")
        return
    other = data.pop("other", {})
    table = Table(title="Metadata", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for name, value in data.items():
        table.add_row(name, str(value))
    console.print(table)
    if other:
        console.print(f"{len(other)} other tag(s): {', '.join(sorted(other))}")


def print_report(console: Console, report: AnalysisReport) -> None:
    summary = report.summary
    console.print(f"[bold]{report.file_name}[/bold]  risk score {summary.risk_score}/100")
    if report.risks:
        table = Table(title="Privacy risks")
        table.add_column("Type")
        table.add_column("Level")
        table.add_column("Description")
        table.add_column("Details")
        for risk in report.risks:
            level = f"[{LEVEL_STYLES[risk.level]}]{risk.level}[/]"
            table.add_row(risk.type, level, risk.description, risk.details or "")
        console.print(table)
    for category in report.detected_metadata:
        items = ", ".join(f"{item.name}: {item.value}" for item in category.items)
        console.print(f"  {category.category}: {items}")
    console.print(summary.recommendation)


def print_bundle(console: Console, bundle: ClassificationBundle) -> None:
    if bundle.error:
        console.print(f"[yellow]Vision analysis unavailable ({bundle.error}); showing defaults.[/]")
    table = Table(title="What a vision model might infer", show_header=False)
    table.add_column("Signal", style="bold")
    table.add_column("Guess")
    emotions = [f"{person}: {emotion}" for person, emotion in bundle.emotions.items()]
    rows = [
        ("People", str(bundle.people_count)),
        ("Emotion", _joined(emotions)),
        ("Gender", _joined(bundle.gender_guess)),
        ("Age", _joined(bundle.age_guess)),
        ("Race", ", ".join(bundle.race_guess)),
        ("Clothing", ", ".join(bundle.clothing)),
        ("Objects", ", ".join(bundle.objects[:10])),
        ("Interests", ", ".join(bundle.interests)),
        ("Income range", bundle.income_range),
        ("Political affiliation", bundle.political_affiliation),
        ("Target ads", ", ".join(bundle.targeted_ad_categories)),
    ]
    for name, value in rows:
        table.add_row(name, value)
    console.print(table)


def print_vision_details(console: Console, response: VisionResponse) -> None:
    """Show the raw annotations that feed no inference but still reveal something."""
    if response.safe_search is not None:
        table = Table(title="Safe search")
        for name in SAFE_SEARCH_FIELDS:
            table.add_column(name.capitalize())
        table.add_row(
            *(_likelihood(getattr(response.safe_search, name)) for name in SAFE_SEARCH_FIELDS)
        )
        console.print(table)

    if response.dominant_colors:
        table = Table(title="Dominant colors")
        table.add_column("Color")
        table.add_column("RGB")
        table.add_column("Pixels", justify="right")
        colors = sorted(response.dominant_colors, key=lambda c: c.pixel_fraction, reverse=True)
        for color in colors[:MAX_COLORS]:
            hex_code = f"#{color.red:02x}{color.green:02x}{color.blue:02x}"
            table.add_row(
                f"[on {hex_code}]      [/]",
                f"{color.red}, {color.green}, {color.blue}",
                f"{color.pixel_fraction:.0%}",
            )
        console.print(table)

    if response.texts:
        # The first annotation holds the full detected text
        text = " ".join(response.texts[0].description.split())
        if len(text) > MAX_TEXT_CHARS:
            text = text[:MAX_TEXT_CHARS] + "..."
        console.print(f"Visible text: {text}")
    if response.logos:
        console.print(f"Logos: {', '.join(logo.description for logo in response.logos)}")


def _likelihood(value: str) -> str:
    style = SAFE_SEARCH_STYLES.get(value)
    return f"[{style}]{value}[/]" if style else value


def _joined(items: list[str]) -> str:
    return ", ".join(items) or "-"
