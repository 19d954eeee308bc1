"""Vision CLI: show what a vision model could infer from a photo."""

import argparse


def main() -> None:
    """CLI entry point for vision analysis."""
    parser = argparse.ArgumentParser(description="Photo content privacy analysis")
    subparsers = parser.add_subparsers(dest="command")

    # analyze
    analyze_parser = subparsers.add_parser(
        "analyze", help="Run metadata and vision analysis on a photo"
    )
    analyze_parser.add_argument("file", help="Photo to analyze (JPEG, PNG or WebP)")
    analyze_parser.add_argument(
        "--no-vision", action="store_true", help="Skip the Cloud Vision call (metadata only)"
    )
    analyze_parser.add_argument("--locale", default=None, help="Report language: en or zh")
    analyze_parser.add_argument("--json", action="store_true", help="Print JSON instead of tables")

    # status
    subparsers.add_parser("status", help="Show the vision API configuration")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return

    from photo_privacy_analyzer.log import setup_logging

    setup_logging()

    if args.command == "analyze":
        _cmd_analyze(args)
    elif args.command == "status":
        _cmd_status(args)


def _cmd_analyze(args: argparse.Namespace) -> None:
    """Analyze one photo and print the report and inferred profile."""
    import asyncio
    from dataclasses import asdict

    from rich.console import Console

    from photo_privacy_analyzer.config import DEFAULT_LOCALE
    from photo_privacy_analyzer.errors import UploadRejected
    from photo_privacy_analyzer.render import (
        print_bundle,
        print_report,
        print_vision_details,
        to_json,
    )
    from photo_privacy_analyzer.session import AnalysisSession, load_upload

    try:
        upload = load_upload(args.file)
    except UploadRejected as e:
        print(f"Error: {e}")
        raise SystemExit(1) from e

    session = AnalysisSession(locale=args.locale or DEFAULT_LOCALE, use_vision=not args.no_vision)
    console = Console()
    if args.no_vision:
        analysis = asyncio.run(session.analyze(upload))
    else:
        with console.status("Analyzing image with Cloud Vision..."):
            analysis = asyncio.run(session.analyze(upload))

    if args.json:
        print(
            to_json(
                {
                    "metadata": analysis.metadata.to_dict(),
                    "report": asdict(analysis.report),
                    "classification": asdict(analysis.bundle) if analysis.bundle else None,
                }
            )
        )
        return

    print_report(console, analysis.report)
    if analysis.vision is not None:
        print_vision_details(console, analysis.vision)
    if analysis.bundle is not None:
        print_bundle(console, analysis.bundle)


def _cmd_status(args: argparse.Namespace) -> None:
    """Show whether a vision API key is configured, without revealing it."""
    from photo_privacy_analyzer.config import VISION_API_KEY, VISION_API_URL, VISION_FEATURES
    from photo_privacy_analyzer.vision.client import mask_key

    print(f"API URL: {VISION_API_URL}")
    if VISION_API_KEY:
        print(f"API key: configured ({mask_key(VISION_API_KEY)})")
    else:
        print("API key: not configured (set GOOGLE_VISION_API_KEY); vision results use defaults")
    print(f"Features: {', '.join(VISION_FEATURES)}")
