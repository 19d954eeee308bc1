"""Metadata CLI: inspect, report on and strip photo metadata."""

import argparse


def main() -> None:
    """CLI entry point for metadata operations."""
    parser = argparse.ArgumentParser(description="Photo metadata privacy tools")
    subparsers = parser.add_subparsers(dest="command")

    # inspect
    inspect_parser = subparsers.add_parser(
        "inspect", help="Show the normalized metadata of a photo"
    )
    inspect_parser.add_argument("file", help="Photo to inspect (JPEG, PNG or WebP)")
    inspect_parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")

    # report
    report_parser = subparsers.add_parser("report", help="Build a privacy risk report for a photo")
    report_parser.add_argument("file", help="Photo to analyze (JPEG, PNG or WebP)")
    report_parser.add_argument("--locale", default=None, help="Report language: en or zh")
    report_parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")

    # strip
    strip_parser = subparsers.add_parser("strip", help="Write a metadata-free JPEG copy of a photo")
    strip_parser.add_argument("file", help="Photo to sanitize (JPEG, PNG or WebP)")
    strip_parser.add_argument(
        "--output-dir", default=".", help="Directory for the sanitized copy (default: .)"
    )

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return

    from photo_privacy_analyzer.log import setup_logging

    setup_logging()

    if args.command == "inspect":
        _cmd_inspect(args)
    elif args.command == "report":
        _cmd_report(args)
    elif args.command == "strip":
        _cmd_strip(args)


def _load(path: str):
    """Validate and load an upload, exiting with a message if it is rejected."""
    from photo_privacy_analyzer.errors import UploadRejected
    from photo_privacy_analyzer.session import load_upload

    try:
        return load_upload(path)
    except UploadRejected as e:
        print(f"Error: {e}")
        raise SystemExit(1) from e


def _cmd_inspect(args: argparse.Namespace) -> None:
    """Show normalized metadata."""
    from rich.console import Console

    from photo_privacy_analyzer.metadata.extractor import extract
    from photo_privacy_analyzer.render import print_metadata, to_json

    upload = _load(args.file)
    metadata = extract(upload.content)
    if args.json:
        print(to_json(metadata))
    else:
        print_metadata(Console(), metadata)


def _cmd_report(args: argparse.Namespace) -> None:
    """Print a privacy report."""
    from rich.console import Console

    from photo_privacy_analyzer.config import DEFAULT_LOCALE
    from photo_privacy_analyzer.metadata.extractor import extract
    from photo_privacy_analyzer.metadata.report import build_report
    from photo_privacy_analyzer.render import print_report, to_json

    upload = _load(args.file)
    report = build_report(upload.filename, extract(upload.content), args.locale or DEFAULT_LOCALE)
    if args.json:
        print(to_json(report))
    else:
        print_report(Console(), report)


def _cmd_strip(args: argparse.Namespace) -> None:
    """Write a sanitized copy; nothing is written if stripping fails."""
    from pathlib import Path

    from photo_privacy_analyzer.errors import StripFailure
    from photo_privacy_analyzer.metadata.stripper import sanitized_filename, strip

    upload = _load(args.file)
    try:
        content = strip(upload.content)
    except StripFailure as e:
        print(f"Error: could not remove metadata: {e}")
        raise SystemExit(1) from e

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / sanitized_filename()
    output_path.write_bytes(content)
    print(f"Wrote {output_path} ({len(content)} bytes, metadata removed).")
