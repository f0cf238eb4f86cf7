"""CLI interface for docscrub.

Usage:
    # List the extensions the configured parsers accept
    python -m docscrub.cli formats

    # Detect sensitive items (stdout: JSON array, highest confidence first)
    python -m docscrub.cli scan report.pdf

    # Redact pre-selected items plus custom literals, write the text export
    python -m docscrub.cli redact report.pdf --out redacted/ --custom "Project Falcon"

Options shared by all commands (``--config``, ``-v``) go before the command.
"""

from __future__ import annotations
import argparse
import dataclasses
import json
import logging
import sys

from .config import create_scrubber, load_config, load_from_yaml
from .errors import DocScrubError
from .pipeline import DocumentScrubber
from .types import InputFile, RedactionMethod, SensitiveItem


def _item_json(item: SensitiveItem) -> dict:
    return dataclasses.asdict(item)


def _build(args: argparse.Namespace) -> tuple[DocumentScrubber, dict]:
    cfg = load_from_yaml(args.config) if args.config else load_config({})
    return create_scrubber(cfg), cfg


def cmd_formats(args: argparse.Namespace) -> int:
    """Print the supported extensions."""
    scrubber, _ = _build(args)
    json.dump(scrubber.registry.get_supported_extensions(), sys.stdout)
    sys.stdout.write("\n")
    return 0


def cmd_scan(args: argparse.Namespace) -> int:
    """Print detected items as JSON."""
    scrubber, _ = _build(args)
    document = scrubber.parse(InputFile.from_path(args.file))
    items = scrubber.analyze(document)
    json.dump([_item_json(i) for i in items], sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


def cmd_redact(args: argparse.Namespace) -> int:
    """Redact a file and write the plain-text export."""
    scrubber, cfg = _build(args)
    options = dataclasses.replace(scrubber.options)
    if args.method:
        options.method = RedactionMethod(args.method)
    if args.replacement is not None:
        options.replacement_text = args.replacement
    if args.preserve_length:
        options.preserve_length = True
    if args.case_sensitive:
        options.case_sensitive = True
    if args.no_whole_word:
        options.whole_word = False
    scrubber.options = options

    document = scrubber.parse(InputFile.from_path(args.file))
    items = scrubber.analyze(document)
    if args.all:
        for item in items:
            item.selected = True
    items.extend(SensitiveItem.custom(term) for term in args.custom if term)

    redacted = scrubber.redact(document, items)
    if redacted is document:
        sys.stderr.write(f"docscrub: nothing selected for redaction in {document.filename}\n")
        return 0
    path = scrubber.export(redacted, args.out or cfg["output_dir"])

    output = {
        "output": str(path),
        "redacted": [
            {"category": i.category, "text": i.text, "confidence": i.confidence}
            for i in items if i.selected
        ],
        "skipped": len([i for i in items if not i.selected]),
    }
    json.dump(output, sys.stdout, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="docscrub",
        description="Detect and redact sensitive text in documents",
    )
    parser.add_argument("--config", default="", help="YAML config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("formats", help="List supported file extensions")

    scan = sub.add_parser("scan", help="Detect sensitive items (JSON stdout)")
    scan.add_argument("file")

    redact = sub.add_parser("redact", help="Redact a file to a text export")
    redact.add_argument("file")
    redact.add_argument("--out", default="", help="Output directory")
    redact.add_argument("--method", choices=[m.value for m in RedactionMethod])
    redact.add_argument("--replacement", default=None, help="Replacement text for --method replace")
    redact.add_argument("--preserve-length", action="store_true")
    redact.add_argument("--case-sensitive", action="store_true")
    redact.add_argument("--no-whole-word", action="store_true")
    redact.add_argument("--custom", action="append", default=[], help="Literal to redact everywhere")
    redact.add_argument("--all", action="store_true", help="Redact every detected item")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cmds = {
        "formats": cmd_formats,
        "scan": cmd_scan,
        "redact": cmd_redact,
    }
    try:
        return cmds[args.command](args)
    except (DocScrubError, OSError) as e:
        sys.stderr.write(f"docscrub: {e}\n")
        return 1


if __name__ == "__main__":
    sys.exit(main())
