"""
Command-line interface.

    frontdoc check content/*.md [--config FILE] [--strict] [--format json]
    frontdoc outline POST.md [--mode toc]
    frontdoc export POST.md --to yaml
    frontdoc snippets POST.md --out build/snippets [--language rust]

Exit status: 0 on success, 1 when a check fails, 2 when a file cannot be
read or parsed or the configuration is invalid.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from frontdoc import __version__
from frontdoc.backends import OutlineMode, generate_outline, save_outline_file
from frontdoc.checker import DocumentReport, check_document
from frontdoc.config import CheckConfig, ConfigError, load_config
from frontdoc.model import Document
from frontdoc.parser import DocumentParseError, parse_document_file
from frontdoc.serialization import document_to_json, document_to_yaml
from frontdoc.snippets import pattern_inventory, write_snippets

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_ERROR = 2


def _resolve_config(args: argparse.Namespace) -> CheckConfig:
    path = args.config
    if path is None and Path("pyproject.toml").exists():
        path = "pyproject.toml"
    config = load_config(path)
    logger.debug("Using config from %s", path or "defaults")
    return config.with_overrides(
        strict=True if args.strict else None,
        allow_extra_fields=True if args.allow_extra_fields else None,
    )


def _load(path: str) -> Optional[Document]:
    try:
        return parse_document_file(path)
    except (OSError, DocumentParseError) as e:
        print(f"{path}: error: {e}", file=sys.stderr)
        return None


def _report_to_dict(path: str, report: DocumentReport) -> dict:
    return {
        "path": path,
        "title": report.title,
        "date": report.date,
        "ok": report.ok,
        "headings": report.total_headings,
        "code_blocks": report.total_code_blocks,
        "links": report.total_links,
        "words": report.word_count,
        "findings": [
            {"code": f.code, "severity": f.severity.value, "message": f.message, "line": f.line}
            for f in report.findings
        ],
    }


def _print_report(path: str, report: DocumentReport) -> None:
    for finding in report.findings:
        line = f":{finding.line}" if finding.line else ""
        print(f"{path}{line}: {finding.severity.value}: {finding.message} [{finding.code}]")
    status = "OK" if report.ok else "FAILED"
    print(f"{path}: {status} ({len(report.errors)} error(s), {len(report.warnings)} warning(s))")


def cmd_check(args: argparse.Namespace) -> int:
    config = _resolve_config(args)
    status = EXIT_OK
    results = []

    for path in args.files:
        document = _load(path)
        if document is None:
            status = EXIT_ERROR
            continue
        report = check_document(document, config)
        if not report.ok and status == EXIT_OK:
            status = EXIT_FAILED
        if args.format == "json":
            results.append(_report_to_dict(path, report))
        else:
            _print_report(path, report)

    if args.format == "json":
        print(json.dumps(results, indent=2))
    return status


def cmd_outline(args: argparse.Namespace) -> int:
    document = _load(args.file)
    if document is None:
        return EXIT_ERROR
    mode = OutlineMode(args.mode)
    if args.out:
        save_outline_file(document, args.out, mode=mode)
        logger.info("Saved %s outline to %s", mode.value, args.out)
    else:
        print(generate_outline(document, mode=mode), end="")
    return EXIT_OK


def cmd_export(args: argparse.Namespace) -> int:
    document = _load(args.file)
    if document is None:
        return EXIT_ERROR
    text = document_to_json(document) if args.to == "json" else document_to_yaml(document)
    if args.out:
        Path(args.out).write_text(text, encoding="utf-8")
        logger.info("Exported %s to %s", args.file, args.out)
    else:
        print(text)
    return EXIT_OK


def cmd_snippets(args: argparse.Namespace) -> int:
    document = _load(args.file)
    if document is None:
        return EXIT_ERROR
    if args.out:
        for path in write_snippets(document, args.out, language=args.language):
            print(path)
    if args.inventory:
        for name, count in pattern_inventory(document).items():
            print(f"{name}: {count}")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="frontdoc", description="Check and inspect front-matter Markdown documents")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_check = sub.add_parser("check", help="Check documents for structural problems")
    p_check.add_argument("files", nargs="+", help="Document paths")
    p_check.add_argument("-c", "--config", default=None, help="TOML/JSON config file (default: ./pyproject.toml if present)")
    p_check.add_argument("--strict", action="store_true", help="Fail on warnings as well as errors")
    p_check.add_argument("--allow-extra-fields", action="store_true", help="Accept front-matter keys beyond the configured ones")
    p_check.add_argument("--format", choices=["text", "json"], default="text")
    p_check.set_defaults(func=cmd_check)

    p_outline = sub.add_parser("outline", help="Print the heading outline of a document")
    p_outline.add_argument("file")
    p_outline.add_argument("--mode", choices=[m.value for m in OutlineMode], default=OutlineMode.SIMPLE.value)
    p_outline.add_argument("--out", default=None, help="Write to a file instead of stdout")
    p_outline.set_defaults(func=cmd_outline)

    p_export = sub.add_parser("export", help="Export the parsed document model")
    p_export.add_argument("file")
    p_export.add_argument("--to", choices=["json", "yaml"], default="json")
    p_export.add_argument("--out", default=None, help="Write to a file instead of stdout")
    p_export.set_defaults(func=cmd_export)

    p_snippets = sub.add_parser("snippets", help="Extract fenced code blocks")
    p_snippets.add_argument("file")
    p_snippets.add_argument("--out", default=None, help="Directory to write snippet files into")
    p_snippets.add_argument("--language", default=None, help="Only blocks tagged with this language")
    p_snippets.add_argument("--inventory", action="store_true", help="Print pattern-matching counts for rust blocks")
    p_snippets.set_defaults(func=cmd_snippets)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    logging.captureWarnings(True)

    try:
        return args.func(args)
    except ConfigError as e:
        print(f"frontdoc: config error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except OSError as e:
        print(f"frontdoc: error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
