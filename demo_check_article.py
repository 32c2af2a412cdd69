#!/usr/bin/env python3
"""
Demo: Check the article in content/ and print a report, its outline and
the pattern inventory of its Rust snippets.
"""

from pathlib import Path

from frontdoc.backends import OutlineMode, generate_outline
from frontdoc.checker import check_document
from frontdoc.config import load_config
from frontdoc.parser import parse_document_file
from frontdoc.snippets import pattern_inventory

ROOT = Path(__file__).resolve().parent


def print_report(report):
    """Pretty-print a DocumentReport."""
    print()
    print("=" * 70)
    print(f"DOCUMENT CHECK REPORT: {report.document_name}")
    print("=" * 70)
    print()

    print("METADATA")
    print(f"  Title:                 {report.title}")
    print(f"  Date:                  {report.date}")
    print()

    print("INVENTORY")
    print(f"  Headings:              {report.total_headings}")
    print(f"  Code Blocks:           {report.total_code_blocks}")
    print(f"  Links:                 {report.total_links}")
    print(f"  Words (prose):         {report.word_count}")
    for language, count in sorted(report.languages.items()):
        print(f"    {language or '(untagged)'}: {count} block(s)")
    print()

    print("FINDINGS")
    if not report.findings:
        print("  None")
    for finding in report.findings:
        print(f"  - {finding}")
    print()
    print(f"Result: {'OK' if report.ok else 'FAILED'}")


def main():
    document = parse_document_file(str(ROOT / "content" / "rust-is-all-about-patterns.md"))
    report = check_document(document, load_config(str(ROOT / "pyproject.toml")))
    print_report(report)

    print()
    print("OUTLINE")
    print("-" * 70)
    print(generate_outline(document, mode=OutlineMode.DETAILED))

    print("PATTERN INVENTORY")
    print("-" * 70)
    for name, count in pattern_inventory(document).items():
        print(f"  {name:<20} {count}")


if __name__ == "__main__":
    main()
