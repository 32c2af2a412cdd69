"""
Outline generator for frontdoc documents.

Converts a Document into a plain-text or Markdown outline of its sections.

Supports multiple modes:
    - SIMPLE: Indented heading titles
    - TOC: Markdown list of anchor links (a table of contents)
    - DETAILED: Headings with line numbers, code languages and link counts
"""

from enum import Enum
from typing import Dict, List, Optional

from frontdoc.model import Document, Heading, LinkKind


class OutlineMode(Enum):
    """Output modes for outlines."""
    SIMPLE = "simple"      # Just the heading tree
    TOC = "toc"            # Markdown anchor links
    DETAILED = "detailed"  # Per-section inventory


def _escape_link_text(text: str) -> str:
    """Escape characters that would end Markdown link text early."""
    return text.replace('\\', '\\\\').replace('[', '\\[').replace(']', '\\]')


def _section_key(heading: Optional[Heading]) -> str:
    return heading.slug if heading is not None else ""


def _section_inventory(document: Document) -> Dict[str, Dict[str, List]]:
    """Group code block languages and link targets by enclosing section slug."""
    sections: Dict[str, Dict[str, List]] = {}
    for block in document.code_blocks:
        key = _section_key(document.section_for_line(block.line))
        sections.setdefault(key, {"languages": [], "links": []})
        sections[key]["languages"].append(block.language or "plain")
    for link in document.links:
        if link.kind == LinkKind.DEFINITION:
            continue
        key = _section_key(document.section_for_line(link.line))
        sections.setdefault(key, {"languages": [], "links": []})
        sections[key]["links"].append(link.target)
    return sections


def generate_outline(document: Document, mode: OutlineMode = OutlineMode.SIMPLE) -> str:
    """
    Generate an outline of a document's headings.

    Args:
        document: Document to outline
        mode: Output mode (SIMPLE, TOC, DETAILED)

    Returns:
        Outline text, one heading per line
    """
    lines = []

    title = document.title or document.name
    if mode == OutlineMode.TOC:
        lines.append(f"**{title}**")
    else:
        lines.append(title)
    if document.date and mode == OutlineMode.DETAILED:
        lines.append(f"Date: {document.date.isoformat()}")
    lines.append("")

    # Indent relative to the shallowest heading so a post without an H1
    # still starts at the left margin
    base = min((h.level for h in document.headings), default=1)
    inventory = _section_inventory(document) if mode == OutlineMode.DETAILED else {}

    if mode == OutlineMode.DETAILED and "" in inventory:
        preamble = inventory[""]
        lines.append(
            f"(preamble) code: {', '.join(preamble['languages']) or '-'}; links: {len(preamble['links'])}"
        )

    for heading in document.headings:
        indent = "  " * (heading.level - base)

        if mode == OutlineMode.SIMPLE:
            lines.append(f"{indent}{heading.text}")

        elif mode == OutlineMode.TOC:
            lines.append(f"{indent}- [{_escape_link_text(heading.text)}](#{heading.slug})")

        elif mode == OutlineMode.DETAILED:
            info = inventory.get(heading.slug, {"languages": [], "links": []})
            languages = ", ".join(info["languages"]) or "-"
            lines.append(
                f"{indent}{heading.text} (line {heading.line}, #{heading.slug}) "
                f"code: {languages}; links: {len(info['links'])}"
            )

    return "\n".join(lines) + "\n"


def save_outline_file(document: Document, filename: str, mode: OutlineMode = OutlineMode.SIMPLE) -> None:
    """
    Generate an outline and save it to a file.

    Args:
        document: Document to outline
        filename: Output file path
        mode: Output mode
    """
    outline = generate_outline(document, mode=mode)
    with open(filename, 'w', encoding='utf-8') as f:
        f.write(outline)


__all__ = ["OutlineMode", "generate_outline", "save_outline_file"]
