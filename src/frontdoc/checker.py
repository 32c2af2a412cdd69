"""
Document Checker: structural well-formedness of front-matter documents.

This module provides read-only checks of Document objects:
    - Metadata completeness (required fields, title, date)
    - Balanced code fences and language tags
    - Link syntax and URL schemes
    - Cross-references (anchors and reference labels)
    - Heading structure

IMPORTANT: This does NOT modify the document.
It only produces reports.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set
from urllib.parse import urlsplit

from frontdoc.config import CheckConfig
from frontdoc.model import Document, Link, LinkKind
from frontdoc.parser import slugify

_SCHEME_RE = re.compile(r'^[A-Za-z][A-Za-z0-9+.\-]*:')
_WORD_RE = re.compile(r"[\w'’-]+")


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass
class Finding:
    """A single problem found in a document."""
    code: str
    severity: Severity
    message: str
    line: Optional[int] = None

    def __str__(self) -> str:
        where = f"line {self.line}: " if self.line else ""
        return f"{where}{self.severity.value}: {self.message} [{self.code}]"


@dataclass
class DocumentReport:
    """Check results and basic inventory for one document."""

    document_name: str
    title: Optional[str] = None
    date: Optional[str] = None
    strict: bool = False

    # Inventory
    total_headings: int = 0
    total_code_blocks: int = 0
    total_links: int = 0
    word_count: int = 0
    languages: Dict[str, int] = field(default_factory=dict)
    anchors: List[str] = field(default_factory=list)

    findings: List[Finding] = field(default_factory=list)

    def add(self, code: str, severity: Severity, message: str, line: Optional[int] = None) -> None:
        """Add a finding to the report, skipping exact duplicates."""
        finding = Finding(code=code, severity=severity, message=message, line=line)
        if finding not in self.findings:
            self.findings.append(finding)

    @property
    def errors(self) -> List[Finding]:
        return [f for f in self.findings if f.severity == Severity.ERROR]

    @property
    def warnings(self) -> List[Finding]:
        return [f for f in self.findings if f.severity == Severity.WARNING]

    @property
    def ok(self) -> bool:
        if self.strict:
            return not self.findings
        return not self.errors

    def codes(self) -> Set[str]:
        return {f.code for f in self.findings}


def _check_front_matter(document: Document, config: CheckConfig, report: DocumentReport) -> None:
    fm = document.front_matter
    if fm is None:
        report.add("front-matter-missing", Severity.ERROR, "Document has no front-matter block", 1)
        return

    present = set(fm.fields)
    for name in config.required_fields:
        if name not in present:
            report.add("field-missing", Severity.ERROR, f"Missing required field '{name}'", fm.start_line)

    if not config.allow_extra_fields:
        allowed = set(config.required_fields) | set(config.optional_fields)
        extra = sorted(present - allowed, key=str)
        if extra:
            report.add(
                "field-unexpected",
                Severity.ERROR,
                f"Unexpected front-matter fields: {', '.join(map(str, extra))}",
                fm.start_line,
            )

    if "title" in present:
        if fm.title is None or not fm.title.strip():
            report.add("title-empty", Severity.ERROR, "Field 'title' must be non-empty text", fm.start_line)

    if "date" in present and fm.date is None:
        report.add(
            "date-invalid",
            Severity.ERROR,
            f"Field 'date' is not a calendar date: {fm.fields['date']!r}",
            fm.start_line,
        )


def _check_code_blocks(document: Document, config: CheckConfig, report: DocumentReport) -> None:
    allowed = set(config.allowed_languages)
    for block in document.code_blocks:
        if not block.closed:
            report.add(
                "fence-unclosed",
                Severity.ERROR,
                f"Code fence '{block.fence}' is never closed",
                block.line,
            )
        if block.language is None:
            if config.require_code_language:
                report.add("code-language-missing", Severity.WARNING, "Code block has no language tag", block.line)
        elif allowed and block.language not in allowed:
            report.add(
                "code-language-unknown",
                Severity.WARNING,
                f"Code block language '{block.language}' is not in the allowed list",
                block.line,
            )


def url_problem(target: str, config: CheckConfig) -> Optional[str]:
    """
    Describe why a link target is not a valid URL, or return None.

    Fragment-only targets (`#section`) are not judged here; anchors are
    resolved against the document's headings separately.
    """
    if not target.strip():
        return "empty link target"
    if any(ch.isspace() for ch in target):
        return f"link target contains whitespace: {target!r}"
    if target.startswith("#"):
        return None

    if not _SCHEME_RE.match(target):
        if target.startswith("//"):
            return f"scheme-relative URL is not allowed: {target}"
        if not config.allow_relative_links:
            return f"relative link is not allowed: {target}"
        return None

    try:
        parts = urlsplit(target)
    except ValueError as e:
        return f"malformed URL {target}: {e}"

    scheme = parts.scheme.lower()
    if scheme not in {s.lower() for s in config.allowed_schemes}:
        return f"unsupported URL scheme '{scheme}': {target}"
    if scheme in ("http", "https"):
        if not parts.hostname:
            return f"URL has no host: {target}"
        try:
            parts.port
        except ValueError:
            return f"URL has an invalid port: {target}"
    if scheme == "mailto" and "@" not in parts.path:
        return f"mailto link has no address: {target}"
    return None


def _link_url(link: Link, document: Document) -> Optional[str]:
    if link.kind == LinkKind.REFERENCE:
        return document.definitions.get(link.target)
    return link.target


def _check_links(document: Document, config: CheckConfig, report: DocumentReport) -> None:
    anchors = set(document.anchors())

    for link in document.links:
        if link.kind == LinkKind.REFERENCE and link.target not in document.definitions:
            report.add(
                "reference-undefined",
                Severity.ERROR,
                f"Reference link [{link.text}] has no definition for label '{link.target}'",
                link.line,
            )
            continue

        url = _link_url(link, document)
        problem = url_problem(url, config)
        if problem:
            report.add("link-invalid", Severity.ERROR, problem, link.line)
            continue

        if url.startswith("#"):
            fragment = url[1:]
            if fragment not in anchors:
                report.add(
                    "anchor-dangling",
                    Severity.ERROR,
                    f"Link to '#{fragment}' does not match any heading",
                    link.line,
                )


def _check_headings(document: Document, report: DocumentReport) -> None:
    base_slugs = Counter(h.slug if h.explicit_id else slugify(h.text) for h in document.headings)
    for heading in document.headings:
        base = heading.slug if heading.explicit_id else slugify(heading.text)
        if base_slugs[base] > 1:
            report.add(
                "heading-duplicate",
                Severity.WARNING,
                f"Heading '{heading.text}' is used more than once (anchor '{base}')",
                heading.line,
            )
            # One finding per slug
            base_slugs[base] = 0

    previous = None
    for heading in document.headings:
        if previous is not None and heading.level > previous + 1:
            report.add(
                "heading-skip",
                Severity.WARNING,
                f"Heading level jumps from {previous} to {heading.level}",
                heading.line,
            )
        previous = heading.level


def _prose_word_count(document: Document) -> int:
    lines = document.body.split("\n")
    skipped: Set[int] = set()
    for block in document.code_blocks:
        start = block.line
        end = block.end_line if block.end_line is not None else start + len(lines)
        skipped.update(range(start, end + 1))

    first_line = document.front_matter.end_line + 1 if document.front_matter else 1
    return sum(
        len(_WORD_RE.findall(line))
        for offset, line in enumerate(lines)
        if first_line + offset not in skipped
    )


def check_document(document: Document, config: CheckConfig | None = None) -> DocumentReport:
    """
    Check a Document for structural well-formedness.

    Checks for:
    - Front matter with exactly the configured fields, a non-empty title
      and a valid calendar date
    - Balanced code fences
    - Syntactically valid link URLs
    - Anchor links and reference labels that resolve

    Returns a DocumentReport with inventory and findings.
    """
    config = config or CheckConfig()
    report = DocumentReport(document_name=document.name, strict=config.strict)

    report.title = document.title
    report.date = document.date.isoformat() if document.date else None
    report.total_headings = len(document.headings)
    report.total_code_blocks = len(document.code_blocks)
    report.total_links = len([l for l in document.links if l.kind != LinkKind.DEFINITION])
    report.word_count = _prose_word_count(document)
    report.languages = dict(Counter(b.language or "" for b in document.code_blocks))
    report.anchors = document.anchors()

    _check_front_matter(document, config, report)
    _check_code_blocks(document, config, report)
    _check_links(document, config, report)
    _check_headings(document, report)

    report.findings.sort(key=lambda f: (f.line or 0, f.code))
    return report
