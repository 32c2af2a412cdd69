"""
Document Parser (Raw Text → Document Model).

Converts a content file made of a front-matter block and a Markdown body
into a `Document`.

File Format:
    +++                                   ---
    title = "Rust is all about patterns"  title: Rust is all about patterns
    date = 2025-11-08                     date: 2025-11-08
    +++                                   ---
    Markdown body ...                     Markdown body ...

Syntax Notes:
    - `+++` delimits TOML, `---` delimits YAML
    - The block is only recognized when it starts on the very first line
    - Fenced code blocks hide their contents from heading/link scanning
    - Only structure is extracted; inline formatting is left as text
"""

import logging
import os
import re
import tomllib
import warnings
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import yaml

from frontdoc.model import (
    CodeBlock,
    Document,
    FrontMatter,
    FrontMatterFormat,
    Heading,
    Link,
    LinkKind,
)

logger = logging.getLogger(__name__)


class DocumentParseError(Exception):
    """Raised when a document cannot be parsed."""
    pass


class FrontMatterError(DocumentParseError):
    """Raised when the front-matter block is unterminated or malformed."""
    pass


_DELIMITERS = {fmt.value: fmt for fmt in FrontMatterFormat}

_FENCE_OPEN_RE = re.compile(r'^( {0,3})(`{3,}|~{3,})[ \t]*(.*?)[ \t]*$')
_FENCE_CLOSE_RE = re.compile(r'^ {0,3}(`{3,}|~{3,})[ \t]*$')
_ATX_RE = re.compile(r'^ {0,3}(#{1,6})(?:[ \t]+(.*?))?[ \t]*$')
_ATX_CLOSING_RE = re.compile(r'(?:^|[ \t]+)#+$')
_SETEXT_RE = re.compile(r'^ {0,3}(=+|-+)[ \t]*$')
_EXPLICIT_ID_RE = re.compile(r'^(.*?)[ \t]*\{#([A-Za-z0-9_:.\-]+)\}$')
_BLOCK_START_RE = re.compile(r'^ {0,3}(?:[-*+][ \t]|\d{1,9}[.)][ \t]|>)')
_DEFINITION_RE = re.compile(
    r'^ {0,3}\[([^\]]+)\]:[ \t]*(<[^>]*>|\S+)'
    r'(?:[ \t]+("[^"]*"|\'[^\']*\'|\([^)]*\)))?[ \t]*$'
)

# Link text allows one level of nested brackets, e.g. [![badge](img.svg)](url)
_LINK_TEXT = r'((?:[^\[\]]|\[[^\[\]]*\])*)'
_INLINE_LINK_RE = re.compile(
    r'(!?)\[' + _LINK_TEXT + r'\]\(\s*'
    r'(<[^>\n]*>|[^\s()]*(?:\([^\s()]*\)[^\s()]*)*)'
    r'(?:\s+("[^"]*"|\'[^\']*\'|\([^)]*\)))?\s*\)'
)
_FULL_REFERENCE_RE = re.compile(r'(!?)\[' + _LINK_TEXT + r'\]\[([^\[\]]*)\]')
_SHORTCUT_REFERENCE_RE = re.compile(r'(!?)\[([^\[\]]+)\](?![(\[:])')
_AUTOLINK_RE = re.compile(r'<([A-Za-z][A-Za-z0-9+.\-]{1,31}:[^\s<>]*)>')
_EMAIL_AUTOLINK_RE = re.compile(r'<([A-Za-z0-9.!#$%&\'*+/=?^_`{|}~\-]+@[A-Za-z0-9\-]+(?:\.[A-Za-z0-9\-]+)*)>')
_CODE_SPAN_RE = re.compile(r'(`+)(?!`)(.+?)(?<!`)\1(?!`)')


def normalize_label(label: str) -> str:
    """Reference labels match case-insensitively with collapsed whitespace."""
    return re.sub(r'\s+', ' ', label.strip()).casefold()


def slugify(text: str) -> str:
    """
    Derive an anchor slug from heading text.

    Converts:
        "Rust is *all* about `patterns`!"  →  "rust-is-all-about-patterns"

    Link syntax is reduced to its text, then everything except word
    characters, hyphens and spaces is dropped and spaces become hyphens.
    """
    text = _INLINE_LINK_RE.sub(lambda m: m.group(2), text)
    text = text.strip().lower()
    text = re.sub(r'[^\w\- ]', '', text)
    return text.replace(' ', '-')


def _unique_slug(base: str, used: Dict[str, int]) -> str:
    if base not in used:
        used[base] = 1
        return base
    while True:
        candidate = f"{base}-{used[base]}"
        used[base] += 1
        if candidate not in used:
            used[candidate] = 1
            return candidate


def _blank_out(text: str, start: int, end: int) -> str:
    """Replace a matched span with spaces so later patterns skip it."""
    return text[:start] + ' ' * (end - start) + text[end:]


def _strip_title(title: Optional[str]) -> Optional[str]:
    if not title:
        return None
    return title[1:-1]


def _strip_angle(target: str) -> str:
    if target.startswith('<') and target.endswith('>'):
        return target[1:-1]
    return target


def _load_fields(fmt: FrontMatterFormat, raw: str) -> Dict:
    if fmt == FrontMatterFormat.TOML:
        try:
            return tomllib.loads(raw)
        except tomllib.TOMLDecodeError as e:
            raise FrontMatterError(f"Invalid TOML front matter: {e}")

    try:
        data = yaml.safe_load(raw)
    except (yaml.YAMLError, ValueError) as e:
        raise FrontMatterError(f"Invalid YAML front matter: {e}")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontMatterError(
            f"YAML front matter must be a mapping, got {type(data).__name__}"
        )
    return data


def split_front_matter(text: str) -> Tuple[Optional[FrontMatter], str, int]:
    """
    Separate the metadata block from the body.

    Args:
        text: Full document source

    Returns:
        (front_matter, body, body_start_line). front_matter is None
        when the first line is not a delimiter; body_start_line is the
        1-based source line of the first body line.

    Raises:
        FrontMatterError: If the block is unterminated or does not parse
    """
    text = text.lstrip('\ufeff').replace('\r\n', '\n')
    lines = text.split('\n')

    delimiter = lines[0].rstrip()
    fmt = _DELIMITERS.get(delimiter)
    if fmt is None:
        return None, text, 1

    for end, line in enumerate(lines[1:], start=1):
        if line.rstrip() == delimiter:
            break
    else:
        raise FrontMatterError(
            f"Unterminated front matter: no closing '{delimiter}' after line 1"
        )

    raw = '\n'.join(lines[1:end])
    front_matter = FrontMatter(
        format=fmt,
        fields=_load_fields(fmt, raw),
        raw=raw,
        start_line=1,
        end_line=end + 1,
    )
    body = '\n'.join(lines[end + 1:])
    return front_matter, body, end + 2


@dataclass
class BodyElements:
    """Structural elements found in a Markdown body."""
    headings: List[Heading] = field(default_factory=list)
    code_blocks: List[CodeBlock] = field(default_factory=list)
    links: List[Link] = field(default_factory=list)
    definitions: Dict[str, str] = field(default_factory=dict)


def _make_heading(level: int, content: str, line: int, used: Dict[str, int]) -> Heading:
    explicit = _EXPLICIT_ID_RE.match(content)
    if explicit:
        text, anchor = explicit.group(1).strip(), explicit.group(2)
        used[anchor] = used.get(anchor, 1)
        return Heading(level=level, text=text, slug=anchor, line=line, explicit_id=True)
    return Heading(level=level, text=content, slug=_unique_slug(slugify(content), used), line=line)


def _scan_blocks(lines: List[str], first_line: int, elements: BodyElements) -> List[Tuple[int, str]]:
    """
    First pass: code fences, headings and reference definitions.

    Returns the (line number, text) pairs that may hold inline links.
    """
    text_lines: List[Tuple[int, str]] = []
    used_slugs: Dict[str, int] = {}
    paragraph: List[Tuple[int, str]] = []
    fence: Optional[CodeBlock] = None
    fence_indent = 0
    code_lines: List[str] = []

    for offset, line in enumerate(lines):
        line_no = first_line + offset

        if fence is not None:
            close = _FENCE_CLOSE_RE.match(line)
            if close and close.group(1)[0] == fence.fence[0] and len(close.group(1)) >= len(fence.fence):
                fence.code = '\n'.join(code_lines)
                fence.end_line = line_no
                fence = None
                continue
            # Content lines lose at most the opening fence's indentation
            stripped = len(line) - len(line.lstrip(' '))
            code_lines.append(line[min(stripped, fence_indent):])
            continue

        opener = _FENCE_OPEN_RE.match(line)
        if opener and not (opener.group(2)[0] == '`' and '`' in opener.group(3)):
            info = opener.group(3)
            fence = CodeBlock(
                fence=opener.group(2),
                language=re.split(r"[\s,]", info, maxsplit=1)[0] if info else None,
                info=info,
                line=line_no,
            )
            fence_indent = len(opener.group(1))
            code_lines = []
            elements.code_blocks.append(fence)
            paragraph = []
            continue

        if not line.strip():
            paragraph = []
            continue

        atx = _ATX_RE.match(line)
        if atx:
            content = _ATX_CLOSING_RE.sub('', atx.group(2) or '').strip()
            elements.headings.append(_make_heading(len(atx.group(1)), content, line_no, used_slugs))
            text_lines.append((line_no, content))
            paragraph = []
            continue

        setext = _SETEXT_RE.match(line)
        if setext and paragraph:
            content = ' '.join(text.strip() for _, text in paragraph)
            level = 1 if setext.group(1)[0] == '=' else 2
            elements.headings.append(_make_heading(level, content, paragraph[0][0], used_slugs))
            paragraph = []
            continue

        definition = _DEFINITION_RE.match(line)
        if definition and not paragraph:
            label = normalize_label(definition.group(1))
            target = _strip_angle(definition.group(2))
            elements.definitions.setdefault(label, target)
            elements.links.append(Link(
                kind=LinkKind.DEFINITION,
                text=definition.group(1),
                target=target,
                line=line_no,
                title=_strip_title(definition.group(3)),
            ))
            continue

        text_lines.append((line_no, line))
        if _BLOCK_START_RE.match(line):
            paragraph = []
        else:
            paragraph.append((line_no, line))

    if fence is not None:
        fence.code = '\n'.join(code_lines)
        fence.closed = False
        warnings.warn(
            f"Unclosed code fence '{fence.fence}' opened on line {fence.line}",
            UserWarning,
        )

    return text_lines


def _scan_inline(text: str, line_no: int, definitions: Dict[str, str]) -> List[Tuple[int, Link]]:
    """Find links on one line. Returns (column, link) pairs."""
    found: List[Tuple[int, Link]] = []
    text = _CODE_SPAN_RE.sub(lambda m: ' ' * len(m.group(0)), text)

    for m in list(_INLINE_LINK_RE.finditer(text)):
        kind = LinkKind.IMAGE if m.group(1) else LinkKind.INLINE
        found.append((m.start(), Link(
            kind=kind,
            text=m.group(2),
            target=_strip_angle(m.group(3)),
            line=line_no,
            title=_strip_title(m.group(4)),
        )))
        # Links nested inside link text, e.g. an image used as a badge
        for column, nested in _scan_inline(m.group(2), line_no, definitions):
            found.append((m.start(2) + column, nested))
        text = _blank_out(text, m.start(), m.end())

    for m in list(_FULL_REFERENCE_RE.finditer(text)):
        label = m.group(3) or m.group(2)
        found.append((m.start(), Link(
            kind=LinkKind.REFERENCE,
            text=m.group(2),
            target=normalize_label(label),
            line=line_no,
        )))
        text = _blank_out(text, m.start(), m.end())

    # Shortcut references are links only when the label is defined
    for m in list(_SHORTCUT_REFERENCE_RE.finditer(text)):
        label = normalize_label(m.group(2))
        if label not in definitions:
            continue
        found.append((m.start(), Link(
            kind=LinkKind.REFERENCE,
            text=m.group(2),
            target=label,
            line=line_no,
        )))
        text = _blank_out(text, m.start(), m.end())

    for m in _AUTOLINK_RE.finditer(text):
        found.append((m.start(), Link(kind=LinkKind.AUTOLINK, text=m.group(1), target=m.group(1), line=line_no)))

    for m in _EMAIL_AUTOLINK_RE.finditer(text):
        found.append((m.start(), Link(
            kind=LinkKind.AUTOLINK,
            text=m.group(1),
            target=f"mailto:{m.group(1)}",
            line=line_no,
        )))

    return found


def scan_body(body: str, first_line: int = 1) -> BodyElements:
    """
    Extract headings, code blocks, links and reference definitions.

    Args:
        body: Markdown text
        first_line: Source line number of the first body line

    Returns:
        BodyElements with every list in source order
    """
    elements = BodyElements()
    text_lines = _scan_blocks(body.split('\n'), first_line, elements)

    inline: List[Tuple[int, int, Link]] = []
    for line_no, text in text_lines:
        for column, link in _scan_inline(text, line_no, elements.definitions):
            inline.append((line_no, column, link))

    definition_links = elements.links
    elements.links = [link for _, _, link in sorted(inline, key=lambda item: (item[0], item[1]))]
    elements.links.extend(definition_links)
    elements.links.sort(key=lambda link: link.line)
    return elements


def parse_document_string(text: str, name: str = "document", path: Optional[str] = None) -> Document:
    """
    Parse document source into a Document object.

    Args:
        text: Full file contents
        name: Name for the document
        path: Source path, recorded on the document

    Returns:
        Document with front matter, body and structural elements

    Raises:
        FrontMatterError: If the metadata block is malformed
    """
    front_matter, body, body_start = split_front_matter(text)
    elements = scan_body(body, first_line=body_start)

    logger.debug(
        "Parsed %s: %d headings, %d code blocks, %d links",
        name, len(elements.headings), len(elements.code_blocks), len(elements.links),
    )

    return Document(
        name=name,
        front_matter=front_matter,
        body=body,
        headings=elements.headings,
        code_blocks=elements.code_blocks,
        links=elements.links,
        definitions=elements.definitions,
        path=path,
    )


def parse_document_file(filepath: str, name: Optional[str] = None) -> Document:
    """
    Parse a content file into a Document object.

    Args:
        filepath: Path to the file
        name: Optional document name (defaults to the file stem)

    Returns:
        Document object

    Raises:
        FileNotFoundError: If file doesn't exist
        DocumentParseError: If the file is not valid UTF-8
        FrontMatterError: If the metadata block is malformed
    """
    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            content = f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"Document not found: {filepath}")
    except UnicodeDecodeError as e:
        raise DocumentParseError(f"{filepath} is not valid UTF-8: {e}") from e

    if name is None:
        name = os.path.splitext(os.path.basename(filepath))[0]

    return parse_document_string(content, name=name, path=str(filepath))


__all__ = [
    "parse_document_string",
    "parse_document_file",
    "split_front_matter",
    "scan_body",
    "slugify",
    "normalize_label",
    "BodyElements",
    "DocumentParseError",
    "FrontMatterError",
]
