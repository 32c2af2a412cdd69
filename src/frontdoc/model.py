"""
Core Document Model Objects

Defines the fundamental data structures of a front-matter document.

These are plain data classes representing:
    - FrontMatter (the metadata block)
    - Headings (section titles and their anchors)
    - CodeBlocks (fenced code regions)
    - Links (inline, image, autolink, reference, definition)
    - Documents (root container)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about HTML or any renderer
        - Are created once by the parser and not mutated afterwards
        - Are fully serializable
        - Represent structure, not presentation
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class FrontMatterFormat(Enum):
    """Supported metadata block syntaxes, keyed by their delimiter."""
    TOML = "+++"
    YAML = "---"


@dataclass
class FrontMatter:
    """
    The metadata block at the top of a content file.

    Example (TOML):
        +++
        title = "Rust is all about patterns"
        date = 2025-11-08
        +++

    Properties:
        format:
            FrontMatterFormat of the block (decided by the delimiter)

        fields:
            Mapping exactly as produced by the TOML/YAML loader.
            Key set is what the checker compares against the
            required fields.

        raw:
            Text between the delimiters, kept so that a document can be
            written back without reformatting its metadata.

        start_line / end_line:
            1-based line numbers of the opening and closing delimiters.

    IMPORTANT:
        `title` and `date` are derived from `fields`.
        A value of the wrong type yields None, it is NOT an error here.
        Reporting belongs in the checker.
    """

    format: FrontMatterFormat
    fields: Dict[str, Any] = field(default_factory=dict)
    raw: str = ""
    start_line: int = 1
    end_line: int = 1

    @property
    def title(self) -> Optional[str]:
        value = self.fields.get("title")
        if isinstance(value, str):
            return value
        return None

    @property
    def date(self) -> Optional[date]:
        return coerce_date(self.fields.get("date"))


def coerce_date(value: Any) -> Optional[date]:
    """
    Convert a front-matter value into a calendar date.

    Accepts date objects, datetime objects (the date part is kept) and
    ISO 8601 strings. Anything else returns None.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            return None
    return None


@dataclass
class Heading:
    """
    A section heading.

    Properties:
        level: 1..6 (number of `#`, or 1/2 for setext underlines)
        text: Heading text with any `{#id}` suffix removed
        slug: Anchor identifier other documents may link to (`#slug`)
        line: 1-based line in the source file
        explicit_id: True when the slug came from a `{#id}` suffix
    """

    level: int
    text: str
    slug: str
    line: int = 0
    explicit_id: bool = False


@dataclass
class CodeBlock:
    """
    A fenced code block.

    Example:
        ```rust
        let Some(x) = opt else { return };
        ```

    Becomes:
        CodeBlock(fence="```", language="rust", info="rust", code="let Some...")

    Properties:
        fence: Opening marker (three or more backticks or tildes)
        language: First word of the info string, or None
        info: Full info string after the fence
        code: Contents between the fences, without the fence lines
        line: 1-based line of the opening fence
        end_line: 1-based line of the closing fence (None if unclosed)
        closed: Whether a matching closing fence was found
    """

    fence: str
    language: Optional[str] = None
    info: str = ""
    code: str = ""
    line: int = 0
    end_line: Optional[int] = None
    closed: bool = True


class LinkKind(Enum):
    """How a link was written in the source."""
    INLINE = "inline"
    IMAGE = "image"
    AUTOLINK = "autolink"
    REFERENCE = "reference"
    DEFINITION = "definition"


@dataclass
class Link:
    """
    A link occurrence in the body.

    For INLINE, IMAGE, AUTOLINK and DEFINITION links `target` is the URL.
    For REFERENCE links `target` is the normalized reference label; the
    URL is looked up in Document.definitions.
    """

    kind: LinkKind
    text: str
    target: str
    line: int = 0
    title: Optional[str] = None


@dataclass
class Document:
    """
    Root container for one content file.

    Properties:
        name:
            Document identifier (defaults to the file stem)

        front_matter:
            Parsed metadata block, or None when the file has none

        body:
            Markup text after the metadata block

        headings / code_blocks / links:
            Structural elements found in the body, in source order

        definitions:
            Reference label (normalized) -> URL

        path:
            Source path, when parsed from a file

    INVARIANTS (checked by frontdoc.checker, not enforced here):
        - title and date are present and well-formed
        - every code fence is closed
        - every link target is a valid URL or a known anchor
    """

    name: str
    front_matter: Optional[FrontMatter] = None
    body: str = ""
    headings: List[Heading] = field(default_factory=list)
    code_blocks: List[CodeBlock] = field(default_factory=list)
    links: List[Link] = field(default_factory=list)
    definitions: Dict[str, str] = field(default_factory=dict)
    path: Optional[str] = None

    @property
    def title(self) -> Optional[str]:
        if self.front_matter is None:
            return None
        return self.front_matter.title

    @property
    def date(self) -> Optional[date]:
        if self.front_matter is None:
            return None
        return self.front_matter.date

    def anchors(self) -> List[str]:
        """All heading slugs, in source order."""
        return [h.slug for h in self.headings]

    def get_heading(self, slug: str) -> Optional[Heading]:
        """
        Retrieve a heading by its anchor slug.

        Args:
            slug: Anchor identifier (without the leading `#`)

        Returns:
            Heading object or None if not found
        """
        for heading in self.headings:
            if heading.slug == slug:
                return heading
        return None

    def code_blocks_by_language(self, language: Optional[str]) -> List[CodeBlock]:
        """Code blocks tagged with `language` (None selects untagged blocks)."""
        return [b for b in self.code_blocks if b.language == language]

    def section_for_line(self, line: int) -> Optional[Heading]:
        """The closest heading at or above `line`, or None before the first heading."""
        current = None
        for heading in self.headings:
            if heading.line > line:
                break
            current = heading
        return current
