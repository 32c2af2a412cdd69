"""
Code snippet extraction and a small pattern inventory for Rust snippets.

Pulls fenced code blocks out of a Document so they can be written to
files (for compiling or linting elsewhere), and counts the
pattern-matching constructs used in `rust` blocks.

The counters are regex heuristics over source text with comments and
string literals removed. They are meant for a quick overview of a post,
not as a Rust parser.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional
import logging
import re

from frontdoc.model import Document

logger = logging.getLogger(__name__)

EXTENSIONS: Dict[str, str] = {
    "rust": "rs",
    "rs": "rs",
    "python": "py",
    "py": "py",
    "toml": "toml",
    "yaml": "yaml",
    "json": "json",
    "sh": "sh",
    "bash": "sh",
    "console": "txt",
    "text": "txt",
}

# String and char literals plus comments, scanned in one pass.
_NOISE_RE = re.compile(
    r'(?P<string>"(?:\\.|[^"\\])*")'
    r"|(?P<char>'(?:\\.|[^'\\])')"
    r"|(?P<block>/\*.*?\*/)"
    r"|(?P<line>//[^\n]*)",
    re.DOTALL,
)

_PATTERN_SITES = {
    "match": re.compile(r"\bmatch\b(?!!)"),
    "if_let": re.compile(r"\bif\s+let\b"),
    "while_let": re.compile(r"\bwhile\s+let\b"),
    "let_else": re.compile(r"\blet\s+[^;=]+=[^;{]+\belse\s*\{"),
    "matches_macro": re.compile(r"\bmatches!\s*\("),
    "binding": re.compile(r"\b[a-z_][a-z0-9_]*\s*@\s*"),
    "destructuring_let": re.compile(r"\blet\s+(?:mut\s+)?(?:[(\[]|[A-Z]\w*\s*[{(])"),
}


@dataclass
class Snippet:
    index: int
    language: Optional[str]
    code: str
    line: int
    section: Optional[str] = None


def extract_snippets(document: Document, language: Optional[str] = None) -> List[Snippet]:
    """Return the document's closed code blocks, optionally filtered by language.

    Indexes are 1-based positions among all code blocks of the document,
    so they stay stable whatever filter is applied.
    """
    snippets: List[Snippet] = []
    for index, block in enumerate(document.code_blocks, start=1):
        if not block.closed:
            continue
        if language is not None and block.language != language:
            continue
        heading = document.section_for_line(block.line)
        snippets.append(Snippet(
            index=index,
            language=block.language,
            code=block.code,
            line=block.line,
            section=heading.text if heading else None,
        ))
    return snippets


def write_snippets(document: Document, out_dir: str, language: Optional[str] = None) -> List[str]:
    """Write each snippet to `<out_dir>/<document>-<nn>.<ext>` and return the paths."""
    target = Path(out_dir)
    target.mkdir(parents=True, exist_ok=True)

    paths: List[str] = []
    for snippet in extract_snippets(document, language=language):
        ext = EXTENSIONS.get((snippet.language or "").lower(), "txt")
        path = target / f"{document.name}-{snippet.index:02d}.{ext}"
        path.write_text(snippet.code + "\n", encoding="utf-8")
        paths.append(str(path))

    logger.info("Wrote %d snippet(s) from %s to %s", len(paths), document.name, target)
    return paths


def _blank_noise(m: re.Match) -> str:
    if m.group("string"):
        return '""'
    if m.group("char"):
        return "' '"
    return " " if m.group("block") else ""


def _strip_rust_noise(code: str) -> str:
    return _NOISE_RE.sub(_blank_noise, code)


def rust_pattern_sites(code: str) -> Dict[str, int]:
    """Count pattern-matching constructs in a Rust snippet.

    Keys: match, if_let, while_let, let_else, matches_macro, binding,
    destructuring_let. Every key is present, zero when unused.
    """
    cleaned = _strip_rust_noise(code)
    return {name: len(regex.findall(cleaned)) for name, regex in _PATTERN_SITES.items()}


def pattern_inventory(document: Document) -> Dict[str, int]:
    """Sum rust_pattern_sites over all `rust` snippets of a document."""
    totals = {name: 0 for name in _PATTERN_SITES}
    for snippet in extract_snippets(document, language="rust"):
        for name, count in rust_pattern_sites(snippet.code).items():
            totals[name] += count
    return totals


__all__ = [
    "Snippet",
    "extract_snippets",
    "write_snippets",
    "rust_pattern_sites",
    "pattern_inventory",
]
