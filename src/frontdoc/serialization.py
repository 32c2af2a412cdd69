"""
Serialization helpers for frontdoc objects (Document, FrontMatter, Heading, etc.).

Provides lossless JSON/YAML round-trip via intermediate dict representation,
and rendering a Document back to its source text.
Dates and times are stored as ISO 8601 strings in the dict form.
"""
from __future__ import annotations

import base64
import json
from datetime import date, datetime, time
from typing import Any, Dict

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


def _plain(value: Any) -> Any:
    """Convert loader values (dates, times, sets, bytes, nested tables) into JSON-safe data.

    Sets become sorted lists and bytes become base64 text.
    """
    if isinstance(value, (date, datetime, time)):
        return value.isoformat()
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, (set, frozenset)):
        return [_plain(v) for v in sorted(value, key=str)]
    if isinstance(value, dict):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def front_matter_to_dict(fm: FrontMatter | None) -> Dict[str, Any] | None:
    if fm is None:
        return None
    return {
        "format": fm.format.name.lower(),
        "fields": _plain(fm.fields),
        "raw": fm.raw,
        "start_line": fm.start_line,
        "end_line": fm.end_line,
    }


def front_matter_from_dict(d: Dict[str, Any] | None) -> FrontMatter | None:
    if d is None:
        return None
    return FrontMatter(
        format=FrontMatterFormat[d.get("format", "toml").upper()],
        fields=dict(d.get("fields", {})),
        raw=d.get("raw", ""),
        start_line=d.get("start_line", 1),
        end_line=d.get("end_line", 1),
    )


def heading_to_dict(h: Heading) -> Dict[str, Any]:
    return {"level": h.level, "text": h.text, "slug": h.slug, "line": h.line, "explicit_id": h.explicit_id}


def heading_from_dict(d: Dict[str, Any]) -> Heading:
    return Heading(
        level=d["level"],
        text=d["text"],
        slug=d["slug"],
        line=d.get("line", 0),
        explicit_id=d.get("explicit_id", False),
    )


def code_block_to_dict(b: CodeBlock) -> Dict[str, Any]:
    return {
        "fence": b.fence,
        "language": b.language,
        "info": b.info,
        "code": b.code,
        "line": b.line,
        "end_line": b.end_line,
        "closed": b.closed,
    }


def code_block_from_dict(d: Dict[str, Any]) -> CodeBlock:
    return CodeBlock(
        fence=d["fence"],
        language=d.get("language"),
        info=d.get("info", ""),
        code=d.get("code", ""),
        line=d.get("line", 0),
        end_line=d.get("end_line"),
        closed=d.get("closed", True),
    )


def link_to_dict(link: Link) -> Dict[str, Any]:
    return {
        "kind": link.kind.value,
        "text": link.text,
        "target": link.target,
        "line": link.line,
        "title": link.title,
    }


def link_from_dict(d: Dict[str, Any]) -> Link:
    return Link(
        kind=LinkKind(d["kind"]),
        text=d.get("text", ""),
        target=d["target"],
        line=d.get("line", 0),
        title=d.get("title"),
    )


def document_to_dict(doc: Document) -> Dict[str, Any]:
    return {
        "name": doc.name,
        "path": doc.path,
        "front_matter": front_matter_to_dict(doc.front_matter),
        "body": doc.body,
        "headings": [heading_to_dict(h) for h in doc.headings],
        "code_blocks": [code_block_to_dict(b) for b in doc.code_blocks],
        "links": [link_to_dict(link) for link in doc.links],
        "definitions": doc.definitions,
    }


def document_from_dict(d: Dict[str, Any]) -> Document:
    doc = Document(name=d.get("name", ""))
    doc.path = d.get("path")
    doc.front_matter = front_matter_from_dict(d.get("front_matter"))
    doc.body = d.get("body", "")
    doc.headings = [heading_from_dict(h) for h in d.get("headings", [])]
    doc.code_blocks = [code_block_from_dict(b) for b in d.get("code_blocks", [])]
    doc.links = [link_from_dict(link) for link in d.get("links", [])]
    doc.definitions = dict(d.get("definitions", {}))
    return doc


def document_to_json(doc: Document) -> str:
    return json.dumps(document_to_dict(doc), sort_keys=True)


def document_from_json(s: str) -> Document:
    d = json.loads(s)
    return document_from_dict(d)


def document_to_yaml(doc: Document) -> str:
    return yaml.safe_dump(document_to_dict(doc), sort_keys=True, allow_unicode=True)


def document_from_yaml(s: str) -> Document:
    d = yaml.safe_load(s)
    return document_from_dict(d)


def render_document(doc: Document) -> str:
    """
    Write a Document back to source text.

    The front matter keeps its delimiter and raw text. A front matter
    without raw text (built in code) is written as YAML.
    """
    fm = doc.front_matter
    if fm is None:
        return doc.body

    if fm.raw:
        delimiter, raw = fm.format.value, fm.raw
    else:
        delimiter = FrontMatterFormat.YAML.value
        raw = yaml.safe_dump(fm.fields, sort_keys=False, allow_unicode=True).rstrip("\n")
    return f"{delimiter}\n{raw}\n{delimiter}\n{doc.body}"
