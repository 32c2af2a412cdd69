"""
Example post builder for tests and demos.

Builds a small, well-formed post: TOML front matter, an intro paragraph
with a table of contents, and one section per pattern construct, each
with a `rust` code block and a link back to the top.
"""
from datetime import date

from frontdoc.model import Document
from frontdoc.parser import parse_document_string

_SECTIONS = [
    (
        "Matching on enums",
        "match shape {\n"
        "    Shape::Circle { radius } => 3.14 * radius * radius,\n"
        "    Shape::Square(side) => side * side,\n"
        "}",
    ),
    (
        "Refutable bindings",
        "let Some(port) = config.port else {\n"
        "    return Err(MissingPort);\n"
        "};",
    ),
    (
        "Looping over patterns",
        "while let Some(top) = stack.pop() {\n"
        "    println!(\"{top}\");\n"
        "}",
    ),
    (
        "Guards and bindings",
        "match n {\n"
        "    small @ 0..=9 if small % 2 == 0 => \"small even\",\n"
        "    _ => \"other\",\n"
        "}",
    ),
]


def build_example_post(section_count: int = 3, post_date: date = date(2025, 11, 8)) -> str:
    if not 0 <= section_count <= len(_SECTIONS):
        raise ValueError(f"section_count must be between 0 and {len(_SECTIONS)}")

    sections = _SECTIONS[:section_count]
    lines = [
        "+++",
        'title = "Patterns by example"',
        f"date = {post_date.isoformat()}",
        "+++",
        "",
        "# Patterns by example",
        "",
        "A short tour, see the [Rust book](https://doc.rust-lang.org/book/ch19-00-patterns.html).",
        "",
    ]
    for heading, _ in sections:
        slug = heading.lower().replace(" ", "-")
        lines.append(f"- [{heading}](#{slug})")
    lines.append("")

    for heading, code in sections:
        lines.extend([
            f"## {heading}",
            "",
            "```rust",
            code,
            "```",
            "",
            "[Back to top](#patterns-by-example)",
            "",
        ])
    return "\n".join(lines)


def build_example_document(section_count: int = 3, post_date: date = date(2025, 11, 8)) -> Document:
    return parse_document_string(
        build_example_post(section_count=section_count, post_date=post_date),
        name="patterns-by-example",
    )
