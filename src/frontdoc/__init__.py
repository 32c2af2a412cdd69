"""
frontdoc: Front-matter Document Model

A small, explicit representation of content files made of a front-matter
metadata block followed by a Markdown body.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - HTML rendering
    - Site generators or themes
    - Publishing pipelines

This package defines DOCUMENT STRUCTURE only.

Parsing happens in `frontdoc.parser`, checks in `frontdoc.checker`,
and every output format is a backend that consumes the model unchanged.
"""

__version__ = "0.1.0"
