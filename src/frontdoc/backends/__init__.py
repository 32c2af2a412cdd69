"""Backends for frontdoc output generation (outlines, tables of contents)."""

from .outline import OutlineMode, generate_outline, save_outline_file

__all__ = ["OutlineMode", "generate_outline", "save_outline_file"]
