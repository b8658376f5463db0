"""Shared document I/O helpers."""

from .documents import load_document, render_json

__all__ = ["load_document", "render_json"]
