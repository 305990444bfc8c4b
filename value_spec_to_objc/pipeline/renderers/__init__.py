"""Renderers turning the code model into source text."""

from .objc_renderer import render_header, render_implementation

__all__ = ["render_header", "render_implementation"]
