"""Analyzer: type dispatch and the shared attribute, import and nullability helpers."""

from .type_matching import TypeMatchers, TypeName, match_type, match_type_name

__all__ = ["TypeMatchers", "TypeName", "match_type", "match_type_name"]
