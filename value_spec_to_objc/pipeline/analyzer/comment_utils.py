"""
Builders for Objective-C comment blocks.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..code_model import objc
from ..spec_ast.nodes import Attribute


def _with_leading_space(comment: str) -> str:
    return comment if comment.startswith(" ") else " " + comment


def comments_as_block(lines: Iterable[str]) -> list[objc.Comment]:
    """Wrap lines in a /** ... */ doc comment; no lines gives no comment."""
    lines = list(lines)
    if not lines:
        return []
    body = [objc.Comment(" *" + _with_leading_space(line)) for line in lines]
    return [objc.Comment("/**"), *body, objc.Comment(" */")]


def single_line_comments(lines: Iterable[str]) -> list[objc.Comment]:
    return [objc.Comment(" ".join(part for part in ("//", line) if part)) for line in lines]


def param_comments_from_attribute(attribute: Attribute) -> list[str]:
    # continuation lines are aligned under the first one
    prefix = f" @param {attribute.name} "
    whitespace = " " * len(prefix)
    return [
        (prefix if index == 0 else whitespace) + comment.strip() for index, comment in enumerate(attribute.comments)
    ]


def param_comments_from_attributes(attributes: Iterable[Attribute]) -> list[str]:
    return [line for attribute in attributes for line in param_comments_from_attribute(attribute)]


def prefixed_param_comments_from_attributes(prefix: list[str], attributes: Iterable[Attribute]) -> list[str]:
    params = param_comments_from_attributes(attributes)
    separator = [""] if params and prefix else []
    return prefix + separator + params
