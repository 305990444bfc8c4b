"""
Error values reported by the parser and by the plugins.

Errors are collected and returned as values. Only the top-level run turns
them into a `GenerationError`.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Error:
    """A validation error reported by a plugin or by aggregation."""

    reason: str

    def __str__(self) -> str:
        return self.reason


@dataclass(frozen=True)
class ParseError(Error):
    """A structural error in an input file, with its position (0 when unknown)."""

    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        if self.line:
            return f"(line {self.line}, column {self.column}) {self.reason}"
        return self.reason


def prefixed(path: str, errors: list[Error]) -> list[Error]:
    """Prefix every error reason with the input file it came from."""
    return [Error(f"[{path}] {error}") for error in errors]


class GenerationError(Exception):
    """Raised when one or more input files could not be generated.

    Attributes:
        errors: Every error collected during the run
    """

    def __init__(self, errors: list[Error]):
        self.errors = errors
        super().__init__("\n".join(str(error) for error in errors))
