"""Value Spec to Objective-C

A Python package generating immutable Objective-C value types and algebraic
data types from JSON type descriptions, with pluggable support for equality,
coding, copying, description, builders and pattern matching.
"""

__version__ = "1.0.0"

from .pipeline import (
    AtomicWriter,
    Error,
    GenerationError,
    Generator,
    GeneratorConfig,
    ParseError,
)

__all__ = [
    "Generator",
    "GeneratorConfig",
    "GenerationError",
    "Error",
    "ParseError",
    "AtomicWriter",
]
