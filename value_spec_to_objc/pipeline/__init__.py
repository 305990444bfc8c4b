"""
Pipeline - spec files to Objective-C sources.

1. Spec AST: parse JSON type descriptions into `ObjectType` / `AlgebraicType`
2. Plugins: each contributes one concern (equality, coding, matching, ...)
3. Aggregation: fold plugin contributions into `code.File` values
4. Renderers: turn files into header and implementation text
5. Writer: persist the rendered text atomically
"""

from __future__ import annotations

from .config import GeneratorConfig
from .errors import Error, GenerationError, ParseError
from .generator import GenerationReport, Generator, find_spec_files
from .writer import AtomicWriter

__all__ = [
    "AtomicWriter",
    "Error",
    "GenerationError",
    "GenerationReport",
    "Generator",
    "GeneratorConfig",
    "ParseError",
    "find_spec_files",
]
