"""
File creation for algebraic types.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..plugins.base import AlgebraicTypePlugin
from ..spec_ast.nodes import AlgebraicType
from .file_creation import CreationResult, FileCreator, GenerationRequest


def plugins_to_run(algebraic_type: AlgebraicType, plugins: Sequence[AlgebraicTypePlugin]) -> list[AlgebraicTypePlugin]:
    return [plugin for plugin in plugins if plugin.runs_for(algebraic_type.includes)]


def file_write_request(
    request: GenerationRequest, algebraic_type: AlgebraicType, plugins: Sequence[AlgebraicTypePlugin]
) -> CreationResult:
    return FileCreator(request, plugins_to_run(algebraic_type, plugins)).file_write_request(algebraic_type)
