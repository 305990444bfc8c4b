"""
Block-based matching on algebraic types: one handler typedef per subtype and
a -match... method calling the handler of the current subtype.
"""

from __future__ import annotations

from ..analyzer import algebraic_type_utils, nullability_utils
from ..analyzer.algebraic_type_utils import MatchingBlockType
from ..code_model import objc
from ..spec_ast.nodes import AlgebraicType
from .base import AlgebraicTypePlugin

INTEGER_MATCHING_BLOCK_TYPE = MatchingBlockType("integer", "NSInteger", "0")


class _MatchingPlugin(AlgebraicTypePlugin):
    # None means the handlers return void
    matching_block_type: MatchingBlockType | None = None

    def block_types(self, algebraic_type: AlgebraicType) -> list[objc.BlockType]:
        return [
            algebraic_type_utils.block_type_for_subtype(algebraic_type, self.matching_block_type, False, subtype)
            for subtype in algebraic_type.subtypes
        ]

    def instance_methods(self, algebraic_type: AlgebraicType) -> list[objc.Method]:
        if not algebraic_type.subtypes:
            return []
        assume_nonnull = nullability_utils.assumes_nonnull(algebraic_type.includes)
        return [
            algebraic_type_utils.instance_method_for_matching_subtypes(
                algebraic_type, self.matching_block_type, assume_nonnull
            )
        ]


class VoidMatchingPlugin(_MatchingPlugin):
    required_includes_to_run = ["VoidMatching"]


class IntegerMatchingPlugin(_MatchingPlugin):
    required_includes_to_run = ["IntegerMatching"]
    matching_block_type = INTEGER_MATCHING_BLOCK_TYPE
