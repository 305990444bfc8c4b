"""
Nullability helpers shared by the plugins.
"""

from __future__ import annotations

from ..code_model import objc
from ..code_model.clang_common import Nullability
from .type_matching import TypeMatchers, match_type

_CAN_ASSERT_EXISTENCE = TypeMatchers.constant(
    False, id=True, ns_object=True, class_object=True, dispatch_block_t=True
)


def keyword_argument_modifiers_for_nullability(nullability: Nullability) -> list[objc.KeywordArgumentModifier]:
    if nullability is Nullability.NONNULL:
        return [objc.KeywordArgumentModifier.NONNULL]
    if nullability is Nullability.NULLABLE:
        return [objc.KeywordArgumentModifier.NULLABLE]
    return []


def property_modifiers_for_nullability(nullability: Nullability) -> list[objc.PropertyModifier]:
    if nullability is Nullability.NONNULL:
        return [objc.PropertyModifier.NONNULL]
    if nullability is Nullability.NULLABLE:
        return [objc.PropertyModifier.NULLABLE]
    return []


def should_protect_from_nil_values_for_nullability(assume_nonnull: bool, nullability: Nullability) -> bool:
    """Whether a value must be checked against nil before being stored."""
    if nullability is Nullability.INHERITED:
        return assume_nonnull
    return nullability is Nullability.NONNULL


def nullability_requires_nonnull_protection(assume_nonnull: bool, nullabilities: list[Nullability]) -> bool:
    return any(should_protect_from_nil_values_for_nullability(assume_nonnull, n) for n in nullabilities)


def can_assert_existence_for_type(type: objc.Type) -> bool:
    """Only object pointers can be asserted non-nil; scalars and structs cannot."""
    return match_type(_CAN_ASSERT_EXISTENCE, type)


def assumes_nonnull(includes: list[str]) -> bool:
    return "RMAssumeNonnull" in includes


def class_nullability_for_includes(includes: list[str]) -> objc.ClassNullability:
    if assumes_nonnull(includes):
        return objc.ClassNullability.ASSUME_NONNULL
    return objc.ClassNullability.DEFAULT
