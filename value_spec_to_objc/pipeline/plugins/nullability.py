"""
Nullability plugins.

AssumeNonnull wraps the generated class in an assume-nonnull region.
AssertNullability defines the `RMParameterAssert` macro used by initializers
to reject nil for non-null attributes.
"""

from __future__ import annotations

from ..analyzer import algebraic_type_utils, attribute_utils, import_utils, nullability_utils
from ..code_model import objc
from ..spec_ast.nodes import AlgebraicType, Attribute, ObjectType
from .base import AlgebraicTypePlugin, ObjectSpecPlugin

PARAMETER_ASSERT_MACRO = objc.Macro(
    name="RMParameterAssert",
    parameters=["condition"],
    code="NSCParameterAssert((condition))",
)


def parameter_assert_macros(includes: list[str], attributes: list[Attribute]) -> list[objc.Macro]:
    """The assertion macro, when at least one attribute will be asserted non-nil."""
    assertable = [
        attribute.nullability
        for attribute in attributes
        if nullability_utils.can_assert_existence_for_type(attribute_utils.compute_type_of_attribute(attribute))
    ]
    assume_nonnull = nullability_utils.assumes_nonnull(includes)
    if nullability_utils.nullability_requires_nonnull_protection(assume_nonnull, assertable):
        return [PARAMETER_ASSERT_MACRO]
    return []


class AssumeNonnullPlugin(ObjectSpecPlugin):
    required_includes_to_run = ["RMAssumeNonnull"]

    def imports(self, object_type: ObjectType) -> list[objc.Import]:
        return [import_utils.FOUNDATION_IMPORT]

    def nullability(self, object_type: ObjectType) -> objc.ClassNullability:
        return objc.ClassNullability.ASSUME_NONNULL


class AlgebraicTypeAssumeNonnullPlugin(AlgebraicTypePlugin):
    required_includes_to_run = ["RMAssumeNonnull"]

    def imports(self, algebraic_type: AlgebraicType) -> list[objc.Import]:
        return [import_utils.FOUNDATION_IMPORT]

    def nullability(self, algebraic_type: AlgebraicType) -> objc.ClassNullability:
        return objc.ClassNullability.ASSUME_NONNULL


class AssertNullabilityPlugin(ObjectSpecPlugin):
    required_includes_to_run = ["RMAssertNullability"]

    def macros(self, object_type: ObjectType) -> list[objc.Macro]:
        return parameter_assert_macros(object_type.includes, object_type.attributes)


class AlgebraicTypeAssertNullabilityPlugin(AlgebraicTypePlugin):
    required_includes_to_run = ["RMAssertNullability"]

    def macros(self, algebraic_type: AlgebraicType) -> list[objc.Macro]:
        attributes = algebraic_type_utils.all_attributes_from_subtypes(algebraic_type.subtypes)
        return parameter_assert_macros(algebraic_type.includes, attributes)
