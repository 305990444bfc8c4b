"""
Attribute helpers: computed types, ownership semantics and property shapes.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace

from ...utils import capitalize
from ..code_model import objc
from ..spec_ast.nodes import Attribute, ObjectType
from . import comment_utils, nullability_utils
from .type_matching import TypeMatchers, match_type

VALUE_OBJECT_SEMANTICS = "RMValueObjectSemantics"


def type_supports_value_object_semantics(object_type: ObjectType) -> bool:
    return VALUE_OBJECT_SEMANTICS in object_type.includes


def type_reference_for_value_type_with_name(name: str) -> str:
    return name + " *"


def type_for_spec(object_type: ObjectType) -> objc.Type:
    return objc.Type(object_type.name, type_reference_for_value_type_with_name(object_type.name))


def type_for_underlying_type(underlying_type: str) -> objc.Type:
    return objc.Type(underlying_type, "NSObject*" if underlying_type == "NSObject" else underlying_type)


def compute_type_of_attribute(attribute: Attribute) -> objc.Type:
    """The type used for dispatch: the underlying type when declared, else the declared type."""
    if attribute.type.underlying_type is not None:
        return type_for_underlying_type(attribute.type.underlying_type)
    return objc.Type(attribute.type.name, attribute.type.reference)


def original_type_of_attribute(attribute: Attribute) -> objc.Type:
    return objc.Type(attribute.type.name, attribute.type.reference)


def ivar_for_attribute(attribute: Attribute) -> str:
    return "_" + attribute.name


def _copyable_modifier(supports_value_semantics: bool) -> objc.PropertyModifier:
    return objc.PropertyModifier.COPY if supports_value_semantics else objc.PropertyModifier.ASSIGN


def property_ownership_modifier_for_attribute(
    supports_value_semantics: bool, attribute: Attribute
) -> objc.PropertyModifier | None:
    """Ownership of the stored value: copy for value-semantic objects, assign for scalars."""
    assign = objc.PropertyModifier.ASSIGN
    copyable = _copyable_modifier(supports_value_semantics)

    def for_id() -> objc.PropertyModifier:
        return assign if attribute.type.conforming_protocol else copyable

    matchers = replace(
        TypeMatchers.constant(assign, ns_object=copyable, dispatch_block_t=copyable, unmatched_type=None),
        id=for_id,
        class_object=lambda: objc.PropertyModifier.UNSAFE_UNRETAINED,
    )
    return match_type(matchers, compute_type_of_attribute(attribute))


def should_copy_incoming_value_for_attribute(supports_value_semantics: bool, attribute: Attribute) -> bool:
    if "copy" in attribute.annotations:
        return True
    modifier = property_ownership_modifier_for_attribute(supports_value_semantics, attribute)
    return modifier is objc.PropertyModifier.COPY


def property_modifiers_from_attribute(supports_value_semantics: bool, attribute: Attribute) -> list[objc.PropertyModifier]:
    modifiers = [objc.PropertyModifier.NONATOMIC, objc.PropertyModifier.READONLY]
    ownership = property_ownership_modifier_for_attribute(supports_value_semantics, attribute)
    if ownership in (objc.PropertyModifier.COPY, objc.PropertyModifier.UNSAFE_UNRETAINED):
        modifiers.append(ownership)
    return modifiers + nullability_utils.property_modifiers_for_nullability(attribute.nullability)


def property_from_attribute(supports_value_semantics: bool, attribute: Attribute) -> objc.Property:
    return objc.Property(
        name=attribute.name,
        return_type=original_type_of_attribute(attribute),
        modifiers=property_modifiers_from_attribute(supports_value_semantics, attribute),
        comments=comment_utils.comments_as_block(attribute.comments),
    )


def method_invocation_for_constructor(
    object_type: ObjectType, value_generator: Callable[[Attribute], str]
) -> str:
    """Expression building an instance through its designated initializer."""
    if not object_type.attributes:
        return f"[[{object_type.name} alloc] init]"
    parts = " ".join(f"{attribute.name}:{value_generator(attribute)}" for attribute in object_type.attributes)
    return f"[[{object_type.name} alloc] initWith{capitalize(parts)}]"


def nonnull_attributes(object_type: ObjectType) -> list[Attribute]:
    """Attributes whose value must be asserted non-nil on construction."""
    assume_nonnull = nullability_utils.assumes_nonnull(object_type.includes)
    return [
        attribute
        for attribute in object_type.attributes
        if nullability_utils.can_assert_existence_for_type(compute_type_of_attribute(attribute))
        and nullability_utils.should_protect_from_nil_values_for_nullability(assume_nonnull, attribute.nullability)
    ]
