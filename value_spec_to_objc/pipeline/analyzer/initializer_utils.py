"""
Designated initializer generation for value and object types.
"""

from __future__ import annotations

from collections.abc import Callable

from ...utils import capitalize, indent_lines
from ..code_model import objc
from ..spec_ast.nodes import Attribute, ObjectType
from . import attribute_utils, comment_utils, nullability_utils

INSTANCETYPE = objc.Type("instancetype", "instancetype")

Copier = Callable[[str], str]


def default_copy(name: str) -> str:
    return f"[{name} copy]"


def _keyword_argument(attribute: Attribute) -> objc.KeywordArgument:
    return objc.KeywordArgument(
        name=attribute.name,
        type=attribute_utils.original_type_of_attribute(attribute),
        modifiers=nullability_utils.keyword_argument_modifiers_for_nullability(attribute.nullability),
    )


def _ivar_assignment(supports_value_semantics: bool, attribute: Attribute, copy: Copier) -> str:
    if attribute_utils.should_copy_incoming_value_for_attribute(supports_value_semantics, attribute):
        value = copy(attribute.name)
    else:
        value = attribute.name
    return f"_{attribute.name} = {value};"


def required_assertion(name: str) -> str:
    return f"RMParameterAssert({name} != nil);"


def initializer_code_from_attributes(
    assume_nonnull: bool, supports_value_semantics: bool, attributes: list[Attribute], copy: Copier
) -> list[str]:
    assertions = [
        required_assertion(attribute.name)
        for attribute in attributes
        if nullability_utils.can_assert_existence_for_type(attribute_utils.compute_type_of_attribute(attribute))
        and nullability_utils.should_protect_from_nil_values_for_nullability(assume_nonnull, attribute.nullability)
    ]
    assignments = [_ivar_assignment(supports_value_semantics, attribute, copy) for attribute in attributes]
    return [*assertions, "if ((self = [super init])) {", *indent_lines(2, assignments), "}", "", "return self;"]


def initializer_from_attributes(
    assume_nonnull: bool,
    supports_value_semantics: bool,
    attributes: list[Attribute],
    copy: Copier = default_copy,
) -> objc.Method:
    first, *rest = attributes
    keywords = [objc.Keyword("initWith" + capitalize(first.name), _keyword_argument(first))]
    keywords += [objc.Keyword(attribute.name, _keyword_argument(attribute)) for attribute in rest]
    return objc.Method(
        keywords=keywords,
        return_type=objc.ReturnType(INSTANCETYPE),
        code=initializer_code_from_attributes(assume_nonnull, supports_value_semantics, attributes, copy),
        comments=comment_utils.comments_as_block(comment_utils.param_comments_from_attributes(attributes)),
        compiler_attributes=["NS_DESIGNATED_INITIALIZER"],
    )


def initializer_methods_for_object_type(object_type: ObjectType, copy: Copier = default_copy) -> list[objc.Method]:
    """The designated initializer, or nothing for a type without attributes."""
    if not object_type.attributes:
        return []
    return [
        initializer_from_attributes(
            nullability_utils.assumes_nonnull(object_type.includes),
            attribute_utils.type_supports_value_object_semantics(object_type),
            object_type.attributes,
            copy,
        )
    ]
