"""
Helpers for algebraic (sum) types: subtype naming, instance variables,
switch statements and the block-based match method.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ...utils import capitalize, indent, indent_lines, lowercased
from ..code_model import objc
from ..spec_ast.nodes import AlgebraicType, Attribute, NamedAttributeCollectionSubtype, SingleAttributeSubtype, Subtype
from . import nullability_utils
from .attribute_utils import type_for_underlying_type

SUBTYPE_INSTANCE_VARIABLE = "subtype"


@dataclass(frozen=True)
class MatchingBlockType:
    """Result type of a value-returning match method (e.g. NSInteger, defaulting to 0)."""

    name: str
    underlying_type: str
    default_value: str


def value_accessor_for_instance_variable_storing_subtype() -> str:
    return "_" + SUBTYPE_INSTANCE_VARIABLE


def attributes_from_subtype(subtype: Subtype) -> list[Attribute]:
    if isinstance(subtype, SingleAttributeSubtype):
        return [subtype.attribute]
    return list(subtype.attributes)


def subtype_name_from_subtype(subtype: Subtype) -> str:
    if isinstance(subtype, SingleAttributeSubtype):
        return capitalize(subtype.attribute.name)
    return subtype.name


def all_attributes_from_subtypes(subtypes: list[Subtype]) -> list[Attribute]:
    return [attribute for subtype in subtypes for attribute in attributes_from_subtype(subtype)]


def attributes_with_subtypes(subtypes: list[Subtype]) -> list[tuple[Subtype, Attribute]]:
    return [(subtype, attribute) for subtype in subtypes for attribute in attributes_from_subtype(subtype)]


def name_of_instance_variable_for_attribute(subtype: Subtype, attribute: Attribute) -> str:
    if isinstance(subtype, NamedAttributeCollectionSubtype):
        return lowercased(subtype.name) + "_" + lowercased(attribute.name)
    return lowercased(attribute.name)


def value_accessor_for_instance_variable_for_attribute(subtype: Subtype, attribute: Attribute) -> str:
    return "_" + name_of_instance_variable_for_attribute(subtype, attribute)


def enumeration_name_for_algebraic_type(algebraic_type: AlgebraicType) -> str:
    return "_" + algebraic_type.name + "Subtypes"


def enumeration_value_name_for_subtype(algebraic_type: AlgebraicType, subtype: Subtype) -> str:
    return enumeration_name_for_algebraic_type(algebraic_type) + subtype_name_from_subtype(subtype)


SubtypeMapper = Callable[[AlgebraicType, Subtype], list[str]]


def code_for_switching_on_subtype(
    algebraic_type: AlgebraicType, subtype_value_accessor: str, mapper: SubtypeMapper
) -> list[str]:
    """A switch over the subtype tag with one braced case per subtype."""
    cases = []
    for subtype in algebraic_type.subtypes:
        cases.append(f"case {enumeration_value_name_for_subtype(algebraic_type, subtype)}: {{")
        cases += indent_lines(2, mapper(algebraic_type, subtype))
        cases += ["  break;", "}"]
    return [f"switch ({subtype_value_accessor}) {{", *indent_lines(2, cases), "}"]


def _block_type_name_for_subtype(
    algebraic_type: AlgebraicType, subtype: Subtype, matching_block_type: MatchingBlockType | None
) -> str:
    infix = capitalize(matching_block_type.name) if matching_block_type else ""
    return algebraic_type.name + infix + capitalize(subtype_name_from_subtype(subtype)) + "MatchHandler"


def _block_parameters_for_subtype(subtype: Subtype) -> list[objc.BlockTypeParameter]:
    # no parameters renders as (void)
    return [
        objc.BlockTypeParameter(
            name=attribute.name,
            type=objc.Type(attribute.type.name, attribute.type.reference),
            nullability=attribute.nullability,
        )
        for attribute in attributes_from_subtype(subtype)
    ]


def return_type_for_matching_block_type(matching_block_type: MatchingBlockType | None) -> objc.ReturnType:
    if matching_block_type is None:
        return objc.ReturnType()
    return objc.ReturnType(type_for_underlying_type(matching_block_type.underlying_type))


def block_type_for_subtype(
    algebraic_type: AlgebraicType,
    matching_block_type: MatchingBlockType | None,
    is_inlined: bool,
    subtype: Subtype,
) -> objc.BlockType:
    return objc.BlockType(
        name=_block_type_name_for_subtype(algebraic_type, subtype, matching_block_type),
        parameters=_block_parameters_for_subtype(subtype),
        return_type=return_type_for_matching_block_type(matching_block_type),
        is_public=True,
        is_inlined=is_inlined,
        nullability=nullability_utils.class_nullability_for_includes(algebraic_type.includes),
    )


def block_parameter_name_for_match_method_from_subtype(subtype: Subtype) -> str:
    return lowercased(subtype_name_from_subtype(subtype) + "MatchHandler")


def keyword_for_match_method_from_subtype(
    algebraic_type: AlgebraicType,
    matching_block_type: MatchingBlockType | None,
    assumes_nonnull: bool,
    subtype: Subtype,
) -> objc.Keyword:
    block_type = block_type_for_subtype(algebraic_type, matching_block_type, False, subtype)
    modifiers = [objc.KeywordArgumentModifier.NULLABLE] if assumes_nonnull else []
    modifiers.append(objc.KeywordArgumentModifier.NOESCAPE)
    return objc.Keyword(
        name=lowercased(subtype_name_from_subtype(subtype)),
        argument=objc.KeywordArgument(
            name=block_parameter_name_for_match_method_from_subtype(subtype),
            type=objc.Type(block_type.name, block_type.name),
            modifiers=modifiers,
        ),
    )


def first_keyword_for_match_method_from_subtype(
    algebraic_type: AlgebraicType,
    matching_block_type: MatchingBlockType | None,
    assumes_nonnull: bool,
    subtype: Subtype,
) -> objc.Keyword:
    keyword = keyword_for_match_method_from_subtype(algebraic_type, matching_block_type, assumes_nonnull, subtype)
    infix = capitalize(matching_block_type.name) if matching_block_type else ""
    return objc.Keyword("match" + infix + capitalize(keyword.name), keyword.argument)


def swift_name_for_algebraic_type_matcher(algebraic_type: AlgebraicType) -> str:
    keywords = "".join(lowercased(subtype_name_from_subtype(subtype)) + ":" for subtype in algebraic_type.subtypes)
    return f"NS_SWIFT_NAME(match({keywords}))"


def _block_invocation_for_subtype(subtype: Subtype) -> str:
    values = ", ".join(
        value_accessor_for_instance_variable_for_attribute(subtype, attribute)
        for attribute in attributes_from_subtype(subtype)
    )
    return f"{block_parameter_name_for_match_method_from_subtype(subtype)}({values});"


def _block_invocation_with_nil_check(algebraic_type: AlgebraicType, subtype: Subtype) -> list[str]:
    return [
        f"if ({block_parameter_name_for_match_method_from_subtype(subtype)}) {{",
        indent(2, _block_invocation_for_subtype(subtype)),
        "}",
    ]


def _result_returning_block_invocation_with_nil_check(algebraic_type: AlgebraicType, subtype: Subtype) -> list[str]:
    return [
        f"if ({block_parameter_name_for_match_method_from_subtype(subtype)}) {{",
        indent(2, "result = " + _block_invocation_for_subtype(subtype)),
        "}",
    ]


def matcher_code_for_algebraic_type(
    algebraic_type: AlgebraicType, matching_block_type: MatchingBlockType | None
) -> list[str]:
    accessor = value_accessor_for_instance_variable_storing_subtype()
    if matching_block_type is None:
        return code_for_switching_on_subtype(algebraic_type, accessor, _block_invocation_with_nil_check)
    switch = code_for_switching_on_subtype(algebraic_type, accessor, _result_returning_block_invocation_with_nil_check)
    opening = f"__block {matching_block_type.underlying_type} result = {matching_block_type.default_value};"
    return [opening, *switch, "return result;"]


def instance_method_for_matching_subtypes(
    algebraic_type: AlgebraicType, matching_block_type: MatchingBlockType | None, assumes_nonnull: bool
) -> objc.Method:
    """The -match<First>:<second>:... method invoking the handler of the current subtype."""
    first, *rest = algebraic_type.subtypes
    keywords = [first_keyword_for_match_method_from_subtype(algebraic_type, matching_block_type, assumes_nonnull, first)]
    keywords += [
        keyword_for_match_method_from_subtype(algebraic_type, matching_block_type, assumes_nonnull, subtype)
        for subtype in rest
    ]
    return objc.Method(
        keywords=keywords,
        return_type=return_type_for_matching_block_type(matching_block_type),
        code=matcher_code_for_algebraic_type(algebraic_type, matching_block_type),
        compiler_attributes=[swift_name_for_algebraic_type_matcher(algebraic_type)],
    )
