"""
Templated matching for algebraic types.

Emits `<Type>TemplatedMatchingHelpers`, an Objective-C++ file holding a
`<Type>Matcher<T>` struct whose static `match` functions wrap the block-based
-match... method and return a value of any type T. The result is carried out
of the `__block` capture through a `std::shared_ptr<T>`.
"""

from __future__ import annotations

from dataclasses import replace

from ...utils import capitalize, indent_lines, lowercased, string_removing_capitalized_prefix
from ..analyzer import algebraic_type_utils
from ..code_model import code, cplusplus, objc
from ..renderers.objc_renderer import renderable_type_reference_nesting_subsequent_token, to_block_type_parameter_string
from ..spec_ast.nodes import AlgebraicType, Attribute, Subtype
from .base import AlgebraicTypePlugin


def matching_file_name_for_algebraic_type(algebraic_type: AlgebraicType) -> str:
    return algebraic_type.name + "TemplatedMatchingHelpers"


def match_block_name_for_subtype(subtype: Subtype) -> str:
    return lowercased(algebraic_type_utils.subtype_name_from_subtype(subtype)) + "MatchHandler"


def local_block_name_for_subtype(subtype: Subtype) -> str:
    return "match" + capitalize(algebraic_type_utils.subtype_name_from_subtype(subtype))


def _block_parameter_for_attribute(attribute: Attribute) -> str:
    return renderable_type_reference_nesting_subsequent_token(attribute.type.reference) + attribute.name


def matcher_parameter_for_subtype(subtype: Subtype) -> str:
    parameters = ", ".join(
        _block_parameter_for_attribute(attribute) for attribute in algebraic_type_utils.attributes_from_subtype(subtype)
    )
    return f"T(^{match_block_name_for_subtype(subtype)})({parameters})"


def matcher_parameter_name(algebraic_type: AlgebraicType) -> str:
    return lowercased(string_removing_capitalized_prefix(algebraic_type.name))


def _matcher_parameter_for_algebraic_type(algebraic_type: AlgebraicType) -> str:
    return f"{algebraic_type.name} *{matcher_parameter_name(algebraic_type)}"


def local_block_definition_for_subtype(algebraic_type: AlgebraicType, subtype: Subtype) -> list[str]:
    """A local block forwarding to the caller's handler and storing its result."""
    block_type = algebraic_type_utils.block_type_for_subtype(algebraic_type, None, False, subtype)
    parameters = ", ".join(to_block_type_parameter_string(p) for p in block_type.parameters) or "void"
    arguments = ", ".join(parameter.name for parameter in block_type.parameters)
    return [
        f"{block_type.name} {local_block_name_for_subtype(subtype)} = ^({parameters}) {{",
        f"  result = std::make_shared<T>({match_block_name_for_subtype(subtype)}({arguments}));",
        "};",
        "",
    ]


def _match_invocation(algebraic_type: AlgebraicType) -> str:
    parts = []
    for index, subtype in enumerate(algebraic_type.subtypes):
        if index == 0:
            keyword = algebraic_type_utils.first_keyword_for_match_method_from_subtype(
                algebraic_type, None, False, subtype
            )
        else:
            keyword = algebraic_type_utils.keyword_for_match_method_from_subtype(algebraic_type, None, False, subtype)
        parts.append(f"{keyword.name}:{local_block_name_for_subtype(subtype)}")
    return f"[{matcher_parameter_name(algebraic_type)} {' '.join(parts)}];"


def matcher_function_code(algebraic_type: AlgebraicType) -> list[str]:
    """`static T match(Type *value, handlers...)`, the algebraic-type-first overload."""
    parameters = [_matcher_parameter_for_algebraic_type(algebraic_type)] + [
        matcher_parameter_for_subtype(subtype) for subtype in algebraic_type.subtypes
    ]
    name = matcher_parameter_name(algebraic_type)
    body = [
        f'NSCAssert({name} != nil, @"The ADT object {name} is nil");',
        "__block std::shared_ptr<T> result;",
        "",
        *[line for subtype in algebraic_type.subtypes for line in local_block_definition_for_subtype(algebraic_type, subtype)],
        _match_invocation(algebraic_type),
        "return *result;",
    ]
    return [f"static T match({', '.join(parameters)}) {{", *indent_lines(2, body), "}"]


def matcher_shim_code(algebraic_type: AlgebraicType) -> list[str]:
    """The algebraic-type-last overload, forwarding to the first one."""
    parameters = [matcher_parameter_for_subtype(subtype) for subtype in algebraic_type.subtypes] + [
        _matcher_parameter_for_algebraic_type(algebraic_type)
    ]
    handlers = ", ".join(match_block_name_for_subtype(subtype) for subtype in algebraic_type.subtypes)
    return [
        f"static T match({', '.join(parameters)}) {{",
        f"  return match({matcher_parameter_name(algebraic_type)}, {handlers});",
        "}",
    ]


def struct_for_matching_algebraic_type(algebraic_type: AlgebraicType) -> cplusplus.Struct:
    return cplusplus.Struct(
        name=algebraic_type.name + "Matcher",
        templates=[cplusplus.Template([cplusplus.TemplatedType(cplusplus.TemplateType.TYPENAME, "T")])],
        code=[matcher_function_code(algebraic_type), matcher_shim_code(algebraic_type)],
    )


def imports_for_matching(algebraic_type: AlgebraicType, for_base_file: bool) -> list[objc.Import]:
    imports = [
        objc.Import("Foundation.h", True, "Foundation"),
        objc.Import(algebraic_type.name + ".h", True, algebraic_type.library_name),
    ]
    if not for_base_file:
        imports.append(objc.Import(matching_file_name_for_algebraic_type(algebraic_type) + ".h", False))
    imports.append(objc.Import("memory", True, requires_cplusplus=True))
    return imports


def matching_file_for_algebraic_type(algebraic_type: AlgebraicType) -> code.File:
    return code.File(
        name=matching_file_name_for_algebraic_type(algebraic_type),
        type=code.FileType.OBJECTIVE_CPLUSPLUS,
        imports=imports_for_matching(algebraic_type, False),
        structs=[struct_for_matching_algebraic_type(algebraic_type)],
    )


class AlgebraicTypeTemplatedMatchingPlugin(AlgebraicTypePlugin):
    required_includes_to_run = ["TemplatedMatching"]

    def additional_files(self, algebraic_type: AlgebraicType) -> list[code.File]:
        return [matching_file_for_algebraic_type(algebraic_type)]

    def transform_base_file(self, algebraic_type: AlgebraicType, base_file: code.File) -> code.File:
        return replace(
            base_file,
            type=code.FileType.OBJECTIVE_CPLUSPLUS,
            imports=base_file.imports + imports_for_matching(algebraic_type, True),
            structs=base_file.structs + [struct_for_matching_algebraic_type(algebraic_type)],
        )
