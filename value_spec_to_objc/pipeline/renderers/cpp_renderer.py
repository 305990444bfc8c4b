"""
Renderer for the C++ code model.
"""

from __future__ import annotations

from ...utils import indent_lines
from ..code_model import cplusplus
from ..code_model.clang_common import Nullability

_NULLABILITY = {
    Nullability.INHERITED: "",
    Nullability.NONNULL: "_Nonnull ",
    Nullability.NULLABLE: "_Nullable ",
}


def type_to_string(type: cplusplus.Type, include_nullability: bool) -> str:
    result = "const " if type.qualifier.is_const else ""
    result += type.base_type
    pass_by = type.qualifier.pass_by
    if pass_by is cplusplus.TypePassBy.VALUE:
        result += " "
    elif pass_by is cplusplus.TypePassBy.REFERENCE:
        result += " &"
    else:
        result += " *"
        if include_nullability:
            result += _NULLABILITY[type.qualifier.nullability]
    return result


def render_parameters(params: list[cplusplus.FunctionParam]) -> str:
    return ", ".join(type_to_string(param.type, True) + param.name for param in params)


def _signature(function: cplusplus.Function, class_name: str = "") -> str:
    qualifier = class_name + "::" if class_name else ""
    const = " const" if function.is_const else ""
    return (
        f"{type_to_string(function.return_type, True)}{qualifier}{function.name}"
        f"({render_parameters(function.params)}){const}"
    )


def render_function_declaration(function: cplusplus.Function) -> list[str]:
    return [_signature(function) + ";"]


def render_function_definition(function: cplusplus.Function, class_name: str = "") -> list[str]:
    opener = _signature(function, class_name)
    if function.code is None:
        return [opener + ";"]
    if not function.code:
        return [opener + " {}"]
    return [opener, "{", *indent_lines(2, function.code), "}"]


def _render_constructor_declaration(constructor: cplusplus.ClassConstructor) -> str:
    if constructor.default is cplusplus.ConstructorDefault.DEFAULT:
        return constructor.name + "() = default;"
    if constructor.default is cplusplus.ConstructorDefault.DELETE:
        return constructor.name + "() = delete;"
    return f"{constructor.name}({render_parameters(constructor.params)});"


def _render_constructor_definition(class_name: str, constructor: cplusplus.ClassConstructor) -> list[str]:
    if constructor.default is not cplusplus.ConstructorDefault.NONE:
        return []
    line = f"{class_name}::{constructor.name}({render_parameters(constructor.params)})"
    if not constructor.initializers:
        return [line + " {}"]
    result = [line + " :"]
    last = len(constructor.initializers) - 1
    for index, initializer in enumerate(constructor.initializers):
        ending = "," if index < last else " {}"
        result.append(f"  {initializer.member_name}({initializer.expression}){ending}")
    return result


def _render_section(section: cplusplus.ClassSection) -> str:
    lines = [section.visibility.value + ":"]
    lines += indent_lines(2, [_render_constructor_declaration(c) for c in section.constructors])
    if section.methods:
        lines.append("")
        for method in section.methods:
            lines += indent_lines(2, render_function_declaration(method))
    lines += indent_lines(2, [type_to_string(m.type, False) + m.name + "{};" for m in section.members])
    return "\n".join(lines)


def render_class_declaration(klass: cplusplus.Class) -> list[str]:
    sections = "\n\n".join(_render_section(section) for section in klass.sections)
    whole = [f"class {klass.name} {{", sections, "};"]
    if klass.nullability is cplusplus.ClassNullability.ASSUME_NONNULL:
        return ["NS_ASSUME_NONNULL_BEGIN", *whole, "NS_ASSUME_NONNULL_END"]
    return whole


def render_class_definition(klass: cplusplus.Class) -> list[str]:
    """Constructor then method definitions, blank-line separated."""
    groups = [
        _render_constructor_definition(klass.name, constructor)
        for section in klass.sections
        for constructor in section.constructors
    ]
    groups += [
        render_function_definition(method, klass.name) for section in klass.sections for method in section.methods
    ]
    result: list[str] = []
    for lines in groups:
        if result and lines:
            result.append("")
        result += lines
    return result
