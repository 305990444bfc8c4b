"""
Renderer for Objective-C header and implementation files.

Turns a `code.File` into the text of its header and, when the file has
anything to implement, its implementation. Rendering is pure: the same file
always produces the same text.
"""

from __future__ import annotations

from ...utils import indent_lines, remove_duplicates
from ..code_model import code, cplusplus, objc
from ..code_model.clang_common import Nullability
from . import cpp_renderer

ARC_GUARD = (
    "#if  ! __has_feature(objc_arc)\n"
    "#error This file must be compiled with ARC. Use -fobjc-arc flag (or convert project to ARC).\n"
    "#endif"
)

# Protocols whose methods are already visible without redeclaring them
_IMPLICIT_PROTOCOLS = ["NSObject", "ADTInit"]


def _code_section(text: str) -> str:
    return text + "\n\n" if text else ""


def _without_extra(text: str) -> str:
    return text + "\n" if text else ""


def _preceding_padding(text: str) -> str:
    return "\n\n" + text if text else ""


def _comments(comments: list[objc.Comment]) -> str:
    return "\n".join(comment.content for comment in comments)


def _comments_line(comments: list[objc.Comment]) -> str:
    return _without_extra(_comments(comments))


# -- type references -------------------------------------------------------


def index_of_first_ending_asterisk(text: str) -> int:
    """Index of the first asterisk of the trailing run of asterisks, or -1."""
    index = len(text) - 1
    while index >= 0 and text[index] == "*":
        if index == 0 or text[index - 1] != "*":
            return index
        index -= 1
    return -1


def renderable_type_reference(reference: str) -> str:
    """Make sure the trailing asterisks are separated from the name: "Foo*" -> "Foo *"."""
    index = index_of_first_ending_asterisk(reference)
    if index > 0 and reference[index - 1] != " ":
        return reference[:index] + " *" + reference[index + 1 :]
    return reference


def renderable_type_reference_nesting_subsequent_token(reference: str) -> str:
    """Reference followed by a name: pointers hug the name, other types get a space."""
    renderable = renderable_type_reference(reference)
    return renderable if "*" in renderable else renderable + " "


def _modifiers_prefix(modifiers: list[str]) -> str:
    values = [modifier for modifier in modifiers if modifier]
    return " ".join(values) + " " if values else ""


def _genericized_type(modifiers: list, covariant_types: list[str], type: objc.Type | None) -> str:
    if type is None:
        reference = "void"
    elif type.name in covariant_types:
        reference = "id"
    else:
        reference = renderable_type_reference(type.reference)
    return _modifiers_prefix([modifier.value for modifier in modifiers]) + reference


# -- imports and declarations ----------------------------------------------


def to_import_string(an_import: objc.Import) -> str:
    if an_import.library:
        line = f"#import <{an_import.library}/{an_import.file}>"
    elif ".h" not in an_import.file:
        line = f"#import <{an_import.file}>"
    else:
        line = f'#import "{an_import.file}"'
    if an_import.requires_cplusplus:
        return f"#ifdef __cplusplus\n{line}\n#endif"
    return line


def to_forward_declaration_string(declaration: objc.ForwardDeclaration) -> str:
    if declaration.kind is objc.ForwardDeclarationKind.CLASS:
        return f"@class {declaration.name};"
    if declaration.kind is objc.ForwardDeclarationKind.PROTOCOL:
        return f"@protocol {declaration.name};"
    return f"typedef struct _{declaration.name} *{declaration.name}Ref;"


def to_macro_string(macro: objc.Macro) -> str:
    parameters = f"({', '.join(macro.parameters)})" if macro.parameters else ""
    return _comments_line(macro.comments) + f"#define {macro.name}{parameters} {macro.code}"


def to_enumeration_string(enumeration: objc.Enumeration) -> str:
    lines = []
    if enumeration.comments:
        lines.append(_comments(enumeration.comments))
    lines.append(f"typedef NS_ENUM({enumeration.underlying_type}, {enumeration.name}) {{")
    last = len(enumeration.values) - 1
    lines += [f"  {value}," if index < last else f"  {value}" for index, value in enumerate(enumeration.values)]
    lines.append("};")
    return "\n".join(lines)


_BLOCK_PARAMETER_NULLABILITY = {
    Nullability.INHERITED: "",
    Nullability.NONNULL: "_Nonnull ",
    Nullability.NULLABLE: "_Nullable ",
}


def to_block_type_parameter_string(parameter: objc.BlockTypeParameter) -> str:
    trailing = "".join(" " + macro for macro in parameter.trailing_macros)
    return (
        renderable_type_reference_nesting_subsequent_token(parameter.type.reference)
        + _BLOCK_PARAMETER_NULLABILITY[parameter.nullability]
        + parameter.name
        + trailing
    )


def to_block_type_string(block_type: objc.BlockType, with_macros: bool = True) -> str:
    return_type = renderable_type_reference_nesting_subsequent_token(
        _genericized_type(block_type.return_type.modifiers, [], block_type.return_type.type)
    )
    parameters = ", ".join(to_block_type_parameter_string(p) for p in block_type.parameters) or "void"
    typedef = f"{_comments_line(block_type.comments)}typedef {return_type}(^{block_type.name})({parameters});"
    if with_macros and block_type.nullability is objc.ClassNullability.ASSUME_NONNULL:
        return f"NS_ASSUME_NONNULL_BEGIN\n{typedef}\nNS_ASSUME_NONNULL_END"
    return typedef


def to_static_constant_string(constant: objc.Constant) -> str:
    return (
        _comments_line(constant.comments)
        + f"static {_modifiers_prefix([constant.memory_semantic.value])}"
        f"{renderable_type_reference(constant.type.reference)} const {constant.name} = {constant.value};"
    )


# -- methods and properties ------------------------------------------------


def _preprocessor_open(preprocessors: list[objc.Preprocessor]) -> str:
    return _without_extra("\n".join(p.opening_code for p in preprocessors))


def _preprocessor_close(preprocessors: list[objc.Preprocessor]) -> str:
    return "\n" + "\n".join(p.closing_code for p in preprocessors) if preprocessors else ""


def to_property_string(prop: objc.Property) -> str:
    modifiers = ", ".join(modifier.value for modifier in prop.modifiers)
    return (
        _preprocessor_open(prop.preprocessors)
        + _comments_line(prop.comments)
        + f"@property ({modifiers}) "
        + renderable_type_reference_nesting_subsequent_token(prop.return_type.reference)
        + prop.name
        + ";"
        + _preprocessor_close(prop.preprocessors)
    )


def to_keyword_argument_string(argument: objc.KeywordArgument | None, covariant_types: list[str] = ()) -> str:
    if argument is None:
        return ""
    modifiers = _modifiers_prefix([modifier.value for modifier in argument.modifiers])
    type_string = renderable_type_reference(_genericized_type([], list(covariant_types), argument.type))
    return f":({modifiers}{type_string}){argument.name}"


def _keywords_string(keywords: list[objc.Keyword], covariant_types: list[str]) -> str:
    return " ".join(keyword.name + to_keyword_argument_string(keyword.argument, covariant_types) for keyword in keywords)


def _method_signature(kind: str, method: objc.Method, covariant_types: list[str]) -> str:
    return_type = _genericized_type(method.return_type.modifiers, covariant_types, method.return_type.type)
    return f"{kind} ({return_type}){_keywords_string(method.keywords, covariant_types)}"


def to_method_header_string(kind: str, method: objc.Method, covariant_types: list[str] = ()) -> str:
    attributes = "".join(" " + attribute for attribute in method.compiler_attributes)
    return (
        _preprocessor_open(method.preprocessors)
        + _comments_line(method.comments)
        + _method_signature(kind, method, list(covariant_types))
        + attributes
        + ";"
        + _preprocessor_close(method.preprocessors)
    )


def to_method_implementation_string(kind: str, method: objc.Method, covariant_types: list[str] = ()) -> str | None:
    if method.code is None:
        return None
    body = "\n".join(indent_lines(2, method.code))
    return (
        _preprocessor_open(method.preprocessors)
        + _method_signature(kind, method, list(covariant_types))
        + "\n{\n"
        + body
        + "\n}"
        + _preprocessor_close(method.preprocessors)
    )


def include_method_in_header(implemented_protocols: list[str], method: objc.Method) -> bool:
    """Hide methods already declared by an adopted protocol, unless they are being marked unavailable."""
    return (
        "NS_UNAVAILABLE" in method.compiler_attributes
        or method.belongs_to_protocol is None
        or method.belongs_to_protocol not in implemented_protocols
    )


def to_instance_variable_string(ivar: objc.InstanceVariable) -> str:
    return (
        _comments_line(ivar.comments)
        + _modifiers_prefix([modifier.value for modifier in ivar.modifiers])
        + renderable_type_reference_nesting_subsequent_token(ivar.return_type.reference)
        + "_"
        + ivar.name
        + ";"
    )


# -- functions -------------------------------------------------------------


def _function_modifiers(modifiers: list[objc.KeywordArgumentModifier]) -> str:
    values = [m.value if m.value.startswith("__") else "__" + m.value for m in modifiers]
    return _modifiers_prefix(values)


def _function_return_type(return_type: objc.ReturnType) -> str:
    reference = "void" if return_type.type is None else return_type.type.reference
    nested = renderable_type_reference_nesting_subsequent_token(reference)
    modifiers = _function_modifiers(return_type.modifiers)
    return nested + modifiers


def _function_parameter_string(parameter: objc.FunctionParameter) -> str:
    return (
        renderable_type_reference_nesting_subsequent_token(parameter.type.reference)
        + _function_modifiers(parameter.modifiers)
        + parameter.name
    )


def to_function_declaration_string(function: objc.Function) -> str:
    attributes = _without_extra(" ".join(function.compiler_attributes))
    if function.is_inline:
        qualifier = "static inline"
    elif function.is_public:
        qualifier = "extern"
    else:
        qualifier = "static"
    parameters = ", ".join(_function_parameter_string(p) for p in function.parameters) or "void"
    trailing = "".join(" " + macro for macro in function.trailing_macros)
    return f"{attributes}{qualifier} {_function_return_type(function.return_type)}{function.name}({parameters}){trailing}"


def _ifdef_open(function: objc.Function) -> str:
    return f"#ifdef {function.wrapped_in_ifdef}\n" if function.wrapped_in_ifdef else ""


def _ifdef_close(function: objc.Function) -> str:
    return "\n#endif" if function.wrapped_in_ifdef else ""


def to_function_header_string(function: objc.Function) -> str:
    return (
        _ifdef_open(function)
        + _comments_line(function.comments)
        + to_function_declaration_string(function)
        + ";"
        + _ifdef_close(function)
    )


def to_function_implementation_string(function: objc.Function) -> str:
    comments = "" if function.is_public else _comments_line(function.comments)
    body = "\n".join(line if line.startswith("#") else "  " + line if line else line for line in function.code)
    return (
        _ifdef_open(function)
        + comments
        + to_function_declaration_string(function)
        + " {\n"
        + body
        + "\n}"
        + _ifdef_close(function)
    )


def _header_functions_section(functions: list[objc.Function]) -> str:
    declarations = [to_function_header_string(f) for f in functions if f.is_public and not f.is_inline]
    inline = [to_function_implementation_string(f) for f in functions if f.is_public and f.is_inline]
    parts = []
    if declarations:
        parts.append(
            '#ifdef __cplusplus\nextern "C" {\n#endif\n\n'
            + "\n".join(declarations)
            + "\n\n#ifdef __cplusplus\n}\n#endif"
        )
    if inline:
        parts.append("\n\n".join(inline))
    return "\n\n".join(parts)


# -- structs and C++ -------------------------------------------------------


def _struct_member_string(member: objc.StructMember) -> str:
    trailing = "".join(" " + macro for macro in member.trailing_macros)
    return (
        _comments_line(member.comments)
        + renderable_type_reference_nesting_subsequent_token(member.type.reference)
        + _BLOCK_PARAMETER_NULLABILITY[member.nullability]
        + member.name
        + trailing
        + ";"
    )


def _template_lines(template: cplusplus.Template) -> list[str]:
    types = ", ".join(f"{t.type.value} {t.value}" for t in template.templated_types)
    return [f"template <{types}>", *template.code]


def to_struct_string(struct: code.Struct) -> str:
    if isinstance(struct, objc.Struct):
        members = "\n".join(indent_lines(2, [_struct_member_string(m) for m in struct.members]))
        header = f"typedef struct {struct.name} {{\n"
        return _comments_line(struct.comments) + header + _without_extra(members) + f"}} {struct.name};"
    lines = ["#ifdef __cplusplus"]
    for template in struct.templates:
        lines += _template_lines(template)
    lines.append(f"struct {struct.name} {{")
    lines += indent_lines(2, [line for group in struct.code for line in group])
    lines += ["};", "#endif // __cplusplus"]
    return "\n".join(lines)


def to_namespace_string(namespace: cplusplus.Namespace) -> str:
    contents = [line for template in namespace.templates for line in _template_lines(template)]
    return "\n".join([f"namespace {namespace.name} {{", *indent_lines(2, contents), "}"])


def _cplusplus_guarded(lines: list[str]) -> str:
    return "\n".join(["#ifdef __cplusplus", *lines, "#endif // __cplusplus"])


# -- protocols and classes -------------------------------------------------


def _nullability_prefix(nullability: objc.ClassNullability) -> str:
    return "NS_ASSUME_NONNULL_BEGIN" if nullability is objc.ClassNullability.ASSUME_NONNULL else ""


def _nullability_postfix(nullability: objc.ClassNullability) -> str:
    return "NS_ASSUME_NONNULL_END" if nullability is objc.ClassNullability.ASSUME_NONNULL else ""


def _protocols_suffix(protocols: list[objc.ImplementedProtocol]) -> str:
    names = remove_duplicates([protocol.name for protocol in protocols])
    return f" <{', '.join(names)}>" if names else ""


def to_protocol_string(protocol: objc.Protocol) -> str:
    return (
        _code_section(_nullability_prefix(protocol.nullability))
        + _comments_line(protocol.comments)
        + _code_section(f"@protocol {protocol.name}{_protocols_suffix(protocol.implemented_protocols)}")
        + _code_section("\n".join(to_property_string(p) for p in protocol.properties))
        + _code_section("\n\n".join(to_method_header_string("+", m) for m in protocol.class_methods))
        + _code_section("\n\n".join(to_method_header_string("-", m) for m in protocol.instance_methods))
        + "@end\n\n"
        + _code_section(_nullability_postfix(protocol.nullability))
    ).rstrip("\n")


def _header_ivars_section(klass: objc.Class) -> str:
    lines = []
    for ivar in klass.instance_variables:
        if ivar.access is objc.InstanceVariableAccess.PRIVATE:
            continue
        lines += [ivar.access.value, to_instance_variable_string(ivar)]
    if not lines:
        return "\n"
    return "{\n" + "\n".join(indent_lines(2, lines)) + "\n}\n\n"


def to_class_header_string(klass: objc.Class) -> str:
    covariant = klass.covariant_types
    generics = f"<{', '.join('__covariant ' + t for t in covariant)}>" if covariant else ""
    visible_protocols = [p.name for p in klass.implemented_protocols] + _IMPLICIT_PROTOCOLS
    class_methods = [
        to_method_header_string("+", m, covariant)
        for m in klass.class_methods
        if include_method_in_header(visible_protocols, m)
    ]
    instance_methods = [
        to_method_header_string("-", m, covariant)
        for m in klass.instance_methods
        if include_method_in_header(visible_protocols, m)
    ]
    inline_blocks = [to_block_type_string(b, False) for b in klass.inline_block_typedefs if b.is_public]
    visibility = f'__attribute__((visibility("{klass.visibility.value}")))\n' if klass.visibility else ""
    restricted = "__attribute__((objc_subclassing_restricted))\n" if klass.subclassing_restricted else ""
    return (
        _code_section(_nullability_prefix(klass.nullability))
        + _comments_line(klass.comments)
        + restricted
        + visibility
        + f"@interface {klass.name}{generics} : {klass.base_class_name}"
        + _protocols_suffix(klass.implemented_protocols)
        + "\n"
        + _header_ivars_section(klass)
        + _code_section("\n".join(to_property_string(p) for p in klass.properties))
        + _code_section("\n\n".join(inline_blocks))
        + _code_section("\n\n".join(class_methods))
        + _code_section("\n\n".join(instance_methods))
        + "@end"
        + _preceding_padding(_nullability_postfix(klass.nullability))
    )


def _implemented_in_class(method: objc.Method) -> bool:
    hidden = method.belongs_to_protocol == "NSObject" and "NS_UNAVAILABLE" in method.compiler_attributes
    return method.code is not None and not hidden


def to_class_implementation_string(klass: objc.Class) -> str:
    covariant = klass.covariant_types
    private_ivars = [
        to_instance_variable_string(ivar)
        for ivar in klass.instance_variables
        if ivar.access is objc.InstanceVariableAccess.PRIVATE
    ]
    ivars = "{\n" + "\n".join(indent_lines(2, private_ivars)) + "\n}\n\n" if private_ivars else "\n"
    class_methods = [
        to_method_implementation_string("+", m, covariant) for m in klass.class_methods if _implemented_in_class(m)
    ]
    instance_methods = [
        to_method_implementation_string("-", m, covariant) for m in klass.instance_methods if _implemented_in_class(m)
    ]
    body = (
        _code_section(_nullability_prefix(klass.nullability))
        + f"@implementation {klass.name}\n"
        + ivars
        + _code_section("\n\n".join(class_methods))
        + "\n\n".join(instance_methods)
    ).strip()
    return body + "\n\n@end" + _preceding_padding(_nullability_postfix(klass.nullability))


def _class_has_implementation(klass: objc.Class) -> bool:
    return bool(
        klass.class_methods
        or klass.instance_methods
        or any(ivar.access is objc.InstanceVariableAccess.PRIVATE for ivar in klass.instance_variables)
    )


# -- files -----------------------------------------------------------------


def render_header(file: code.File) -> str:
    """Render the public header of a file."""
    public_imports = remove_duplicates([to_import_string(i) for i in file.imports if i.is_public])
    forward_declarations = remove_duplicates([to_forward_declaration_string(d) for d in file.forward_declarations])
    sections = [
        _comments(file.comments),
        "\n".join(public_imports),
        "\n".join(forward_declarations),
        _nullability_prefix(file.nullability),
        "\n".join(to_enumeration_string(e) for e in file.enumerations if e.is_public),
        "\n".join(to_block_type_string(b) for b in file.block_types if b.is_public),
        _header_functions_section(file.functions),
        "\n".join(to_struct_string(s) for s in file.structs),
        "\n\n".join(_cplusplus_guarded(cpp_renderer.render_class_declaration(c)) for c in file.cpp_classes),
        "\n\n".join(to_namespace_string(n) for n in file.namespaces),
        "\n\n".join(to_protocol_string(p) for p in file.protocols),
        "\n\n".join(to_class_header_string(c) for c in file.classes),
        _nullability_postfix(file.nullability),
    ]
    contents = "".join(_code_section(section) for section in sections)
    return contents.strip() + "\n"


def _has_implementation(file: code.File) -> bool:
    return bool(
        any(not i.is_public for i in file.imports)
        or any(not e.is_public for e in file.enumerations)
        or any(not b.is_public for b in file.block_types)
        or any(not f.is_public or (f.code and not f.is_inline) for f in file.functions)
        or any(_class_has_implementation(c) for c in file.classes)
    )


def render_implementation(file: code.File) -> str | None:
    """Render the implementation of a file, or None when there is nothing to implement."""
    if not _has_implementation(file):
        return None
    private_imports = remove_duplicates([to_import_string(i) for i in file.imports if not i.is_public])
    push = ""
    if file.diagnostic_ignores:
        ignores = "\n".join(f'#pragma GCC diagnostic ignored "{ignore}"' for ignore in file.diagnostic_ignores)
        push = "#pragma clang diagnostic push\n" + ignores
    functions = [to_function_implementation_string(f) for f in file.functions if not (f.is_public and f.is_inline)]
    cpp_definitions = [
        _cplusplus_guarded(cpp_renderer.render_class_definition(c)) for c in file.cpp_classes
    ]
    contents = (
        _code_section(_comments(file.comments))
        + _code_section(ARC_GUARD)
        + _code_section("\n".join(private_imports))
        + _code_section(push)
        + _code_section(_nullability_prefix(file.nullability))
        + _code_section("\n".join(to_static_constant_string(c) for c in file.static_constants))
        + _code_section("\n".join(to_enumeration_string(e) for e in file.enumerations if not e.is_public))
        + _code_section("\n".join(to_block_type_string(b) for b in file.block_types if not b.is_public))
        + _code_section("\n\n".join(to_macro_string(m) for m in file.macros))
        + _code_section("\n\n".join(functions))
        + "\n\n".join(to_class_implementation_string(c) for c in file.classes if _class_has_implementation(c))
        + "\n"
        + ("\n\n".join(cpp_definitions) + "\n" if cpp_definitions else "")
        + _without_extra(_nullability_postfix(file.nullability))
        + ("#pragma clang diagnostic pop\n" if file.diagnostic_ignores else "")
    )
    return contents.strip() + "\n"
