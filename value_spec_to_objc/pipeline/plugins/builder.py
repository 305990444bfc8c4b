"""
Builder plugin: a mutable companion class for value types.

For `RMFoo` with attributes `bar` and `baz`, generates `RMFooBuilder` with
`+foo`, `+fooFromExistingFoo:`, `-withBar:`, `-withBaz:` and `-build`.
"""

from __future__ import annotations

from dataclasses import replace

from ...utils import capitalize, lowercased, string_removing_capitalized_prefix
from ..analyzer import attribute_utils, import_utils, nullability_utils
from ..analyzer.initializer_utils import INSTANCETYPE
from ..code_model import code, objc
from ..spec_ast.nodes import Attribute, ObjectType
from .base import ObjectSpecPlugin


def name_of_builder_for_value_type_with_name(type_name: str) -> str:
    return type_name + "Builder"


def short_name_of_object_to_build(type_name: str) -> str:
    return lowercased(string_removing_capitalized_prefix(type_name))


def _existing_object_name(object_type: ObjectType) -> str:
    return "existing" + capitalize(short_name_of_object_to_build(object_type.name))


def _keyword_name_for_attribute(attribute: Attribute) -> str:
    return "with" + capitalize(attribute.name)


def builder_class_method(object_type: ObjectType) -> objc.Method:
    builder_name = name_of_builder_for_value_type_with_name(object_type.name)
    return objc.Method(
        keywords=[objc.Keyword(short_name_of_object_to_build(object_type.name))],
        return_type=objc.ReturnType(INSTANCETYPE),
        code=[f"return [{builder_name} new];"],
    )


def _code_for_builder_from_existing_object(object_type: ObjectType) -> list[str]:
    return_opening = "return "
    attributes = object_type.attributes
    builder_creation = (
        f"[{name_of_builder_for_value_type_with_name(object_type.name)} "
        f"{short_name_of_object_to_build(object_type.name)}]"
    )
    lines = [return_opening + "[" * len(attributes) + builder_creation]
    offset = len(return_opening) + len(attributes)
    existing = _existing_object_name(object_type)
    for index, attribute in enumerate(attributes):
        indentation = " " * max(offset - index, 0)
        lines.append(f"{indentation}{_keyword_name_for_attribute(attribute)}:{existing}.{attribute.name}]")
    lines[-1] += ";"
    return lines


def builder_from_existing_object_class_method(object_type: ObjectType) -> objc.Method:
    short_name = short_name_of_object_to_build(object_type.name)
    argument = objc.KeywordArgument(_existing_object_name(object_type), attribute_utils.type_for_spec(object_type))
    return objc.Method(
        keywords=[objc.Keyword(f"{short_name}FromExisting{capitalize(short_name)}", argument)],
        return_type=objc.ReturnType(INSTANCETYPE),
        code=_code_for_builder_from_existing_object(object_type),
    )


def build_instance_method(object_type: ObjectType) -> objc.Method:
    invocation = attribute_utils.method_invocation_for_constructor(object_type, attribute_utils.ivar_for_attribute)
    return objc.Method(
        keywords=[objc.Keyword("build")],
        return_type=objc.ReturnType(attribute_utils.type_for_spec(object_type)),
        code=[f"return {invocation};"],
    )


def with_instance_method_for_attribute(supports_value_semantics: bool, attribute: Attribute) -> objc.Method:
    if attribute_utils.should_copy_incoming_value_for_attribute(supports_value_semantics, attribute):
        value = f"[{attribute.name} copy]"
    else:
        value = attribute.name
    argument = objc.KeywordArgument(
        attribute.name,
        attribute_utils.original_type_of_attribute(attribute),
        nullability_utils.keyword_argument_modifiers_for_nullability(attribute.nullability),
    )
    return objc.Method(
        keywords=[objc.Keyword(_keyword_name_for_attribute(attribute), argument)],
        return_type=objc.ReturnType(INSTANCETYPE),
        code=[f"{attribute_utils.ivar_for_attribute(attribute)} = {value};", "return self;"],
    )


def _type_lookup_imports(object_type: ObjectType) -> list[objc.Import]:
    needs_all = "UseForwardDeclarations" in object_type.includes
    imports = []
    for lookup in object_type.type_lookups:
        if not lookup.can_forward_declare:
            imports.append(import_utils.import_for_type_lookup(object_type.library_name, True, lookup))
        elif needs_all:
            imports.append(import_utils.import_for_type_lookup(object_type.library_name, False, lookup))
    return imports


def imports_for_builder(object_type: ObjectType, for_base_file: bool) -> list[objc.Import]:
    """Imports of the builder file; the builder's own header is left out when it shares the base file."""
    imports = [
        import_utils.FOUNDATION_IMPORT,
        objc.Import(object_type.name + ".h", False, object_type.library_name),
    ]
    if not for_base_file:
        imports.append(objc.Import(name_of_builder_for_value_type_with_name(object_type.name) + ".h", False))
    imports += _type_lookup_imports(object_type)

    make_public = import_utils.make_public_imports(object_type.includes)
    if make_public or not import_utils.skip_imports_in_implementation(object_type.includes):
        imports += [
            import_utils.import_for_attribute(object_type.library_name, False, attribute)
            for attribute in object_type.attributes
            if import_utils.should_include_import_for_type(object_type.type_lookups, attribute.type.name)
        ]
    return imports


def forward_declarations_for_builder(object_type: ObjectType) -> list[objc.ForwardDeclaration]:
    return [
        objc.ForwardDeclaration.for_class(object_type.name),
        *import_utils.forward_class_declarations_for_object_type(object_type),
    ]


def builder_class(object_type: ObjectType) -> objc.Class:
    supports_value_semantics = attribute_utils.type_supports_value_object_semantics(object_type)
    return objc.Class(
        name=name_of_builder_for_value_type_with_name(object_type.name),
        class_methods=[builder_class_method(object_type), builder_from_existing_object_class_method(object_type)],
        instance_methods=[
            build_instance_method(object_type),
            *[with_instance_method_for_attribute(supports_value_semantics, a) for a in object_type.attributes],
        ],
        instance_variables=[
            objc.InstanceVariable(attribute.name, attribute_utils.original_type_of_attribute(attribute))
            for attribute in object_type.attributes
        ],
        nullability=nullability_utils.class_nullability_for_includes(object_type.includes),
    )


def builder_file_for_value_type(object_type: ObjectType, for_base_file: bool = False) -> code.File:
    return code.File(
        name=name_of_builder_for_value_type_with_name(object_type.name),
        type=code.FileType.OBJECTIVE_C,
        imports=imports_for_builder(object_type, for_base_file),
        forward_declarations=forward_declarations_for_builder(object_type),
        classes=[builder_class(object_type)],
    )


class BuilderPlugin(ObjectSpecPlugin):
    required_includes_to_run = ["RMBuilder"]

    def additional_files(self, object_type: ObjectType) -> list[code.File]:
        return [builder_file_for_value_type(object_type)]

    def transform_base_file(self, object_type: ObjectType, base_file: code.File) -> code.File:
        return replace(
            base_file,
            imports=base_file.imports + imports_for_builder(object_type, True),
            forward_declarations=base_file.forward_declarations + forward_declarations_for_builder(object_type),
            classes=base_file.classes + [builder_class(object_type)],
        )
