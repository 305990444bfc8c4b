"""
Construction of algebraic types: one class constructor per subtype storing
the subtype tag and the subtype's attributes in private instance variables.
"""

from __future__ import annotations

from ...utils import capitalize, lowercased
from ..analyzer import algebraic_type_utils, attribute_utils, comment_utils, import_utils, nullability_utils
from ..analyzer.initializer_utils import INSTANCETYPE, required_assertion
from ..code_model import objc
from ..errors import Error
from ..spec_ast.nodes import AlgebraicType, Attribute, NamedAttributeCollectionSubtype, Subtype
from .base import AlgebraicTypePlugin

OBJECT_WITHIN_INITIALIZER = "object"


def _keyword_argument(attribute: Attribute) -> objc.KeywordArgument:
    return objc.KeywordArgument(
        name=attribute.name,
        type=attribute_utils.original_type_of_attribute(attribute),
        modifiers=nullability_utils.keyword_argument_modifiers_for_nullability(attribute.nullability),
    )


def keywords_for_subtype(subtype: Subtype) -> list[objc.Keyword]:
    """`+fooWithA:b:` for named subtypes, `+foo` without attributes, `+attr:` for single-attribute subtypes."""
    if not isinstance(subtype, NamedAttributeCollectionSubtype):
        return [objc.Keyword(lowercased(subtype.attribute.name), _keyword_argument(subtype.attribute))]
    if not subtype.attributes:
        return [objc.Keyword(lowercased(subtype.name))]
    first, *rest = subtype.attributes
    keywords = [objc.Keyword(lowercased(subtype.name) + "With" + capitalize(first.name), _keyword_argument(first))]
    return keywords + [objc.Keyword(attribute.name, _keyword_argument(attribute)) for attribute in rest]


def _comments_for_subtype(subtype: Subtype) -> list[str]:
    if isinstance(subtype, NamedAttributeCollectionSubtype):
        return comment_utils.prefixed_param_comments_from_attributes(list(subtype.comments), subtype.attributes)
    return list(subtype.attribute.comments)


def swift_name_for_subtype(subtype: Subtype) -> str | None:
    if not isinstance(subtype, NamedAttributeCollectionSubtype) or not subtype.attributes:
        return None
    keywords = "".join(f"{attribute.name}:" for attribute in subtype.attributes)
    return f"NS_SWIFT_NAME({lowercased(subtype.name)}({keywords}))"


def initialization_class_method_for_subtype(algebraic_type: AlgebraicType, subtype: Subtype) -> objc.Method:
    assume_nonnull = nullability_utils.assumes_nonnull(algebraic_type.includes)
    attributes = algebraic_type_utils.attributes_from_subtype(subtype)
    assertions = [
        required_assertion(attribute.name)
        for attribute in attributes
        if nullability_utils.can_assert_existence_for_type(attribute_utils.compute_type_of_attribute(attribute))
        and nullability_utils.should_protect_from_nil_values_for_nullability(assume_nonnull, attribute.nullability)
    ]
    subtype_accessor = algebraic_type_utils.value_accessor_for_instance_variable_storing_subtype()
    enumeration_value = algebraic_type_utils.enumeration_value_name_for_subtype(algebraic_type, subtype)
    setters = [
        f"{OBJECT_WITHIN_INITIALIZER}->"
        f"{algebraic_type_utils.value_accessor_for_instance_variable_for_attribute(subtype, attribute)} = {attribute.name};"
        for attribute in attributes
    ]
    swift_name = swift_name_for_subtype(subtype)
    return objc.Method(
        keywords=keywords_for_subtype(subtype),
        return_type=objc.ReturnType(INSTANCETYPE),
        code=[
            *assertions,
            f"{algebraic_type.name} *{OBJECT_WITHIN_INITIALIZER} = [(Class)self new];",
            f"{OBJECT_WITHIN_INITIALIZER}->{subtype_accessor} = {enumeration_value};",
            *setters,
            f"return {OBJECT_WITHIN_INITIALIZER};",
        ],
        comments=comment_utils.comments_as_block(_comments_for_subtype(subtype)),
        compiler_attributes=[swift_name] if swift_name else [],
    )


def enumeration_for_subtypes(algebraic_type: AlgebraicType) -> objc.Enumeration:
    return objc.Enumeration(
        name=algebraic_type_utils.enumeration_name_for_algebraic_type(algebraic_type),
        underlying_type="NSUInteger",
        values=[
            algebraic_type_utils.enumeration_value_name_for_subtype(algebraic_type, subtype)
            for subtype in algebraic_type.subtypes
        ],
    )


def instance_variables_for_algebraic_type(algebraic_type: AlgebraicType) -> list[objc.InstanceVariable]:
    enumeration_name = algebraic_type_utils.enumeration_name_for_algebraic_type(algebraic_type)
    subtype_variable = objc.InstanceVariable(
        algebraic_type_utils.SUBTYPE_INSTANCE_VARIABLE, objc.Type(enumeration_name, enumeration_name)
    )
    return [subtype_variable] + [
        objc.InstanceVariable(
            algebraic_type_utils.name_of_instance_variable_for_attribute(subtype, attribute),
            attribute_utils.original_type_of_attribute(attribute),
        )
        for subtype, attribute in algebraic_type_utils.attributes_with_subtypes(algebraic_type.subtypes)
    ]


def imports_for_algebraic_type(algebraic_type: AlgebraicType) -> list[objc.Import]:
    public = import_utils.make_public_imports(algebraic_type.includes)
    base_imports = [import_utils.FOUNDATION_IMPORT, objc.Import(algebraic_type.name + ".h", False)]
    type_lookup_imports = [
        import_utils.import_for_type_lookup(algebraic_type.library_name, public or not lookup.can_forward_declare, lookup)
        for lookup in algebraic_type.type_lookups
        if lookup.name != algebraic_type.name and (not lookup.can_forward_declare or public)
    ]
    if not public and import_utils.skip_imports_in_implementation(algebraic_type.includes):
        return base_imports + type_lookup_imports
    attribute_imports = [
        import_utils.import_for_attribute(algebraic_type.library_name, public, attribute)
        for attribute in algebraic_type_utils.all_attributes_from_subtypes(algebraic_type.subtypes)
        if import_utils.should_include_import_for_type(algebraic_type.type_lookups, attribute.type.name)
    ]
    return base_imports + type_lookup_imports + attribute_imports


def forward_declarations_for_algebraic_type(algebraic_type: AlgebraicType) -> list[objc.ForwardDeclaration]:
    if import_utils.make_public_imports(algebraic_type.includes):
        return []
    declarations = []
    for attribute in algebraic_type_utils.all_attributes_from_subtypes(algebraic_type.subtypes):
        forward_declarable = import_utils.can_forward_declare_type_for_attribute(attribute) and not any(
            lookup.name == attribute.type.name and not lookup.can_forward_declare
            for lookup in algebraic_type.type_lookups
        )
        if forward_declarable:
            declarations.append(objc.ForwardDeclaration.for_class(attribute.type.name))
        protocol_declaration = import_utils.forward_protocol_declaration_for_attribute(attribute)
        if protocol_declaration is not None:
            declarations.append(protocol_declaration)
    return declarations


def duplicate_subtype_name_errors(algebraic_type: AlgebraicType) -> list[Error]:
    errors, seen = [], set()
    for subtype in algebraic_type.subtypes:
        name = algebraic_type_utils.subtype_name_from_subtype(subtype)
        if name in seen:
            errors.append(
                Error(
                    "Algebraic types cannot have two subtypes with the same name, "
                    f"but found two or more subtypes with the name {name}"
                )
            )
        seen.add(name)
    return errors


class AlgebraicTypeInitializationPlugin(AlgebraicTypePlugin):
    required_includes_to_run = ["AlgebraicTypeInitialization"]

    def class_methods(self, algebraic_type: AlgebraicType) -> list[objc.Method]:
        return [initialization_class_method_for_subtype(algebraic_type, subtype) for subtype in algebraic_type.subtypes]

    def enumerations(self, algebraic_type: AlgebraicType) -> list[objc.Enumeration]:
        return [enumeration_for_subtypes(algebraic_type)]

    def forward_declarations(self, algebraic_type: AlgebraicType) -> list[objc.ForwardDeclaration]:
        return forward_declarations_for_algebraic_type(algebraic_type)

    def imports(self, algebraic_type: AlgebraicType) -> list[objc.Import]:
        return imports_for_algebraic_type(algebraic_type)

    def instance_variables(self, algebraic_type: AlgebraicType) -> list[objc.InstanceVariable]:
        return instance_variables_for_algebraic_type(algebraic_type)

    def validation_errors(self, algebraic_type: AlgebraicType) -> list[Error]:
        return duplicate_subtype_name_errors(algebraic_type)
