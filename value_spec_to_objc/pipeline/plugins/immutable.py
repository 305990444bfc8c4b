"""
Immutable storage for value types: read-only properties, or private ivars
with getter methods, plus the designated initializer.
"""

from __future__ import annotations

from ..analyzer import attribute_utils, comment_utils, import_utils, initializer_utils, nullability_utils
from ..code_model import objc
from ..spec_ast.nodes import Attribute, ObjectType
from .base import ObjectSpecPlugin

USE_FORWARD_DECLARATIONS = "UseForwardDeclarations"


class _ImmutablePlugin(ObjectSpecPlugin):
    def forward_declarations(self, object_type: ObjectType) -> list[objc.ForwardDeclaration]:
        if USE_FORWARD_DECLARATIONS not in object_type.includes:
            return []
        return import_utils.forward_class_declarations_for_object_type(object_type)

    def imports(self, object_type: ObjectType) -> list[objc.Import]:
        return import_utils.imports_for_object_type(object_type)


class ImmutablePropertiesPlugin(_ImmutablePlugin):
    required_includes_to_run = ["RMImmutableProperties"]

    def instance_methods(self, object_type: ObjectType) -> list[objc.Method]:
        return initializer_utils.initializer_methods_for_object_type(object_type)

    def properties(self, object_type: ObjectType) -> list[objc.Property]:
        supports_value_semantics = attribute_utils.type_supports_value_object_semantics(object_type)
        return [
            attribute_utils.property_from_attribute(supports_value_semantics, attribute)
            for attribute in object_type.attributes
        ]


def getter_for_attribute(attribute: Attribute) -> objc.Method:
    return objc.Method(
        keywords=[objc.Keyword(attribute.name)],
        return_type=objc.ReturnType(
            attribute_utils.original_type_of_attribute(attribute),
            nullability_utils.keyword_argument_modifiers_for_nullability(attribute.nullability),
        ),
        code=[f"return _{attribute.name};"],
        comments=comment_utils.comments_as_block(attribute.comments),
    )


class ImmutableIvarsPlugin(_ImmutablePlugin):
    """Private instance variables exposed through plain getter methods."""

    required_includes_to_run = ["RMImmutableIvars"]

    def instance_methods(self, object_type: ObjectType) -> list[objc.Method]:
        initializers = initializer_utils.initializer_methods_for_object_type(object_type)
        return initializers + [getter_for_attribute(attribute) for attribute in object_type.attributes]

    def instance_variables(self, object_type: ObjectType) -> list[objc.InstanceVariable]:
        return [
            objc.InstanceVariable(attribute.name, attribute_utils.original_type_of_attribute(attribute))
            for attribute in object_type.attributes
        ]
