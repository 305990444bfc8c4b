"""
Description plugin: -description listing every attribute with a format token.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..analyzer import algebraic_type_utils, attribute_utils
from ..analyzer.type_matching import TypeMatchers, match_type
from ..code_model import objc
from ..errors import Error
from ..spec_ast.nodes import AlgebraicType, Attribute, NamedAttributeCollectionSubtype, ObjectType, Subtype
from .base import AlgebraicTypePlugin, ObjectSpecPlugin

UI_GEOMETRY_IMPORT = objc.Import("UIGeometry.h", False, "UIKit")


@dataclass(frozen=True)
class AttributeDescription:
    token: str
    value_generator: Callable[[str], str]
    description_function_import: objc.Import | None = None


def _use_value_accessor(accessor: str) -> str:
    return accessor


def _cast_to(cast: str) -> Callable[[str], str]:
    return lambda accessor: f"({cast}){accessor}"


def _call(function: str) -> Callable[[str], str]:
    return lambda accessor: f"{function}({accessor})"


def _yes_or_no(accessor: str) -> str:
    return f'{accessor} ? @"YES" : @"NO"'


NSOBJECT_ATTRIBUTE_DESCRIPTION = AttributeDescription("%@", _use_value_accessor)

_ATTRIBUTE_DESCRIPTIONS: TypeMatchers[AttributeDescription | None] = TypeMatchers(
    id=lambda: NSOBJECT_ATTRIBUTE_DESCRIPTION,
    ns_object=lambda: NSOBJECT_ATTRIBUTE_DESCRIPTION,
    bool=lambda: AttributeDescription("%@", _yes_or_no),
    ns_integer=lambda: AttributeDescription("%lld", _cast_to("long long")),
    ns_uinteger=lambda: AttributeDescription("%llu", _cast_to("unsigned long long")),
    double=lambda: AttributeDescription("%lf", _use_value_accessor),
    float=lambda: AttributeDescription("%f", _use_value_accessor),
    cg_float=lambda: AttributeDescription("%f", _use_value_accessor),
    ns_time_interval=lambda: AttributeDescription("%lf", _use_value_accessor),
    uintptr_t=lambda: AttributeDescription("%p", _cast_to("void *")),
    uint32_t=lambda: AttributeDescription("%u", _use_value_accessor),
    uint64_t=lambda: AttributeDescription("%llu", _cast_to("unsigned long long")),
    int32_t=lambda: AttributeDescription("%d", _use_value_accessor),
    int64_t=lambda: AttributeDescription("%lld", _cast_to("long long")),
    sel=lambda: AttributeDescription("%@", _call("NSStringFromSelector")),
    ns_range=lambda: AttributeDescription("%@", _call("NSStringFromRange")),
    cg_rect=lambda: AttributeDescription("%@", _call("NSStringFromCGRect"), UI_GEOMETRY_IMPORT),
    cg_point=lambda: AttributeDescription("%@", _call("NSStringFromCGPoint"), UI_GEOMETRY_IMPORT),
    cg_size=lambda: AttributeDescription("%@", _call("NSStringFromCGSize"), UI_GEOMETRY_IMPORT),
    ui_edge_insets=lambda: AttributeDescription("%@", _call("NSStringFromUIEdgeInsets"), UI_GEOMETRY_IMPORT),
    class_object=lambda: NSOBJECT_ATTRIBUTE_DESCRIPTION,
    dispatch_block_t=lambda: NSOBJECT_ATTRIBUTE_DESCRIPTION,
    unmatched_type=lambda: None,
)


def attribute_description_for_type(type: objc.Type) -> AttributeDescription | None:
    return match_type(_ATTRIBUTE_DESCRIPTIONS, type)


def _description_for_attribute(attribute: Attribute) -> AttributeDescription | None:
    return attribute_description_for_type(attribute_utils.compute_type_of_attribute(attribute))


@dataclass(frozen=True)
class ComputedAttributeDescription:
    format_string: str
    value: str


def computed_description(attribute: Attribute, value_accessor: str) -> ComputedAttributeDescription:
    description = _description_for_attribute(attribute)
    return ComputedAttributeDescription(
        f"{attribute.name}: {description.token};", description.value_generator(value_accessor)
    )


def return_statement_for_descriptions(descriptions: list[ComputedAttributeDescription], name: str | None = None) -> str:
    r"""`return [NSString stringWithFormat:@"%@ - <name> \n\t a: %@; ... \n", [super description], ...];`"""
    name_string = " " + name if name else ""
    beginning = " \\n\\t " if descriptions else ""
    formats = " \\n\\t ".join(description.format_string for description in descriptions)
    values = "".join(", " + description.value for description in descriptions)
    return (
        f'return [NSString stringWithFormat:@"%@ -{name_string}{beginning}{formats} \\n", '
        f"[super description]{values}];"
    )


def description_instance_method(code: list[str]) -> objc.Method:
    return objc.Method(
        keywords=[objc.Keyword("description")],
        return_type=objc.ReturnType(objc.Type("NSString", "NSString *")),
        code=code,
        belongs_to_protocol="NSObject",
    )


def _imports(attributes: list[Attribute]) -> list[objc.Import]:
    imports = []
    for attribute in attributes:
        description = _description_for_attribute(attribute)
        if description is not None and description.description_function_import is not None:
            imports.append(description.description_function_import)
    return imports


def unknown_type_error(type_name: str, attribute: Attribute) -> Error:
    if attribute.type.underlying_type is not None:
        return Error(
            f'The Description plugin does not know how to format the backing type "{attribute.type.underlying_type}" '
            f"from {type_name}.{attribute.name}. Did you declare the wrong backing type?"
        )
    return Error(
        f'The Description plugin does not know how to format the type "{attribute.type.name}" '
        f"from {type_name}.{attribute.name}. Did you forget to declare a backing type?"
    )


def _validation_errors(type_name: str, attributes: list[Attribute]) -> list[Error]:
    return [
        unknown_type_error(type_name, attribute)
        for attribute in attributes
        if _description_for_attribute(attribute) is None
    ]


class DescriptionPlugin(ObjectSpecPlugin):
    required_includes_to_run = ["RMDescription"]

    def imports(self, object_type: ObjectType) -> list[objc.Import]:
        return _imports(object_type.attributes)

    def instance_methods(self, object_type: ObjectType) -> list[objc.Method]:
        if not object_type.attributes:
            return []
        descriptions = [
            computed_description(attribute, attribute_utils.ivar_for_attribute(attribute))
            for attribute in object_type.attributes
        ]
        return [description_instance_method([return_statement_for_descriptions(descriptions)])]

    def validation_errors(self, object_type: ObjectType) -> list[Error]:
        return _validation_errors(object_type.name, object_type.attributes)


def _return_statement_for_subtype(algebraic_type: AlgebraicType, subtype: Subtype) -> list[str]:
    descriptions = [
        computed_description(
            attribute, algebraic_type_utils.value_accessor_for_instance_variable_for_attribute(subtype, attribute)
        )
        for attribute in algebraic_type_utils.attributes_from_subtype(subtype)
    ]
    name = subtype.name if isinstance(subtype, NamedAttributeCollectionSubtype) else None
    return [return_statement_for_descriptions(descriptions, name)]


class AlgebraicTypeDescriptionPlugin(AlgebraicTypePlugin):
    """-description switching on the subtype; named subtypes print their name first."""

    required_includes_to_run = ["RMDescription"]

    def imports(self, algebraic_type: AlgebraicType) -> list[objc.Import]:
        return _imports(algebraic_type_utils.all_attributes_from_subtypes(algebraic_type.subtypes))

    def instance_methods(self, algebraic_type: AlgebraicType) -> list[objc.Method]:
        code = algebraic_type_utils.code_for_switching_on_subtype(
            algebraic_type,
            algebraic_type_utils.value_accessor_for_instance_variable_storing_subtype(),
            _return_statement_for_subtype,
        )
        return [description_instance_method(code)]

    def validation_errors(self, algebraic_type: AlgebraicType) -> list[Error]:
        return _validation_errors(
            algebraic_type.name, algebraic_type_utils.all_attributes_from_subtypes(algebraic_type.subtypes)
        )
