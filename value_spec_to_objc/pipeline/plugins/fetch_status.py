"""
Tracks which attributes of a value type have been fetched.

Adds a `fetchStatus` attribute to the type and a companion value type,
`<Type>FetchStatus`, holding one `hasFetched<Attribute>` BOOL per attribute.
"""

from __future__ import annotations

from ...utils import capitalize
from ..analyzer.attribute_utils import type_reference_for_value_type_with_name
from ..spec_ast.nodes import Attribute, AttributeType, ObjectType
from .base import ObjectSpecPlugin

FETCH_STATUS_ATTRIBUTE_NAME = "fetchStatus"


def fetch_status_type_name(type_name: str) -> str:
    return type_name + "FetchStatus"


def fetch_status_attribute_name(attribute_name: str) -> str:
    return "hasFetched" + capitalize(attribute_name)


def _is_tracked(attribute: Attribute, object_type: ObjectType) -> bool:
    return attribute.type.name != fetch_status_type_name(object_type.name)


def _has_fetched_attribute(attribute: Attribute) -> Attribute:
    return Attribute(fetch_status_attribute_name(attribute.name), AttributeType("BOOL", "BOOL"))


def fetch_status_type_for_type(object_type: ObjectType) -> ObjectType:
    return ObjectType(
        name=fetch_status_type_name(object_type.name),
        attributes=[_has_fetched_attribute(a) for a in object_type.attributes if _is_tracked(a, object_type)],
        library_name=object_type.library_name,
        kind=object_type.kind,
    )


def fetch_status_attribute_for_type(object_type: ObjectType) -> Attribute:
    type_name = fetch_status_type_name(object_type.name)
    return Attribute(
        FETCH_STATUS_ATTRIBUTE_NAME,
        AttributeType(
            name=type_name,
            reference=type_reference_for_value_type_with_name(type_name),
            underlying_type="NSObject",
            library_type_is_defined_in=object_type.library_name,
        ),
    )


class FetchStatusPlugin(ObjectSpecPlugin):
    required_includes_to_run = ["RMFetchStatus"]

    def attributes(self, object_type: ObjectType) -> list[Attribute]:
        return [fetch_status_attribute_for_type(object_type)]

    def additional_types(self, object_type: ObjectType) -> list[ObjectType]:
        # Called with the plugin attributes already added, so fetchStatus is skipped
        return [fetch_status_type_for_type(object_type)]
