"""
Rejects an attribute named `description`, which would shadow -[NSObject description].
"""

from __future__ import annotations

from ..errors import Error
from ..spec_ast.nodes import ObjectType
from .base import ObjectSpecPlugin

DESCRIPTION_ATTRIBUTE_ERROR = Error(
    "Adding a method named `description` will override the basic `NSObject` method for a string describing "
    "the entire object. Consider using a different name instead."
)


class DescriptionAttributeErrorPlugin(ObjectSpecPlugin):
    required_includes_to_run = ["RMDescriptionAttributeError"]

    def validation_errors(self, object_type: ObjectType) -> list[Error]:
        if any(attribute.name == "description" for attribute in object_type.attributes):
            return [DESCRIPTION_ATTRIBUTE_ERROR]
        return []
