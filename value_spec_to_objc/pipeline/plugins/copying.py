"""
Copying plugin: value types are immutable, so -copyWithZone: returns self.
"""

from __future__ import annotations

from ..code_model import objc
from .base import AlgebraicTypePlugin, ObjectSpecPlugin


def copy_instance_method() -> objc.Method:
    return objc.Method(
        keywords=[
            objc.Keyword(
                "copyWithZone",
                objc.KeywordArgument("zone", objc.Type("NSZone", "NSZone *"), [objc.KeywordArgumentModifier.NULLABLE]),
            )
        ],
        return_type=objc.ReturnType(objc.Type("id", "id")),
        code=["return self;"],
        belongs_to_protocol="NSCopying",
    )


class CopyingPlugin(ObjectSpecPlugin):
    required_includes_to_run = ["RMCopying"]

    def implemented_protocols(self, object_type) -> list[objc.ImplementedProtocol]:
        return [objc.ImplementedProtocol("NSCopying")]

    def instance_methods(self, object_type) -> list[objc.Method]:
        return [copy_instance_method()]


class AlgebraicTypeCopyingPlugin(AlgebraicTypePlugin):
    required_includes_to_run = ["RMCopying"]

    def implemented_protocols(self, algebraic_type) -> list[objc.ImplementedProtocol]:
        return [objc.ImplementedProtocol("NSCopying")]

    def instance_methods(self, algebraic_type) -> list[objc.Method]:
        return [copy_instance_method()]
