"""
Marks -init and +new unavailable so the designated initializer must be used.
"""

from __future__ import annotations

from ..analyzer.initializer_utils import INSTANCETYPE
from ..code_model import objc
from ..spec_ast.nodes import AlgebraicType, ObjectType
from .base import AlgebraicTypePlugin, ObjectSpecPlugin


def _unavailable_method(name: str) -> objc.Method:
    return objc.Method(
        keywords=[objc.Keyword(name)],
        return_type=objc.ReturnType(INSTANCETYPE),
        compiler_attributes=["NS_UNAVAILABLE"],
        belongs_to_protocol="NSObject",
    )


def init_unavailable_instance_method() -> objc.Method:
    return _unavailable_method("init")


def new_unavailable_class_method() -> objc.Method:
    return _unavailable_method("new")


class InitNewUnavailablePlugin(ObjectSpecPlugin):
    """Only types with attributes lose -init/+new: without attributes they are the initializer."""

    required_includes_to_run = ["RMInitNewUnavailable"]

    def class_methods(self, object_type: ObjectType) -> list[objc.Method]:
        return [new_unavailable_class_method()] if object_type.attributes else []

    def instance_methods(self, object_type: ObjectType) -> list[objc.Method]:
        return [init_unavailable_instance_method()] if object_type.attributes else []


class AlgebraicTypeInitNewUnavailablePlugin(AlgebraicTypePlugin):
    required_includes_to_run = ["RMInitNewUnavailable"]

    def class_methods(self, algebraic_type: AlgebraicType) -> list[objc.Method]:
        return [new_unavailable_class_method()]

    def instance_methods(self, algebraic_type: AlgebraicType) -> list[objc.Method]:
        return [init_unavailable_instance_method()]
