"""
Compile-time conformance checks.

Each plugin emits an unused static function assigning nil, cast to every
copied attribute type, to an `id<NSCoding>` or `id<NSCopying>` variable, so
that a non-conforming attribute type fails to compile.
"""

from __future__ import annotations

from ..analyzer import attribute_utils, comment_utils
from ..analyzer.initializer_utils import INSTANCETYPE
from ..code_model import objc
from ..spec_ast.nodes import Attribute, ObjectType
from .base import AlgebraicTypePlugin, ObjectSpecPlugin

UNUSED_ATTRIBUTE = "__attribute__((unused))"


def _conformance_check(protocol: str, attribute: Attribute) -> str:
    return f"id<{protocol}> {attribute.name}_must_conform_to_{protocol} __unused = ({attribute.type.reference})nil;"


def should_validate_nscoding_conformance(supports_value_semantics: bool, attribute: Attribute) -> bool:
    return attribute_utils.should_copy_incoming_value_for_attribute(supports_value_semantics, attribute)


def should_validate_nscopying_conformance(supports_value_semantics: bool, attribute: Attribute) -> bool:
    # UIImage is immutable without adopting NSCopying; blocks are copied by the runtime
    return (
        attribute.type.name != "UIImage"
        and attribute_utils.compute_type_of_attribute(attribute).name != "dispatch_block_t"
        and attribute_utils.should_copy_incoming_value_for_attribute(supports_value_semantics, attribute)
    )


def coding_validator_function(object_type: ObjectType) -> objc.Function:
    supports_value_semantics = attribute_utils.type_supports_value_object_semantics(object_type)
    return objc.Function(
        name="RMCodingValidatorFunction",
        return_type=objc.ReturnType(),
        code=[
            _conformance_check("NSCoding", attribute)
            for attribute in object_type.attributes
            if should_validate_nscoding_conformance(supports_value_semantics, attribute)
        ],
        comments=comment_utils.comments_as_block(
            [
                "This unused function ensures that all object fields conform to NSCoding.",
                "The encoding methods do not check for protocol conformance.",
            ]
        ),
        compiler_attributes=[UNUSED_ATTRIBUTE],
    )


def copying_validator_function(object_type: ObjectType) -> objc.Function:
    supports_value_semantics = attribute_utils.type_supports_value_object_semantics(object_type)
    return objc.Function(
        name="RMCopyingValidatorFunction",
        return_type=objc.ReturnType(),
        code=[
            _conformance_check("NSCopying", attribute)
            for attribute in object_type.attributes
            if should_validate_nscopying_conformance(supports_value_semantics, attribute)
        ],
        comments=comment_utils.single_line_comments(
            [
                "This unused function ensures that all object fields conform to NSCopying.",
                "The -copy method is implemented on NSObject, and throws an exception at runtime.",
            ]
        ),
        compiler_attributes=[UNUSED_ATTRIBUTE],
    )


# Redeclared so that -copy is typed as returning the receiver's class
COPY_DECLARATION = objc.Method(keywords=[objc.Keyword("copy")], return_type=objc.ReturnType(INSTANCETYPE), code=None)


class CodingTypeSafetyPlugin(ObjectSpecPlugin):
    required_includes_to_run = ["RMCodingTypeSafety"]

    def functions(self, object_type: ObjectType) -> list[objc.Function]:
        return [coding_validator_function(object_type)]


class CopyingTypeSafetyPlugin(ObjectSpecPlugin):
    required_includes_to_run = ["RMCopyingTypeSafety"]

    def functions(self, object_type: ObjectType) -> list[objc.Function]:
        return [copying_validator_function(object_type)]

    def instance_methods(self, object_type: ObjectType) -> list[objc.Method]:
        return [COPY_DECLARATION]


class AlgebraicTypeCopyingTypeSafetyPlugin(AlgebraicTypePlugin):
    required_includes_to_run = ["RMCopyingTypeSafety"]

    def instance_methods(self, algebraic_type) -> list[objc.Method]:
        return [COPY_DECLARATION]
