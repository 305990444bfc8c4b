"""
Base classes for generation plugins.

A plugin contributes pieces (methods, imports, functions, ...) to the files
generated for a type. Every contribution defaults to nothing, so a plugin
only overrides the aspects it cares about. Plugins never mutate the type
they are given.
"""

from __future__ import annotations

from ..code_model import code, objc
from ..errors import Error
from ..spec_ast.nodes import AlgebraicType, Attribute, ObjectType
from ..writer.file_writer import Request


class Plugin:
    """Aspects shared by object-type and algebraic-type plugins."""

    # Includes a type must list for the plugin to run
    required_includes_to_run: list[str] = []

    def additional_files(self, spec_type) -> list[code.File]:
        return []

    def transform_base_file(self, spec_type, base_file: code.File) -> code.File:
        return base_file

    def transform_file_request(self, request: Request) -> Request:
        return request

    def class_methods(self, spec_type) -> list[objc.Method]:
        return []

    def instance_methods(self, spec_type) -> list[objc.Method]:
        return []

    def file_type(self, spec_type) -> code.FileType | None:
        return None

    def forward_declarations(self, spec_type) -> list[objc.ForwardDeclaration]:
        return []

    def functions(self, spec_type) -> list[objc.Function]:
        return []

    def header_comments(self, spec_type) -> list[objc.Comment]:
        return []

    def imports(self, spec_type) -> list[objc.Import]:
        return []

    def implemented_protocols(self, spec_type) -> list[objc.ImplementedProtocol]:
        return []

    def instance_variables(self, spec_type) -> list[objc.InstanceVariable]:
        return []

    def macros(self, spec_type) -> list[objc.Macro]:
        return []

    def properties(self, spec_type) -> list[objc.Property]:
        return []

    def protocols(self, spec_type) -> list[objc.Protocol]:
        return []

    def static_constants(self, spec_type) -> list[objc.Constant]:
        return []

    def validation_errors(self, spec_type) -> list[Error]:
        return []

    def nullability(self, spec_type) -> objc.ClassNullability | None:
        return None

    def subclassing_restricted(self, spec_type) -> bool:
        return False

    def structs(self, spec_type) -> list[code.Struct]:
        return []

    def block_types(self, spec_type) -> list[objc.BlockType]:
        return []

    def enumerations(self, spec_type) -> list[objc.Enumeration]:
        return []

    def runs_for(self, includes: list[str]) -> bool:
        """Whether every required include is present."""
        return all(include in includes for include in self.required_includes_to_run)


class ObjectSpecPlugin(Plugin):
    """Plugin for value and object types; may also add attributes and companion types."""

    def attributes(self, object_type: ObjectType) -> list[Attribute]:
        return []

    def additional_types(self, object_type: ObjectType) -> list[ObjectType]:
        return []


class AlgebraicTypePlugin(Plugin):
    """Plugin for algebraic types."""
