"""
File creation for value and object types.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from ..plugins.base import ObjectSpecPlugin
from ..spec_ast.nodes import ObjectType
from .file_creation import CreationResult, FileCreator, GenerationRequest


def plugins_to_run(object_type: ObjectType, plugins: Sequence[ObjectSpecPlugin]) -> list[ObjectSpecPlugin]:
    return [plugin for plugin in plugins if plugin.runs_for(object_type.includes)]


def type_with_plugin_attributes(object_type: ObjectType, plugins: Sequence[ObjectSpecPlugin]) -> ObjectType:
    """The type extended with the attributes plugins add to it."""
    extra = [attribute for plugin in plugins for attribute in plugin.attributes(object_type)]
    if not extra:
        return object_type
    return replace(object_type, attributes=object_type.attributes + extra)


def file_write_request(
    request: GenerationRequest, object_type: ObjectType, plugins: Sequence[ObjectSpecPlugin]
) -> CreationResult:
    active = plugins_to_run(object_type, plugins)
    object_type = type_with_plugin_attributes(object_type, active)
    companion_types = [companion for plugin in active for companion in plugin.additional_types(object_type)]
    return FileCreator(request, active).file_write_request(object_type, companion_types)
