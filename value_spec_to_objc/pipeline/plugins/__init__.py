"""Generation plugins; each contributes one concern to the generated files."""

from .base import AlgebraicTypePlugin, ObjectSpecPlugin, Plugin
from .registry import algebraic_type_plugins, object_spec_plugins

__all__ = ["AlgebraicTypePlugin", "ObjectSpecPlugin", "Plugin", "algebraic_type_plugins", "object_spec_plugins"]
