"""
Forbids subclassing of the generated class.
"""

from __future__ import annotations

from .base import AlgebraicTypePlugin, ObjectSpecPlugin


class SubclassingRestrictedPlugin(ObjectSpecPlugin):
    required_includes_to_run = ["RMSubclassingRestricted"]

    def subclassing_restricted(self, object_type) -> bool:
        return True


class AlgebraicTypeSubclassingRestrictedPlugin(AlgebraicTypePlugin):
    required_includes_to_run = ["RMSubclassingRestricted"]

    def subclassing_restricted(self, algebraic_type) -> bool:
        return True
