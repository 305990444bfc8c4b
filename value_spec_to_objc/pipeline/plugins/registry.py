"""
The built-in plugins, in the order their contributions are aggregated.
"""

from __future__ import annotations

from .algebraic_type_initialization import AlgebraicTypeInitializationPlugin
from .algebraic_type_matching import IntegerMatchingPlugin, VoidMatchingPlugin
from .algebraic_type_templated_matching import AlgebraicTypeTemplatedMatchingPlugin
from .base import AlgebraicTypePlugin, ObjectSpecPlugin
from .builder import BuilderPlugin
from .coding import AlgebraicTypeCodingPlugin, CodingPlugin
from .copying import AlgebraicTypeCopyingPlugin, CopyingPlugin
from .description import AlgebraicTypeDescriptionPlugin, DescriptionPlugin
from .description_attribute_error import DescriptionAttributeErrorPlugin
from .equality import AlgebraicTypeEqualityPlugin, EqualityPlugin
from .fetch_status import FetchStatusPlugin
from .immutable import ImmutableIvarsPlugin, ImmutablePropertiesPlugin
from .init_new_unavailable import AlgebraicTypeInitNewUnavailablePlugin, InitNewUnavailablePlugin
from .nullability import (
    AlgebraicTypeAssertNullabilityPlugin,
    AlgebraicTypeAssumeNonnullPlugin,
    AssertNullabilityPlugin,
    AssumeNonnullPlugin,
)
from .subclassing_restricted import AlgebraicTypeSubclassingRestrictedPlugin, SubclassingRestrictedPlugin
from .type_safety import AlgebraicTypeCopyingTypeSafetyPlugin, CodingTypeSafetyPlugin, CopyingTypeSafetyPlugin


def object_spec_plugins() -> list[ObjectSpecPlugin]:
    return [
        AssertNullabilityPlugin(),
        AssumeNonnullPlugin(),
        BuilderPlugin(),
        CodingPlugin(),
        CodingTypeSafetyPlugin(),
        CopyingPlugin(),
        CopyingTypeSafetyPlugin(),
        DescriptionPlugin(),
        DescriptionAttributeErrorPlugin(),
        EqualityPlugin(),
        FetchStatusPlugin(),
        ImmutableIvarsPlugin(),
        ImmutablePropertiesPlugin(),
        InitNewUnavailablePlugin(),
        SubclassingRestrictedPlugin(),
    ]


def algebraic_type_plugins() -> list[AlgebraicTypePlugin]:
    return [
        AlgebraicTypeInitializationPlugin(),
        AlgebraicTypeAssertNullabilityPlugin(),
        AlgebraicTypeAssumeNonnullPlugin(),
        AlgebraicTypeCodingPlugin(),
        AlgebraicTypeCopyingPlugin(),
        AlgebraicTypeCopyingTypeSafetyPlugin(),
        AlgebraicTypeDescriptionPlugin(),
        AlgebraicTypeEqualityPlugin(),
        AlgebraicTypeInitNewUnavailablePlugin(),
        AlgebraicTypeSubclassingRestrictedPlugin(),
        IntegerMatchingPlugin(),
        VoidMatchingPlugin(),
        AlgebraicTypeTemplatedMatchingPlugin(),
    ]
