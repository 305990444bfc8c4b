"""
Configuration for the generator pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path

from .spec_ast.nodes import SpecType, TypeKind

DEFAULT_VALUE_INCLUDES = [
    "RMAssertNullability",
    "RMCopying",
    "RMDescription",
    "RMEquality",
    "RMImmutableProperties",
    "RMInitNewUnavailable",
    "RMValueObjectSemantics",
]

DEFAULT_OBJECT_INCLUDES = [
    "RMAssertNullability",
    "RMDescription",
    "RMImmutableProperties",
    "RMInitNewUnavailable",
]

DEFAULT_ALGEBRAIC_INCLUDES = [
    "AlgebraicTypeInitialization",
    "RMAssertNullability",
    "RMCopying",
    "RMDescription",
    "RMEquality",
    "RMInitNewUnavailable",
    "VoidMatching",
]


@dataclass
class GeneratorConfig:
    """Configuration options for generation."""

    # Superclass of every generated class
    base_class_name: str = "NSObject"

    # Library the base class header is imported from, if not Foundation
    base_class_library_name: str | None = None

    # Warnings silenced in every generated implementation
    diagnostic_ignores: list[str] = field(default_factory=list)

    # Includes applied to every type of the given kind
    default_value_includes: list[str] = field(default_factory=lambda: list(DEFAULT_VALUE_INCLUDES))
    default_object_includes: list[str] = field(default_factory=lambda: list(DEFAULT_OBJECT_INCLUDES))
    default_algebraic_includes: list[str] = field(default_factory=lambda: list(DEFAULT_ALGEBRAIC_INCLUDES))

    # Directory for the generated files (empty = beside each input file)
    output_path: str | None = None

    # Fold additional files of plugins into the base file
    single_file: bool = False

    @staticmethod
    def from_dict(d: dict) -> GeneratorConfig:
        """Create a config from a dictionary.

        Raises:
            ValueError: If the dictionary holds an unknown key
        """
        known = {f.name for f in fields(GeneratorConfig)}
        unknown = sorted(k for k in d if k not in known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")
        config = GeneratorConfig()
        for k, v in d.items():
            setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "base_class_name": self.base_class_name,
            "base_class_library_name": self.base_class_library_name,
            "diagnostic_ignores": self.diagnostic_ignores,
            "default_value_includes": self.default_value_includes,
            "default_object_includes": self.default_object_includes,
            "default_algebraic_includes": self.default_algebraic_includes,
            "output_path": self.output_path,
            "single_file": self.single_file,
        }

    def default_includes(self, kind: TypeKind) -> list[str]:
        if kind == TypeKind.ALGEBRAIC:
            return self.default_algebraic_includes
        if kind == TypeKind.OBJECT:
            return self.default_object_includes
        return self.default_value_includes

    def effective_includes(self, spec_type: SpecType) -> list[str]:
        """Kind defaults plus the type's includes, minus its excludes, without duplicates."""
        includes = []
        for include in self.default_includes(spec_type.kind) + spec_type.includes:
            if include not in includes and include not in spec_type.excludes:
                includes.append(include)
        return includes

    def output_folder_for(self, input_path: Path) -> Path:
        if self.output_path:
            return Path(self.output_path)
        return input_path.parent
