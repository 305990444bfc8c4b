#!/usr/bin/env python3

from pathlib import Path

import pytest

from value_spec_to_objc.pipeline.config import (
    DEFAULT_ALGEBRAIC_INCLUDES,
    DEFAULT_OBJECT_INCLUDES,
    DEFAULT_VALUE_INCLUDES,
    GeneratorConfig,
)
from value_spec_to_objc.pipeline.spec_ast.nodes import AlgebraicType, ObjectType, TypeKind


class TestGeneratorConfig:
    """Test cases for the generator configuration"""

    def test_defaults(self):
        config = GeneratorConfig()
        assert config.base_class_name == "NSObject"
        assert config.base_class_library_name is None
        assert config.single_file is False
        assert config.default_includes(TypeKind.VALUE) == DEFAULT_VALUE_INCLUDES
        assert config.default_includes(TypeKind.OBJECT) == DEFAULT_OBJECT_INCLUDES
        assert config.default_includes(TypeKind.ALGEBRAIC) == DEFAULT_ALGEBRAIC_INCLUDES

    def test_from_dict(self):
        config = GeneratorConfig.from_dict({"base_class_name": "RMBase", "diagnostic_ignores": ["-Wprotocol"]})
        assert config.base_class_name == "RMBase"
        assert config.diagnostic_ignores == ["-Wprotocol"]
        assert GeneratorConfig.from_dict(config.to_dict()) == config

    def test_unknown_keys_are_rejected(self):
        with pytest.raises(ValueError, match="Unknown configuration keys: colour"):
            GeneratorConfig.from_dict({"colour": "blue"})

    def test_defaults_are_not_shared(self):
        first = GeneratorConfig()
        first.default_value_includes.append("RMCoding")
        assert "RMCoding" not in GeneratorConfig().default_value_includes


class TestEffectiveIncludes:
    """Test the includes a type ends up with"""

    def test_type_includes_are_appended(self):
        object_type = ObjectType("RMFoo", includes=["RMCoding", "RMEquality"], excludes=["RMDescription"])
        includes = GeneratorConfig().effective_includes(object_type)
        expected = [include for include in DEFAULT_VALUE_INCLUDES if include != "RMDescription"] + ["RMCoding"]
        assert includes == expected

    def test_object_kind(self):
        object_type = ObjectType("RMFoo", kind=TypeKind.OBJECT)
        assert GeneratorConfig().effective_includes(object_type) == DEFAULT_OBJECT_INCLUDES

    def test_algebraic_kind(self):
        algebraic_type = AlgebraicType("RMOutcome", excludes=["VoidMatching"])
        assert "VoidMatching" not in GeneratorConfig().effective_includes(algebraic_type)

    def test_excluding_a_type_include(self):
        object_type = ObjectType("RMFoo", includes=["RMBuilder"], excludes=["RMBuilder"])
        assert "RMBuilder" not in GeneratorConfig().effective_includes(object_type)


class TestOutputFolder:
    """Test where generated files are written"""

    def test_beside_the_input(self):
        assert GeneratorConfig().output_folder_for(Path("/specs/RMFoo.value.json")) == Path("/specs")

    def test_configured_folder(self):
        config = GeneratorConfig(output_path="/generated")
        assert config.output_folder_for(Path("/specs/RMFoo.value.json")) == Path("/generated")


if __name__ == "__main__":
    pytest.main([__file__])
