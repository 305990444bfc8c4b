#!/usr/bin/env python3

import pytest

from value_spec_to_objc.pipeline.aggregation import (
    ConflictError,
    FileCreator,
    GenerationRequest,
    object_spec_creation,
    sorted_methods,
)
from value_spec_to_objc.pipeline.aggregation.file_creation import generated_file_comment_lines
from value_spec_to_objc.pipeline.code_model import code, objc
from value_spec_to_objc.pipeline.config import GeneratorConfig
from value_spec_to_objc.pipeline.generator import Generator
from value_spec_to_objc.pipeline.plugins.base import ObjectSpecPlugin
from value_spec_to_objc.pipeline.plugins.registry import object_spec_plugins
from value_spec_to_objc.pipeline.spec_ast.nodes import (
    AlgebraicType,
    Attribute,
    AttributeType,
    NamedAttributeCollectionSubtype,
    ObjectType,
)

NAME = Attribute("name", AttributeType("NSString", "NSString *", underlying_type="NSObject"))
COUNT = Attribute("count", AttributeType("NSInteger", "NSInteger"))


def contents_by_name(result):
    """Map generated file names to their contents"""
    return {request.path.name: request.content for request in result.file_write_request.requests}


class FileTypePlugin(ObjectSpecPlugin):
    def __init__(self, file_type):
        self._file_type = file_type

    def file_type(self, object_type):
        return self._file_type


class ProtocolPlugin(ObjectSpecPlugin):
    def __init__(self, name):
        self._name = name

    def implemented_protocols(self, object_type):
        return [objc.ImplementedProtocol(self._name)]


class TestFileCreation:
    """Test folding plugin contributions into files"""

    def test_initializers_sort_first(self):
        methods = [
            objc.Method(keywords=[objc.Keyword(name)]) for name in ["hash", "initWithName", "description", "init"]
        ]
        assert [m.keywords[0].name for m in sorted_methods(methods)] == ["init", "initWithName", "description", "hash"]

    def test_banner_comment(self, tmp_path):
        lines = generated_file_comment_lines(tmp_path / "RMFoo.value.json")
        assert lines == [
            "This file is generated using the remodel generation script.",
            "The name of the input file is RMFoo.value.json",
        ]

    def test_conflicting_file_types(self, tmp_path):
        plugins = [FileTypePlugin(code.FileType.OBJECTIVE_C), FileTypePlugin(code.FileType.OBJECTIVE_CPLUSPLUS)]
        creator = FileCreator(GenerationRequest(tmp_path / "RMFoo.value.json", tmp_path), plugins)
        with pytest.raises(ConflictError):
            creator.file_type(ObjectType("RMFoo"))

        result = creator.file_write_request(ObjectType("RMFoo"))
        assert not result.ok
        assert [str(error) for error in result.errors] == ["conflicting file type requirements"]

    def test_agreeing_plugins_do_not_conflict(self, tmp_path):
        plugins = [FileTypePlugin(None), FileTypePlugin(code.FileType.OBJECTIVE_CPLUSPLUS)]
        creator = FileCreator(GenerationRequest(tmp_path / "RMFoo.value.json", tmp_path), plugins)
        assert creator.file_type(ObjectType("RMFoo")) is code.FileType.OBJECTIVE_CPLUSPLUS

    def test_later_plugins_list_protocols_first(self, tmp_path):
        plugins = [ProtocolPlugin("NSCopying"), ProtocolPlugin("NSCoding")]
        creator = FileCreator(GenerationRequest(tmp_path / "RMFoo.value.json", tmp_path), plugins)
        klass = creator.class_for_type(ObjectType("RMFoo"), objc.ClassNullability.DEFAULT)
        assert [p.name for p in klass.implemented_protocols] == ["NSCoding", "NSCopying"]

    def test_no_class_without_contributions(self, tmp_path):
        creator = FileCreator(GenerationRequest(tmp_path / "RMFoo.value.json", tmp_path), [])
        assert creator.class_for_type(ObjectType("RMFoo"), objc.ClassNullability.DEFAULT) is None

    def test_validation_errors_are_prefixed(self, tmp_path):
        path = tmp_path / "RMFoo.value.json"
        object_type = ObjectType(
            "RMFoo",
            attributes=[Attribute("description", NAME.type)],
            includes=["RMDescriptionAttributeError"],
        )
        result = object_spec_creation.file_write_request(GenerationRequest(path, tmp_path), object_type, object_spec_plugins())
        assert not result.ok
        (error,) = result.errors
        assert str(error).startswith(f"[{path}] Adding a method named `description`")

    def test_only_included_plugins_run(self):
        object_type = ObjectType("RMFoo", includes=["RMEquality", "RMCopying"])
        active = object_spec_creation.plugins_to_run(object_type, object_spec_plugins())
        assert [type(plugin).__name__ for plugin in active] == ["CopyingPlugin", "EqualityPlugin"]


class TestGeneration:
    """Test complete generation of value and algebraic types"""

    def test_value_type(self, tmp_path):
        object_type = ObjectType("RMFoo", attributes=[NAME, COUNT])
        result = Generator().file_write_request_for_type(object_type, tmp_path / "RMFoo.value.json")
        assert result.ok

        files = contents_by_name(result)
        assert sorted(files) == ["RMFoo.h", "RMFoo.m"]

        header = files["RMFoo.h"]
        assert header.startswith("/**\n * This file is generated using the remodel generation script.")
        assert "#import <Foundation/Foundation.h>" in header
        assert "@interface RMFoo : NSObject <NSCopying>" in header
        assert "@property (nonatomic, readonly, copy) NSString *name;" in header
        assert "+ (instancetype)new NS_UNAVAILABLE;" in header
        assert "- (instancetype)init NS_UNAVAILABLE;" in header
        assert "- (instancetype)initWithName:(NSString *)name count:(NSInteger)count NS_DESIGNATED_INITIALIZER;" in header
        # protocol methods are only implemented
        assert "isEqual" not in header
        assert "copyWithZone" not in header

        implementation = files["RMFoo.m"]
        assert "@implementation RMFoo" in implementation
        assert "- (BOOL)isEqual:(RMFoo *)object" in implementation
        assert "- (NSUInteger)hash" in implementation
        assert "- (NSString *)description" in implementation
        assert "- (id)copyWithZone:(nullable NSZone *)zone" in implementation
        assert "NS_UNAVAILABLE" not in implementation

    def test_builder_gets_its_own_files(self, tmp_path):
        object_type = ObjectType("RMFoo", attributes=[NAME], includes=["RMBuilder"])
        result = Generator().file_write_request_for_type(object_type, tmp_path / "RMFoo.value.json")
        assert sorted(contents_by_name(result)) == ["RMFoo.h", "RMFoo.m", "RMFooBuilder.h", "RMFooBuilder.m"]

    def test_single_file(self, tmp_path):
        config = GeneratorConfig(single_file=True)
        object_type = ObjectType("RMFoo", attributes=[NAME], includes=["RMBuilder"])
        result = Generator(config).file_write_request_for_type(object_type, tmp_path / "RMFoo.value.json")

        files = contents_by_name(result)
        assert sorted(files) == ["RMFoo.h", "RMFoo.m"]
        assert "@interface RMFooBuilder : NSObject" in files["RMFoo.h"]
        assert "@implementation RMFooBuilder" in files["RMFoo.m"]

    def test_fetch_status_companion_files(self, tmp_path):
        object_type = ObjectType("RMFoo", attributes=[NAME, COUNT], includes=["RMFetchStatus"])
        result = Generator().file_write_request_for_type(object_type, tmp_path / "RMFoo.value.json")

        files = contents_by_name(result)
        assert sorted(files) == ["RMFoo.h", "RMFoo.m", "RMFooFetchStatus.h", "RMFooFetchStatus.m"]
        assert result.file_write_request.name == "RMFoo"
        assert '#import "RMFooFetchStatus.h"' in files["RMFoo.h"]
        assert "RMFooFetchStatus *fetchStatus;" in files["RMFoo.h"]
        assert "@interface RMFooFetchStatus : NSObject" in files["RMFooFetchStatus.h"]
        assert "BOOL hasFetchedName;" in files["RMFooFetchStatus.h"]
        assert "BOOL hasFetchedCount;" in files["RMFooFetchStatus.h"]
        assert "hasFetchedFetchStatus" not in files["RMFooFetchStatus.h"]

    def test_fetch_status_in_single_file(self, tmp_path):
        config = GeneratorConfig(single_file=True)
        object_type = ObjectType("RMFoo", attributes=[NAME], includes=["RMFetchStatus"])
        result = Generator(config).file_write_request_for_type(object_type, tmp_path / "RMFoo.value.json")

        files = contents_by_name(result)
        assert sorted(files) == ["RMFoo.h", "RMFoo.m"]
        assert "@class RMFooFetchStatus;" in files["RMFoo.h"]
        assert "@interface RMFooFetchStatus : NSObject" in files["RMFoo.h"]
        assert "@implementation RMFooFetchStatus" in files["RMFoo.m"]
        assert "RMFooFetchStatus.h" not in files["RMFoo.h"]
        assert "RMFooFetchStatus.h" not in files["RMFoo.m"]

    def test_base_class(self, tmp_path):
        config = GeneratorConfig(base_class_name="RMBase", base_class_library_name="RMKit")
        result = Generator(config).file_write_request_for_type(
            ObjectType("RMFoo", attributes=[NAME]), tmp_path / "RMFoo.value.json"
        )
        header = contents_by_name(result)["RMFoo.h"]
        assert "#import <RMKit/RMBase.h>" in header
        assert "@interface RMFoo : RMBase" in header

    def test_output_folder(self, tmp_path):
        config = GeneratorConfig(output_path=str(tmp_path / "out"))
        result = Generator(config).file_write_request_for_type(
            ObjectType("RMFoo", attributes=[NAME]), tmp_path / "RMFoo.value.json"
        )
        for request in result.file_write_request.requests:
            assert request.path.parent == tmp_path / "out"

    def test_diagnostic_ignores(self, tmp_path):
        config = GeneratorConfig(diagnostic_ignores=["-Wprotocol"])
        result = Generator(config).file_write_request_for_type(
            ObjectType("RMFoo", attributes=[NAME]), tmp_path / "RMFoo.value.json"
        )
        assert '#pragma GCC diagnostic ignored "-Wprotocol"' in contents_by_name(result)["RMFoo.m"]

    def test_algebraic_type(self, tmp_path):
        algebraic_type = AlgebraicType(
            "RMOutcome",
            subtypes=[NamedAttributeCollectionSubtype("Success", (NAME,)), NamedAttributeCollectionSubtype("Empty")],
        )
        result = Generator().file_write_request_for_type(algebraic_type, tmp_path / "RMOutcome.adt.json")
        assert result.ok

        files = contents_by_name(result)
        header = files["RMOutcome.h"]
        assert "typedef void (^RMOutcomeSuccessMatchHandler)(NSString *name);" in header
        assert "typedef void (^RMOutcomeEmptyMatchHandler)(void);" in header
        assert "+ (instancetype)successWithName:(NSString *)name NS_SWIFT_NAME(success(name:));" in header

        implementation = files["RMOutcome.m"]
        assert "typedef NS_ENUM(NSUInteger, _RMOutcomeSubtypes) {" in implementation
        assert "_RMOutcomeSubtypes _subtype;" in implementation

    def test_templated_matching_helpers(self, tmp_path):
        algebraic_type = AlgebraicType(
            "RMOutcome", subtypes=[NamedAttributeCollectionSubtype("Empty")], includes=["TemplatedMatching"]
        )
        result = Generator().file_write_request_for_type(algebraic_type, tmp_path / "RMOutcome.adt.json")
        helpers = contents_by_name(result)["RMOutcomeTemplatedMatchingHelpers.h"]
        assert "template <typename T>" in helpers
        assert "struct RMOutcomeMatcher {" in helpers

    def test_templated_matching_in_single_file_is_objective_cplusplus(self, tmp_path):
        algebraic_type = AlgebraicType(
            "RMOutcome", subtypes=[NamedAttributeCollectionSubtype("Empty")], includes=["TemplatedMatching"]
        )
        config = GeneratorConfig(single_file=True)
        result = Generator(config).file_write_request_for_type(algebraic_type, tmp_path / "RMOutcome.adt.json")
        files = contents_by_name(result)
        assert sorted(files) == ["RMOutcome.h", "RMOutcome.mm"]
        assert "struct RMOutcomeMatcher {" in files["RMOutcome.h"]

    def test_excludes_remove_defaults(self, tmp_path):
        object_type = ObjectType("RMFoo", attributes=[NAME], excludes=["RMEquality"])
        result = Generator().file_write_request_for_type(object_type, tmp_path / "RMFoo.value.json")
        assert "isEqual" not in contents_by_name(result)["RMFoo.m"]


if __name__ == "__main__":
    pytest.main([__file__])
