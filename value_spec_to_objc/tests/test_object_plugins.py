#!/usr/bin/env python3

import pytest

from value_spec_to_objc.pipeline.analyzer.type_matching import TypeName
from value_spec_to_objc.pipeline.code_model import objc
from value_spec_to_objc.pipeline.code_model.clang_common import Nullability
from value_spec_to_objc.pipeline.plugins import builder, coding, equality
from value_spec_to_objc.pipeline.plugins.coding import CodingPlugin
from value_spec_to_objc.pipeline.plugins.description import DescriptionPlugin
from value_spec_to_objc.pipeline.plugins.description_attribute_error import (
    DESCRIPTION_ATTRIBUTE_ERROR,
    DescriptionAttributeErrorPlugin,
)
from value_spec_to_objc.pipeline.plugins.equality import EqualityPlugin
from value_spec_to_objc.pipeline.plugins.fetch_status import FetchStatusPlugin
from value_spec_to_objc.pipeline.plugins.immutable import ImmutableIvarsPlugin, ImmutablePropertiesPlugin
from value_spec_to_objc.pipeline.plugins.init_new_unavailable import InitNewUnavailablePlugin
from value_spec_to_objc.pipeline.plugins.nullability import PARAMETER_ASSERT_MACRO, AssertNullabilityPlugin
from value_spec_to_objc.pipeline.plugins.type_safety import CodingTypeSafetyPlugin
from value_spec_to_objc.pipeline.spec_ast.nodes import Attribute, AttributeType, ObjectType


def attribute(name, type_name, reference=None, nullability=Nullability.INHERITED, annotations=None):
    """Build an attribute the way the parser would; pointer types are backed by NSObject"""
    reference = reference or type_name
    underlying = "NSObject" if "*" in reference else None
    return Attribute(
        name=name,
        type=AttributeType(name=type_name, reference=reference, underlying_type=underlying),
        nullability=nullability,
        annotations=annotations or {},
    )


def string_attribute(name, **kwargs):
    return attribute(name, "NSString", "NSString *", **kwargs)


class TestEquality:
    """Test -isEqual: and -hash generation"""

    def test_checks_are_ordered_by_cost(self):
        object_type = ObjectType(
            "RMFoo",
            attributes=[string_attribute("name"), attribute("count", "NSInteger"), attribute("flag", "BOOL")],
        )
        is_equal, hash_method = EqualityPlugin().instance_methods(object_type)

        assert is_equal.keywords[0].name == "isEqual"
        assert is_equal.code[5:] == [
            "return",
            "  _count == object->_count &&",
            "  _flag == object->_flag &&",
            "  (_name == object->_name ? YES : [_name isEqual:object->_name]);",
        ]
        assert hash_method.code[0] == "NSUInteger subhashes[] = {[_name hash], ABS(_count), (NSUInteger)_flag};"
        assert "for (int ii = 1; ii < 3; ++ii) {" in hash_method.code

    def test_methods_belong_to_nsobject(self):
        object_type = ObjectType("RMFoo", attributes=[attribute("count", "NSUInteger")])
        for method in EqualityPlugin().instance_methods(object_type):
            assert method.belongs_to_protocol == "NSObject"

    def test_no_methods_without_attributes(self):
        assert EqualityPlugin().instance_methods(ObjectType("RMFoo")) == []

    def test_cgfloat_helpers_are_emitted_once(self):
        object_type = ObjectType("RMFoo", attributes=[attribute("x", "CGFloat"), attribute("y", "CGFloat")])
        names = [function.name for function in EqualityPlugin().functions(object_type)]
        assert names == ["CompareFloats", "CompareDoubles", "CompareCGFloats", "HashFloat", "HashDouble", "HashCGFloat"]

    def test_struct_hash_uses_fields(self):
        group = equality.generation_group_for_type(objc.Type("CGPoint", "CGPoint"))
        checks = [value.value for value in group.equality_check_generator("_point")]
        hashes = [value.value for value in group.hash_generator("_point")]
        assert checks == ["CGPointEqualToPoint(_point, object->_point)"]
        assert hashes == ["HashCGFloat(_point.x)", "HashCGFloat(_point.y)"]

    def test_unknown_type_error(self):
        object_type = ObjectType("RMFoo", attributes=[attribute("widget", "RMWidget")])
        errors = EqualityPlugin().validation_errors(object_type)
        assert [str(error) for error in errors] == [
            'The Equality plugin does not know how to compare or hash the type "RMWidget" from RMFoo.widget. '
            "Did you forget to declare a backing type?"
        ]

    def test_selector_comparison_imports_runtime(self):
        object_type = ObjectType("RMFoo", attributes=[attribute("action", "SEL")])
        assert EqualityPlugin().imports(object_type) == [objc.Import("runtime.h", False, "objc")]

    def test_every_known_type_has_a_group(self):
        for type_name in TypeName:
            group = equality.generation_group_for_type(objc.Type(type_name.value, type_name.value))
            assert group is not None, type_name

    def test_unknown_type_has_no_group(self):
        assert equality.generation_group_for_type(objc.Type("LikeStatus", "LikeStatus")) is None

    def test_underlying_type_resolves_unknown_type(self):
        backed = Attribute("likeStatus", AttributeType("LikeStatus", "LikeStatus", underlying_type="NSUInteger"))
        unbacked = Attribute("likeStatus", AttributeType("LikeStatus", "LikeStatus"))
        assert not equality.does_attribute_contain_an_unknown_type(backed)
        assert equality.does_attribute_contain_an_unknown_type(unbacked)

    def test_like_status_without_backing_type(self):
        object_type = ObjectType("Foo", attributes=[attribute("likeStatus", "LikeStatus")])
        errors = EqualityPlugin().validation_errors(object_type)
        assert [str(error) for error in errors] == [
            'The Equality plugin does not know how to compare or hash the type "LikeStatus" from Foo.likeStatus. '
            "Did you forget to declare a backing type?"
        ]


class TestBuilder:
    """Test the builder companion class"""

    def test_naming(self):
        assert builder.name_of_builder_for_value_type_with_name("RMFoo") == "RMFooBuilder"
        assert builder.short_name_of_object_to_build("RMFooBar") == "fooBar"

    def test_zero_attributes(self):
        object_type = ObjectType("RMFoo")
        assert builder.build_instance_method(object_type).code == ["return [[RMFoo alloc] init];"]
        assert builder.builder_from_existing_object_class_method(object_type).code == ["return [RMFooBuilder foo];"]

    def test_two_attributes(self):
        object_type = ObjectType("RMFoo", attributes=[string_attribute("bar"), attribute("baz", "NSInteger")])
        from_existing = builder.builder_from_existing_object_class_method(object_type)
        assert from_existing.keywords[0].name == "fooFromExistingFoo"
        assert from_existing.code == [
            "return [[[RMFooBuilder foo]",
            "         withBar:existingFoo.bar]",
            "        withBaz:existingFoo.baz];",
        ]
        assert builder.build_instance_method(object_type).code == ["return [[RMFoo alloc] initWithBar:_bar baz:_baz];"]

    def test_with_method_copies_value_objects(self):
        bar = string_attribute("bar")
        assert builder.with_instance_method_for_attribute(True, bar).code == ["_bar = [bar copy];", "return self;"]
        assert builder.with_instance_method_for_attribute(False, bar).code == ["_bar = bar;", "return self;"]

    def test_builder_file(self):
        object_type = ObjectType("RMFoo", attributes=[string_attribute("bar")], includes=["RMBuilder"])
        file = builder.builder_file_for_value_type(object_type)
        assert file.name == "RMFooBuilder"
        assert objc.Import("RMFooBuilder.h", False) in file.imports
        assert objc.ForwardDeclaration.for_class("RMFoo") in file.forward_declarations

    def test_zero_attribute_builder_class(self):
        builder_class = builder.builder_class(ObjectType("FooBarBaz"))
        assert [m.keywords[0].name for m in builder_class.class_methods] == [
            "fooBarBaz",
            "fooBarBazFromExistingFooBarBaz",
        ]
        (build,) = builder_class.instance_methods
        assert build.keywords[0].name == "build"
        assert build.code == ["return [[FooBarBaz alloc] init];"]
        assert builder_class.instance_variables == []


class TestImmutableProperties:
    """Test read-only properties and the designated initializer"""

    def test_properties(self):
        object_type = ObjectType(
            "RMFoo",
            attributes=[string_attribute("name"), attribute("count", "NSInteger")],
            includes=["RMValueObjectSemantics"],
        )
        name, count = ImmutablePropertiesPlugin().properties(object_type)
        assert name.modifiers == [
            objc.PropertyModifier.NONATOMIC,
            objc.PropertyModifier.READONLY,
            objc.PropertyModifier.COPY,
        ]
        assert count.modifiers == [objc.PropertyModifier.NONATOMIC, objc.PropertyModifier.READONLY]

    def test_designated_initializer(self):
        object_type = ObjectType(
            "RMFoo",
            attributes=[string_attribute("name", nullability=Nullability.NONNULL), attribute("count", "NSInteger")],
            includes=["RMValueObjectSemantics"],
        )
        (initializer,) = ImmutablePropertiesPlugin().instance_methods(object_type)
        assert [keyword.name for keyword in initializer.keywords] == ["initWithName", "count"]
        assert initializer.compiler_attributes == ["NS_DESIGNATED_INITIALIZER"]
        assert initializer.code == [
            "RMParameterAssert(name != nil);",
            "if ((self = [super init])) {",
            "  _name = [name copy];",
            "  _count = count;",
            "}",
            "",
            "return self;",
        ]

    def test_no_initializer_without_attributes(self):
        assert ImmutablePropertiesPlugin().instance_methods(ObjectType("RMFoo")) == []

    def test_ivars_variant(self):
        object_type = ObjectType("RMFoo", attributes=[attribute("count", "NSInteger")])
        plugin = ImmutableIvarsPlugin()
        assert [ivar.name for ivar in plugin.instance_variables(object_type)] == ["count"]
        getter = plugin.instance_methods(object_type)[-1]
        assert getter.keywords[0].name == "count"
        assert getter.code == ["return _count;"]


class TestInitNewUnavailable:
    """Test that -init and +new are marked unavailable"""

    def test_with_attributes(self):
        object_type = ObjectType("RMFoo", attributes=[attribute("count", "NSInteger")])
        plugin = InitNewUnavailablePlugin()
        (new,) = plugin.class_methods(object_type)
        (init,) = plugin.instance_methods(object_type)
        assert new.keywords[0].name == "new"
        assert init.keywords[0].name == "init"
        assert init.compiler_attributes == ["NS_UNAVAILABLE"]
        assert init.code == []

    def test_without_attributes(self):
        plugin = InitNewUnavailablePlugin()
        assert plugin.class_methods(ObjectType("RMFoo")) == []
        assert plugin.instance_methods(ObjectType("RMFoo")) == []


class TestAssertNullability:
    """Test the parameter assertion macro"""

    def test_macro_for_nonnull_object(self):
        object_type = ObjectType("RMFoo", attributes=[string_attribute("name", nullability=Nullability.NONNULL)])
        assert AssertNullabilityPlugin().macros(object_type) == [PARAMETER_ASSERT_MACRO]

    def test_no_macro_for_scalars(self):
        object_type = ObjectType(
            "RMFoo", attributes=[attribute("count", "NSInteger", nullability=Nullability.NONNULL)]
        )
        assert AssertNullabilityPlugin().macros(object_type) == []

    def test_assume_nonnull_asserts_inherited(self):
        object_type = ObjectType("RMFoo", attributes=[string_attribute("name")], includes=["RMAssumeNonnull"])
        assert AssertNullabilityPlugin().macros(object_type) == [PARAMETER_ASSERT_MACRO]


class TestCoding:
    """Test NSCoding generation"""

    def test_constants(self):
        object_type = ObjectType("RMFoo", attributes=[string_attribute("someValue")])
        (constant,) = CodingPlugin().static_constants(object_type)
        assert constant.name == "kSomeValueKey"
        assert constant.value == '@"SOME_VALUE"'

    def test_coding_key_annotation(self):
        name = string_attribute("name", annotations={"codingKey": [{"name": "user_name"}]})
        (constant,) = CodingPlugin().static_constants(ObjectType("RMFoo", attributes=[name]))
        assert constant.value == '@"user_name"'

    def test_encode_and_decode(self):
        object_type = ObjectType("RMFoo", attributes=[string_attribute("name"), attribute("count", "NSInteger")])
        decode, encode = CodingPlugin().instance_methods(object_type)
        assert decode.keywords[0].name == "initWithCoder"
        assert decode.code == [
            "if ((self = [super init])) {",
            "  _name = (id)[aDecoder decodeObjectForKey:kNameKey];",
            "  _count = [aDecoder decodeIntegerForKey:kCountKey];",
            "}",
            "return self;",
        ]
        assert encode.code == [
            "[aCoder encodeObject:_name forKey:kNameKey];",
            "[aCoder encodeInteger:_count forKey:kCountKey];",
        ]

    def test_secure_coding(self):
        object_type = ObjectType("RMFoo", attributes=[string_attribute("name")], includes=["NSSecureCoding"])
        plugin = CodingPlugin()
        decode, _ = plugin.instance_methods(object_type)
        assert "  _name = (id)[aDecoder decodeObjectOfClass:[NSObject class] forKey:kNameKey];" in decode.code
        assert plugin.implemented_protocols(object_type) == [objc.ImplementedProtocol("NSSecureCoding")]
        assert [m.keywords[0].name for m in plugin.class_methods(object_type)] == ["supportsSecureCoding"]

    def test_struct_goes_through_string(self):
        object_type = ObjectType("RMFoo", attributes=[attribute("frame", "CGRect")])
        plugin = CodingPlugin()
        decode, encode = plugin.instance_methods(object_type)
        assert "  _frame = CGRectFromString([aDecoder decodeObjectForKey:kFrameKey]);" in decode.code
        assert encode.code == ["[aCoder encodeObject:NSStringFromCGRect(_frame) forKey:kFrameKey];"]
        assert plugin.imports(object_type) == [coding.UI_GEOMETRY_IMPORT]

    def test_legacy_keys(self):
        name = string_attribute("name", annotations={"codingLegacyKey": [{"name": "old_name"}]})
        decode, _ = CodingPlugin().instance_methods(ObjectType("RMFoo", attributes=[name]))
        assert decode.code[1:5] == [
            "  _name = (id)[aDecoder decodeObjectForKey:kNameKey];",
            "  if (_name == nil) {",
            '    _name = (id)[aDecoder decodeObjectForKey:@"old_name"];',
            "  }",
        ]

    def test_unsupported_type(self):
        object_type = ObjectType("RMFoo", attributes=[attribute("klass", "Class")])
        (error,) = CodingPlugin().validation_errors(object_type)
        assert str(error).endswith("Class is not NSCoding-compliant.")

    def test_single_coding_key(self):
        name = string_attribute("name", annotations={"codingKey": [{"name": "a"}, {"name": "b"}]})
        errors = CodingPlugin().validation_errors(ObjectType("RMFoo", attributes=[name]))
        assert [str(error) for error in errors] == ["Only one %codingKey name is supported: RMFoo.name has 2."]

    def test_validator_function(self):
        object_type = ObjectType(
            "RMFoo",
            attributes=[string_attribute("name"), attribute("count", "NSInteger")],
            includes=["RMValueObjectSemantics"],
        )
        (function,) = CodingTypeSafetyPlugin().functions(object_type)
        assert function.name == "RMCodingValidatorFunction"
        assert function.code == ["id<NSCoding> name_must_conform_to_NSCoding __unused = (NSString *)nil;"]


class TestDescription:
    """Test -description generation"""

    def test_format_string(self):
        object_type = ObjectType("RMFoo", attributes=[string_attribute("name"), attribute("count", "NSInteger")])
        (method,) = DescriptionPlugin().instance_methods(object_type)
        assert method.code == [
            'return [NSString stringWithFormat:@"%@ - \\n\\t name: %@; \\n\\t count: %lld; \\n", '
            "[super description], _name, (long long)_count];"
        ]

    def test_bool_is_spelled_out(self):
        (method,) = DescriptionPlugin().instance_methods(ObjectType("RMFoo", attributes=[attribute("on", "BOOL")]))
        assert '_on ? @"YES" : @"NO"' in method.code[0]

    def test_attribute_named_description(self):
        object_type = ObjectType("RMFoo", attributes=[string_attribute("description")])
        assert DescriptionAttributeErrorPlugin().validation_errors(object_type) == [DESCRIPTION_ATTRIBUTE_ERROR]


class TestFetchStatus:
    """Test the fetch status attribute and its companion type"""

    def test_adds_fetch_status_attribute(self):
        object_type = ObjectType("RMFoo", attributes=[string_attribute("name")], library_name="RMKit")
        (added,) = FetchStatusPlugin().attributes(object_type)
        assert added.name == "fetchStatus"
        assert added.type == AttributeType(
            "RMFooFetchStatus", "RMFooFetchStatus *", underlying_type="NSObject", library_type_is_defined_in="RMKit"
        )

    def test_companion_type_tracks_every_other_attribute(self):
        object_type = ObjectType("RMFoo", attributes=[string_attribute("name"), attribute("count", "NSInteger")])
        plugin = FetchStatusPlugin()
        object_type = ObjectType(object_type.name, attributes=object_type.attributes + plugin.attributes(object_type))

        (companion,) = plugin.additional_types(object_type)
        assert companion.name == "RMFooFetchStatus"
        assert [(a.name, a.type.reference) for a in companion.attributes] == [
            ("hasFetchedName", "BOOL"),
            ("hasFetchedCount", "BOOL"),
        ]
        assert companion.includes == []


if __name__ == "__main__":
    pytest.main([__file__])
