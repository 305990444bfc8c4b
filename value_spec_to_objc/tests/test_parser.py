#!/usr/bin/env python3

import json

import pytest

from value_spec_to_objc.pipeline.code_model.clang_common import Nullability
from value_spec_to_objc.pipeline.spec_ast.nodes import (
    AlgebraicType,
    NamedAttributeCollectionSubtype,
    ObjectType,
    ReferencedGenericType,
    SingleAttributeSubtype,
    TypeKind,
)
from value_spec_to_objc.pipeline.spec_ast.parser import kind_for_path, parse, parse_attribute_type, parse_file


def parse_dict(data, default_kind=TypeKind.VALUE):
    return parse(json.dumps(data), default_kind)


class TestAttributeTypes:
    """Test reading attribute types from their reference"""

    def test_pointer_type_is_backed_by_nsobject(self):
        attribute_type = parse_attribute_type("NSString *", {})
        assert attribute_type.name == "NSString"
        assert attribute_type.reference == "NSString *"
        assert attribute_type.underlying_type == "NSObject"

    def test_scalar_type(self):
        attribute_type = parse_attribute_type("NSInteger", {})
        assert attribute_type.name == "NSInteger"
        assert attribute_type.underlying_type is None

    def test_explicit_underlying_type(self):
        attribute_type = parse_attribute_type({"name": "RMState", "underlyingType": "NSUInteger"}, {})
        assert attribute_type.reference == "RMState"
        assert attribute_type.underlying_type == "NSUInteger"

    def test_generics(self):
        attribute_type = parse_attribute_type("NSDictionary<NSString *, NSArray<RMBar *> *> *", {})
        assert attribute_type.name == "NSDictionary"
        assert attribute_type.referenced_generic_types == (
            ReferencedGenericType("NSString"),
            ReferencedGenericType("NSArray", referenced_generic_types=(ReferencedGenericType("RMBar"),)),
        )

    def test_protocol_conformance(self):
        attribute_type = parse_attribute_type("id<RMDelegate>", {})
        assert attribute_type.name == "id"
        assert attribute_type.conforming_protocol == "RMDelegate"
        assert attribute_type.underlying_type is None

    def test_import_annotation(self):
        attribute_type = parse_attribute_type("RMBar *", {"import": [{"file": "RMBarTypes", "library": "RMKit"}]})
        assert attribute_type.file_type_is_defined_in == "RMBarTypes"
        assert attribute_type.library_type_is_defined_in == "RMKit"


class TestObjectTypes:
    """Test parsing value and object types"""

    def test_value_type(self):
        spec_type, errors = parse_dict(
            {
                "name": "RMFoo",
                "comments": ["A foo."],
                "includes": ["RMCoding"],
                "excludes": ["RMDescription"],
                "attributes": [
                    {"name": "name", "type": "NSString *", "nullability": "nonnull", "comments": ["The name"]},
                    {"name": "count", "type": "NSInteger"},
                ],
            }
        )
        assert errors == []
        assert isinstance(spec_type, ObjectType)
        assert spec_type.kind is TypeKind.VALUE
        assert spec_type.comments == ["A foo."]
        assert spec_type.includes == ["RMCoding"]
        assert spec_type.excludes == ["RMDescription"]
        assert [attribute.name for attribute in spec_type.attributes] == ["name", "count"]
        assert spec_type.attributes[0].nullability is Nullability.NONNULL
        assert spec_type.attributes[0].comments == ("The name",)

    def test_kind_in_document_wins(self):
        spec_type, _ = parse_dict({"name": "RMFoo", "kind": "object"})
        assert spec_type.kind is TypeKind.OBJECT

    def test_annotations_are_normalized_to_lists(self):
        spec_type, errors = parse_dict(
            {"name": "RMFoo", "attributes": [{"name": "a", "type": "BOOL", "annotations": {"codingKey": {"name": "x"}}}]}
        )
        assert errors == []
        assert spec_type.attributes[0].annotations == {"codingKey": [{"name": "x"}]}

    def test_type_lookups(self):
        spec_type, _ = parse_dict(
            {"name": "RMFoo", "typeLookups": [{"name": "RMBar", "library": "RMKit", "canForwardDeclare": False}]}
        )
        (lookup,) = spec_type.type_lookups
        assert lookup.name == "RMBar"
        assert lookup.library == "RMKit"
        assert lookup.can_forward_declare is False


class TestAlgebraicTypes:
    """Test parsing algebraic types"""

    def test_subtypes(self):
        spec_type, errors = parse_dict(
            {
                "name": "RMOutcome",
                "kind": "algebraic",
                "subtypes": [
                    {"name": "Success", "attributes": [{"name": "value", "type": "NSString *"}]},
                    {"attribute": {"name": "error", "type": "NSError *"}},
                ],
            }
        )
        assert errors == []
        assert isinstance(spec_type, AlgebraicType)
        success, error = spec_type.subtypes
        assert isinstance(success, NamedAttributeCollectionSubtype)
        assert success.attributes[0].name == "value"
        assert isinstance(error, SingleAttributeSubtype)
        assert error.attribute.type.name == "NSError"

    def test_needs_a_subtype(self):
        spec_type, errors = parse_dict({"name": "RMOutcome", "subtypes": []}, TypeKind.ALGEBRAIC)
        assert spec_type is None
        assert [str(error) for error in errors] == ["algebraic type RMOutcome needs at least one subtype"]


class TestErrors:
    """Test structural errors"""

    def test_invalid_json_reports_position(self):
        spec_type, (error,) = parse("{\n  \"name\": }")
        assert spec_type is None
        assert error.line == 2
        assert str(error).startswith("(line 2, column ")

    def test_unknown_kind(self):
        spec_type, errors = parse(json.dumps({"name": "RMFoo"}))
        assert spec_type is None
        assert [str(error) for error in errors] == ['unknown kind "None" for RMFoo']

    def test_all_errors_are_collected(self):
        _, errors = parse_dict(
            {
                "name": "RMFoo",
                "attributes": [{"type": "BOOL"}, {"name": "a"}, {"name": "b", "type": "BOOL", "nullability": "maybe"}],
            }
        )
        assert [str(error) for error in errors] == [
            "an attribute of RMFoo is missing its name",
            "attribute RMFoo.a is missing its type",
            'unknown nullability "maybe" for RMFoo.b',
        ]

    def test_missing_name(self):
        _, errors = parse_dict({"attributes": []})
        assert [str(error) for error in errors] == ['the specification is missing its "name"']


class TestMalformedShapes:
    """Test well-formed JSON holding values of the wrong shape"""

    def errors_for(self, data):
        spec_type, errors = parse_dict(data)
        assert spec_type is None
        return [str(error) for error in errors]

    def test_type_that_is_not_a_string_or_object(self):
        errors = self.errors_for({"name": "RMFoo", "attributes": [{"name": "a", "type": 5}]})
        assert errors == ["attribute RMFoo.a: an attribute type must be a string or an object"]

    def test_reference_that_is_not_a_string(self):
        errors = self.errors_for({"name": "RMFoo", "attributes": [{"name": "a", "type": {"reference": 5}}]})
        assert errors == ['attribute RMFoo.a: "reference" of an attribute type must be a string']

    def test_underlying_type_that_is_not_a_string(self):
        attribute = {"name": "a", "type": {"name": "RMState", "underlyingType": ["NSUInteger"]}}
        errors = self.errors_for({"name": "RMFoo", "attributes": [attribute]})
        assert errors == ['attribute RMFoo.a: "underlyingType" of an attribute type must be a string']

    def test_generics_that_are_not_a_list_of_strings(self):
        attribute = {"name": "a", "type": {"name": "NSArray", "referencedGenericTypes": "RMBar"}}
        errors = self.errors_for({"name": "RMFoo", "attributes": [attribute]})
        assert errors == ['attribute RMFoo.a: "referencedGenericTypes" of an attribute type must be a list of strings']

    def test_type_lookups_that_are_not_a_list(self):
        errors = self.errors_for({"name": "RMFoo", "typeLookups": "RMBar"})
        assert errors == ['"typeLookups" of RMFoo must be a list']

    def test_type_lookup_fields(self):
        errors = self.errors_for(
            {"name": "RMFoo", "typeLookups": [{"name": "RMBar", "library": 3}, {"name": "RMBaz", "canForwardDeclare": "no"}]}
        )
        assert errors == [
            '"library" of type lookup RMBar of RMFoo must be a string',
            '"canForwardDeclare" of type lookup RMBaz of RMFoo must be true or false',
        ]

    def test_library_name_that_is_not_a_string(self):
        errors = self.errors_for({"name": "RMFoo", "libraryName": 3})
        assert errors == ['"libraryName" of RMFoo must be a string']


class TestFiles:
    """Test reading spec files from disk"""

    def test_kind_from_suffix(self):
        assert kind_for_path("types/RMFoo.value.json") is TypeKind.VALUE
        assert kind_for_path("types/RMFoo.object.json") is TypeKind.OBJECT
        assert kind_for_path("types/RMFoo.adt.json") is TypeKind.ALGEBRAIC
        assert kind_for_path("types/RMFoo.json") is None

    def test_parse_file(self, tmp_path):
        path = tmp_path / "RMOutcome.adt.json"
        path.write_text(json.dumps({"name": "RMOutcome", "subtypes": [{"name": "Empty"}]}))
        spec_type, errors = parse_file(path)
        assert errors == []
        assert isinstance(spec_type, AlgebraicType)
        assert spec_type.subtypes == [NamedAttributeCollectionSubtype("Empty")]


if __name__ == "__main__":
    pytest.main([__file__])
