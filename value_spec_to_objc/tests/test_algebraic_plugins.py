#!/usr/bin/env python3

import pytest

from value_spec_to_objc.pipeline.code_model import code
from value_spec_to_objc.pipeline.plugins import algebraic_type_templated_matching as templated
from value_spec_to_objc.pipeline.plugins.algebraic_type_initialization import AlgebraicTypeInitializationPlugin
from value_spec_to_objc.pipeline.plugins.algebraic_type_matching import IntegerMatchingPlugin, VoidMatchingPlugin
from value_spec_to_objc.pipeline.plugins.coding import AlgebraicTypeCodingPlugin, coding_name_for_subtype
from value_spec_to_objc.pipeline.plugins.description import AlgebraicTypeDescriptionPlugin
from value_spec_to_objc.pipeline.plugins.equality import AlgebraicTypeEqualityPlugin
from value_spec_to_objc.pipeline.plugins.init_new_unavailable import AlgebraicTypeInitNewUnavailablePlugin
from value_spec_to_objc.pipeline.spec_ast.nodes import (
    AlgebraicType,
    Attribute,
    AttributeType,
    NamedAttributeCollectionSubtype,
    SingleAttributeSubtype,
)

VALUE = Attribute("value", AttributeType("NSString", "NSString *", underlying_type="NSObject"))
ERROR = Attribute("error", AttributeType("NSError", "NSError *", underlying_type="NSObject"))


def outcome_type(**kwargs) -> AlgebraicType:
    """RMOutcome: Success(value), Empty, or a single error attribute"""
    return AlgebraicType(
        "RMOutcome",
        subtypes=[
            NamedAttributeCollectionSubtype("Success", (VALUE,)),
            NamedAttributeCollectionSubtype("Empty"),
            SingleAttributeSubtype(ERROR),
        ],
        **kwargs,
    )


class TestInitialization:
    """Test subtype constructors, the subtype enumeration and instance variables"""

    def test_enumeration(self):
        (enumeration,) = AlgebraicTypeInitializationPlugin().enumerations(outcome_type())
        assert enumeration.name == "_RMOutcomeSubtypes"
        assert enumeration.underlying_type == "NSUInteger"
        assert enumeration.values == ["_RMOutcomeSubtypesSuccess", "_RMOutcomeSubtypesEmpty", "_RMOutcomeSubtypesError"]
        assert not enumeration.is_public

    def test_constructors(self):
        success, empty, error = AlgebraicTypeInitializationPlugin().class_methods(outcome_type())

        assert [keyword.name for keyword in success.keywords] == ["successWithValue"]
        assert success.compiler_attributes == ["NS_SWIFT_NAME(success(value:))"]
        assert success.code == [
            "RMOutcome *object = [(Class)self new];",
            "object->_subtype = _RMOutcomeSubtypesSuccess;",
            "object->_success_value = value;",
            "return object;",
        ]

        assert [keyword.name for keyword in empty.keywords] == ["empty"]
        assert empty.keywords[0].argument is None
        assert empty.compiler_attributes == []

        assert [keyword.name for keyword in error.keywords] == ["error"]
        assert "object->_error = error;" in error.code

    def test_nonnull_attributes_are_asserted(self):
        _, _, error = AlgebraicTypeInitializationPlugin().class_methods(outcome_type(includes=["RMAssumeNonnull"]))
        assert error.code[0] == "RMParameterAssert(error != nil);"

    def test_instance_variables(self):
        ivars = AlgebraicTypeInitializationPlugin().instance_variables(outcome_type())
        assert [ivar.name for ivar in ivars] == ["subtype", "success_value", "error"]
        assert ivars[0].return_type.name == "_RMOutcomeSubtypes"

    def test_duplicate_subtype_names(self):
        algebraic_type = AlgebraicType(
            "RMFoo", subtypes=[NamedAttributeCollectionSubtype("Bar"), NamedAttributeCollectionSubtype("Bar")]
        )
        (error,) = AlgebraicTypeInitializationPlugin().validation_errors(algebraic_type)
        assert "found two or more subtypes with the name Bar" in str(error)

    def test_init_new_always_unavailable(self):
        plugin = AlgebraicTypeInitNewUnavailablePlugin()
        assert [m.keywords[0].name for m in plugin.class_methods(AlgebraicType("RMFoo"))] == ["new"]
        assert [m.keywords[0].name for m in plugin.instance_methods(AlgebraicType("RMFoo"))] == ["init"]


class TestMatching:
    """Test block-based matching"""

    def test_block_types(self):
        blocks = VoidMatchingPlugin().block_types(outcome_type())
        assert [block.name for block in blocks] == [
            "RMOutcomeSuccessMatchHandler",
            "RMOutcomeEmptyMatchHandler",
            "RMOutcomeErrorMatchHandler",
        ]
        assert [parameter.name for parameter in blocks[0].parameters] == ["value"]
        assert blocks[1].parameters == []

    def test_match_method(self):
        (method,) = VoidMatchingPlugin().instance_methods(outcome_type())
        assert [keyword.name for keyword in method.keywords] == ["matchSuccess", "empty", "error"]
        assert method.keywords[0].argument.name == "successMatchHandler"
        assert method.compiler_attributes == ["NS_SWIFT_NAME(match(success:empty:error:))"]
        assert method.code[:7] == [
            "switch (_subtype) {",
            "  case _RMOutcomeSubtypesSuccess: {",
            "    if (successMatchHandler) {",
            "      successMatchHandler(_success_value);",
            "    }",
            "    break;",
            "  }",
        ]

    def test_integer_matching(self):
        plugin = IntegerMatchingPlugin()
        algebraic_type = outcome_type()
        assert plugin.block_types(algebraic_type)[0].name == "RMOutcomeIntegerSuccessMatchHandler"
        (method,) = plugin.instance_methods(algebraic_type)
        assert method.keywords[0].name == "matchIntegerSuccess"
        assert method.code[0] == "__block NSInteger result = 0;"
        assert method.code[-1] == "return result;"
        assert "      result = successMatchHandler(_success_value);" in method.code

    def test_no_subtypes(self):
        assert VoidMatchingPlugin().instance_methods(AlgebraicType("RMFoo")) == []


class TestTemplatedMatching:
    """Test the Objective-C++ matcher helpers"""

    def test_helpers_file(self):
        file = templated.matching_file_for_algebraic_type(outcome_type())
        assert file.name == "RMOutcomeTemplatedMatchingHelpers"
        assert file.type is code.FileType.OBJECTIVE_CPLUSPLUS
        assert file.structs[0].name == "RMOutcomeMatcher"

    def test_matcher_function(self):
        lines = templated.matcher_function_code(outcome_type())
        assert lines[0] == (
            "static T match(RMOutcome *outcome, T(^successMatchHandler)(NSString *value), "
            "T(^emptyMatchHandler)(), T(^errorMatchHandler)(NSError *error)) {"
        )
        assert '  NSCAssert(outcome != nil, @"The ADT object outcome is nil");' in lines
        assert "  RMOutcomeEmptyMatchHandler matchEmpty = ^(void) {" in lines
        assert "    result = std::make_shared<T>(emptyMatchHandler());" in lines
        assert "  [outcome matchSuccess:matchSuccess empty:matchEmpty error:matchError];" in lines
        assert lines[-2:] == ["  return *result;", "}"]

    def test_shim_forwards(self):
        lines = templated.matcher_shim_code(outcome_type())
        assert lines[1] == "  return match(outcome, successMatchHandler, emptyMatchHandler, errorMatchHandler);"

    def test_merged_base_file_becomes_objective_cplusplus(self):
        base_file = code.File(name="RMOutcome")
        merged = templated.AlgebraicTypeTemplatedMatchingPlugin().transform_base_file(outcome_type(), base_file)
        assert merged.type is code.FileType.OBJECTIVE_CPLUSPLUS
        assert [struct.name for struct in merged.structs] == ["RMOutcomeMatcher"]


class TestAlgebraicTypeCoding:
    """Test NSCoding for algebraic types"""

    def test_subtype_coding_name(self):
        assert coding_name_for_subtype(NamedAttributeCollectionSubtype("Foo")) == '@"SUBTYPE_FOO"'
        assert coding_name_for_subtype(SingleAttributeSubtype(ERROR)) == '@"SUBTYPE_ERROR"'

    def test_constants(self):
        constants = AlgebraicTypeCodingPlugin().static_constants(outcome_type())
        assert [(c.name, c.value) for c in constants] == [
            ("kCodedSubtypeKey", '@"CODED_SUBTYPE"'),
            ("kSuccessValueKey", '@"SUCCESS_VALUE"'),
            ("kErrorKey", '@"ERROR"'),
        ]

    def test_decode_branches_on_subtype(self):
        decode, encode = AlgebraicTypeCodingPlugin().instance_methods(outcome_type())
        assert "  NSString *codedSubtype = [aDecoder decodeObjectForKey:kCodedSubtypeKey];" in decode.code
        assert '  if([codedSubtype isEqualToString:@"SUBTYPE_SUCCESS"]) {' in decode.code
        assert '  else if([codedSubtype isEqualToString:@"SUBTYPE_EMPTY"]) {' in decode.code
        assert "    _subtype = _RMOutcomeSubtypesEmpty;" in decode.code
        assert '    [aCoder encodeObject:@"SUBTYPE_ERROR" forKey:kCodedSubtypeKey];' in encode.code


class TestAlgebraicTypeDescriptionAndEquality:
    """Test -description and -isEqual: switching on the subtype"""

    def test_description_names_subtypes(self):
        (method,) = AlgebraicTypeDescriptionPlugin().instance_methods(outcome_type())
        assert (
            '    return [NSString stringWithFormat:@"%@ - Success \\n\\t value: %@; \\n", '
            "[super description], _success_value];"
        ) in method.code

    def test_equality_compares_subtype_first(self):
        is_equal, hash_method = AlgebraicTypeEqualityPlugin().instance_methods(outcome_type())
        assert is_equal.code[6] == "  _subtype == object->_subtype &&"
        assert hash_method.code[0] == "NSUInteger subhashes[] = {_subtype, [_success_value hash], [_error hash]};"


if __name__ == "__main__":
    pytest.main([__file__])
