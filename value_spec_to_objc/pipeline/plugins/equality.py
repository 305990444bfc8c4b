"""
Equality plugin: -isEqual: and -hash.

Each attribute type maps to a generation group producing the comparison and
hash expressions for an attribute accessor. Comparisons are chained cheapest
first so that scalar checks short-circuit before object message sends.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from ..analyzer import algebraic_type_utils, attribute_utils
from ..analyzer.type_matching import TypeMatchers, match_type
from ..code_model import objc
from ..errors import Error
from ..spec_ast.nodes import AlgebraicType, Attribute, ObjectType
from .base import AlgebraicTypePlugin, ObjectSpecPlugin

BOOL_TYPE = objc.Type("BOOL", "BOOL")
NSUINTEGER_TYPE = objc.Type("NSUInteger", "NSUInteger")
DOUBLE_TYPE = objc.Type("double", "double")
FLOAT_TYPE = objc.Type("float", "float")
CGFLOAT_TYPE = objc.Type("CGFloat", "CGFloat")
CGPOINT_TYPE = objc.Type("CGPoint", "CGPoint")
CGSIZE_TYPE = objc.Type("CGSize", "CGSize")


class ComputationCost(Enum):
    """Relative cost of evaluating a generated expression."""

    IVAR_ACCESS = 1
    POINTER_COMPARISON = 2
    FUNCTION_INVOCATION = 3
    OBJECT_MESSAGE_SEND = 4


class EqualityFunction(str, Enum):
    """Static helper functions emitted alongside -isEqual: and -hash."""

    COMPARE_FLOATS = "CompareFloats"
    COMPARE_DOUBLES = "CompareDoubles"
    COMPARE_CGFLOATS = "CompareCGFloats"
    HASH_FLOAT = "HashFloat"
    HASH_DOUBLE = "HashDouble"
    HASH_CGFLOAT = "HashCGFloat"

    @property
    def functions_to_include(self) -> list[EqualityFunction]:
        # CGFloat helpers delegate to both the float and double variants
        if self is EqualityFunction.COMPARE_CGFLOATS:
            return [EqualityFunction.COMPARE_FLOATS, EqualityFunction.COMPARE_DOUBLES, self]
        if self is EqualityFunction.HASH_CGFLOAT:
            return [EqualityFunction.HASH_FLOAT, EqualityFunction.HASH_DOUBLE, self]
        return [self]


@dataclass
class TypeEqualityValue:
    value: str
    computation_cost: ComputationCost
    functions_to_include: list[EqualityFunction] = field(default_factory=list)
    imports_to_include: list[objc.Import] = field(default_factory=list)


Generator = Callable[[str], list[TypeEqualityValue]]


@dataclass(frozen=True)
class TypeEqualityGenerationGroup:
    equality_check_generator: Generator
    hash_generator: Generator


@dataclass(frozen=True)
class SystemFunction:
    name: str
    import_to_include: objc.Import | None = None


def _on_comparison_object(accessor: str) -> str:
    return "object->" + accessor


def _compare_pointers(accessor: str) -> list[TypeEqualityValue]:
    return [TypeEqualityValue(f"{accessor} == {_on_comparison_object(accessor)}", ComputationCost.POINTER_COMPARISON)]


def _compare_objects(accessor: str) -> list[TypeEqualityValue]:
    pointer_values = _compare_pointers(accessor)
    pointer_check = " && ".join(value.value for value in pointer_values)
    return [
        TypeEqualityValue(
            f"({pointer_check} ? YES : [{accessor} isEqual:{_on_comparison_object(accessor)}])",
            ComputationCost.OBJECT_MESSAGE_SEND,
        )
    ]


def _not_included(accessor: str) -> list[TypeEqualityValue]:
    return []


def _hash_pointer(accessor: str) -> list[TypeEqualityValue]:
    return [TypeEqualityValue(accessor, ComputationCost.IVAR_ACCESS)]


def _hash_object(accessor: str) -> list[TypeEqualityValue]:
    return [TypeEqualityValue(f"[{accessor} hash]", ComputationCost.OBJECT_MESSAGE_SEND)]


def _cast_to(type: objc.Type) -> Generator:
    def generator(accessor: str) -> list[TypeEqualityValue]:
        return [TypeEqualityValue(f"({type.reference}){accessor}", ComputationCost.IVAR_ACCESS)]

    return generator


def _system_function_with_both_values(function: SystemFunction) -> Generator:
    def generator(accessor: str) -> list[TypeEqualityValue]:
        imports = [function.import_to_include] if function.import_to_include else []
        value = f"{function.name}({accessor}, {_on_comparison_object(accessor)})"
        return [TypeEqualityValue(value, ComputationCost.FUNCTION_INVOCATION, imports_to_include=imports)]

    return generator


def _system_function_with_value(function: SystemFunction) -> Generator:
    def generator(accessor: str) -> list[TypeEqualityValue]:
        imports = [function.import_to_include] if function.import_to_include else []
        return [
            TypeEqualityValue(f"{function.name}({accessor})", ComputationCost.FUNCTION_INVOCATION, imports_to_include=imports)
        ]

    return generator


def _equality_function_with_both_values(function: EqualityFunction) -> Generator:
    def generator(accessor: str) -> list[TypeEqualityValue]:
        value = f"{function.value}({accessor}, {_on_comparison_object(accessor)})"
        return [TypeEqualityValue(value, ComputationCost.FUNCTION_INVOCATION, function.functions_to_include)]

    return generator


def _equality_function_with_value(function: EqualityFunction) -> Generator:
    def generator(accessor: str) -> list[TypeEqualityValue]:
        return [
            TypeEqualityValue(f"{function.value}({accessor})", ComputationCost.FUNCTION_INVOCATION, function.functions_to_include)
        ]

    return generator


def _sub_generators(generators: list[Generator]) -> Generator:
    def generator(accessor: str) -> list[TypeEqualityValue]:
        return [value for sub_generator in generators for value in sub_generator(accessor)]

    return generator


def _equality_of_type(type: objc.Type) -> Generator:
    return lambda accessor: generation_group_for_type(type).equality_check_generator(accessor)


def _hash_of_type(type: objc.Type) -> Generator:
    return lambda accessor: generation_group_for_type(type).hash_generator(accessor)


def _hash_of_field(type: objc.Type, field_name: str) -> Generator:
    return lambda accessor: generation_group_for_type(type).hash_generator(f"{accessor}.{field_name}")


def _struct_group(comparison_function: str, fields: list[tuple[objc.Type, str]]) -> TypeEqualityGenerationGroup:
    return TypeEqualityGenerationGroup(
        _system_function_with_both_values(SystemFunction(comparison_function)),
        _sub_generators([_hash_of_field(type, name) for type, name in fields]),
    )


NSOBJECT_GENERATION_GROUP = TypeEqualityGenerationGroup(_compare_objects, _hash_object)
_POINTER_GROUP = TypeEqualityGenerationGroup(_compare_pointers, _hash_pointer)
_ABS_GROUP = TypeEqualityGenerationGroup(_compare_pointers, _system_function_with_value(SystemFunction("ABS")))
_OBJC_RUNTIME_IMPORT = objc.Import("runtime.h", False, "objc")

_GENERATION_GROUPS: TypeMatchers[TypeEqualityGenerationGroup | None] = TypeMatchers(
    id=lambda: NSOBJECT_GENERATION_GROUP,
    ns_object=lambda: NSOBJECT_GENERATION_GROUP,
    bool=lambda: TypeEqualityGenerationGroup(_compare_pointers, _cast_to(NSUINTEGER_TYPE)),
    ns_integer=lambda: _ABS_GROUP,
    ns_uinteger=lambda: _POINTER_GROUP,
    double=lambda: TypeEqualityGenerationGroup(
        _equality_function_with_both_values(EqualityFunction.COMPARE_DOUBLES),
        _equality_function_with_value(EqualityFunction.HASH_DOUBLE),
    ),
    float=lambda: TypeEqualityGenerationGroup(
        _equality_function_with_both_values(EqualityFunction.COMPARE_FLOATS),
        _equality_function_with_value(EqualityFunction.HASH_FLOAT),
    ),
    cg_float=lambda: TypeEqualityGenerationGroup(
        _equality_function_with_both_values(EqualityFunction.COMPARE_CGFLOATS),
        _equality_function_with_value(EqualityFunction.HASH_CGFLOAT),
    ),
    ns_time_interval=lambda: TypeEqualityGenerationGroup(_equality_of_type(DOUBLE_TYPE), _hash_of_type(DOUBLE_TYPE)),
    uintptr_t=lambda: _POINTER_GROUP,
    uint32_t=lambda: _POINTER_GROUP,
    uint64_t=lambda: _POINTER_GROUP,
    int32_t=lambda: _POINTER_GROUP,
    int64_t=lambda: _ABS_GROUP,
    sel=lambda: TypeEqualityGenerationGroup(
        _system_function_with_both_values(SystemFunction("sel_isEqual", _OBJC_RUNTIME_IMPORT)), _not_included
    ),
    ns_range=lambda: _struct_group("NSEqualRanges", [(NSUINTEGER_TYPE, "location"), (NSUINTEGER_TYPE, "length")]),
    cg_rect=lambda: _struct_group("CGRectEqualToRect", [(CGPOINT_TYPE, "origin"), (CGSIZE_TYPE, "size")]),
    cg_point=lambda: _struct_group("CGPointEqualToPoint", [(CGFLOAT_TYPE, "x"), (CGFLOAT_TYPE, "y")]),
    cg_size=lambda: _struct_group("CGSizeEqualToSize", [(CGFLOAT_TYPE, "width"), (CGFLOAT_TYPE, "height")]),
    ui_edge_insets=lambda: _struct_group(
        "UIEdgeInsetsEqualToEdgeInsets",
        [(CGFLOAT_TYPE, "top"), (CGFLOAT_TYPE, "left"), (CGFLOAT_TYPE, "bottom"), (CGFLOAT_TYPE, "right")],
    ),
    class_object=lambda: NSOBJECT_GENERATION_GROUP,
    dispatch_block_t=lambda: NSOBJECT_GENERATION_GROUP,
    unmatched_type=lambda: None,
)


def generation_group_for_type(type: objc.Type) -> TypeEqualityGenerationGroup | None:
    """Comparison and hash generators for a type, or None for an unknown type."""
    return match_type(_GENERATION_GROUPS, type)


@dataclass
class GeneratedTypeEqualityInformation:
    equality_checks: list[TypeEqualityValue]
    hash_values: list[TypeEqualityValue]

    @property
    def all_values(self) -> list[TypeEqualityValue]:
        return self.equality_checks + self.hash_values


def _information_for_group(group: TypeEqualityGenerationGroup, accessor: str) -> GeneratedTypeEqualityInformation:
    return GeneratedTypeEqualityInformation(group.equality_check_generator(accessor), group.hash_generator(accessor))


def _information_for_attribute(attribute: Attribute) -> GeneratedTypeEqualityInformation:
    group = generation_group_for_type(attribute_utils.compute_type_of_attribute(attribute))
    return _information_for_group(group, attribute_utils.ivar_for_attribute(attribute))


def _information_for_algebraic_type(algebraic_type: AlgebraicType) -> list[GeneratedTypeEqualityInformation]:
    subtype_information = _information_for_group(
        generation_group_for_type(NSUINTEGER_TYPE),
        algebraic_type_utils.value_accessor_for_instance_variable_storing_subtype(),
    )
    attribute_information = [
        _information_for_group(
            generation_group_for_type(attribute_utils.compute_type_of_attribute(attribute)),
            algebraic_type_utils.value_accessor_for_instance_variable_for_attribute(subtype, attribute),
        )
        for subtype, attribute in algebraic_type_utils.attributes_with_subtypes(algebraic_type.subtypes)
    ]
    return [subtype_information, *attribute_information]


def is_equal_instance_method(type_name: str, information: list[GeneratedTypeEqualityInformation]) -> objc.Method:
    """-isEqual: with the checks ordered by ascending computation cost."""
    checks = [check for info in information for check in info.equality_checks]
    values = [check.value for check in sorted(checks, key=lambda check: check.computation_cost.value)]
    code = [
        "if (self == object) {",
        "  return YES;",
        "} else if (object == nil || ![object isKindOfClass:[self class]]) {",
        "  return NO;",
        "}",
        "return",
        *[f"  {value} &&" for value in values[:-1]],
        f"  {values[-1]};",
    ]
    argument = objc.KeywordArgument(
        "object", objc.Type(type_name, attribute_utils.type_reference_for_value_type_with_name(type_name))
    )
    return objc.Method(
        keywords=[objc.Keyword("isEqual", argument)],
        return_type=objc.ReturnType(BOOL_TYPE),
        code=code,
        belongs_to_protocol="NSObject",
    )


def hash_instance_method(information: list[GeneratedTypeEqualityInformation]) -> objc.Method:
    hash_values = [value.value for info in information for value in info.hash_values]
    return objc.Method(
        keywords=[objc.Keyword("hash")],
        return_type=objc.ReturnType(NSUINTEGER_TYPE),
        code=[
            "NSUInteger subhashes[] = {" + ", ".join(hash_values) + "};",
            "NSUInteger result = subhashes[0];",
            f"for (int ii = 1; ii < {len(hash_values)}; ++ii) {{",
            "  unsigned long long base = (((unsigned long long)result) << 32 | subhashes[ii]);",
            "  base = (~base) + (base << 18);",
            "  base ^= (base >> 31);",
            "  base *=  21;",
            "  base ^= (base >> 11);",
            "  base += (base << 6);",
            "  base ^= (base >> 22);",
            "  result = base;",
            "}",
            "return result;",
        ],
        belongs_to_protocol="NSObject",
    )


def _cgfloat_dispatch(double_code: str, float_code: str) -> list[str]:
    return [
        "#if CGFLOAT_IS_DOUBLE",
        "  BOOL useDouble = YES;",
        "#else",
        "  BOOL useDouble = NO;",
        "#endif",
        "  if (useDouble) {",
        "    " + double_code,
        "  } else {",
        "    " + float_code,
        "  }",
    ]


def _parameter(name: str, type: objc.Type) -> objc.FunctionParameter:
    return objc.FunctionParameter(name, type)


_FUNCTION_DEFINITIONS: dict[EqualityFunction, objc.Function] = {
    EqualityFunction.COMPARE_FLOATS: objc.Function(
        name="CompareFloats",
        return_type=objc.ReturnType(BOOL_TYPE),
        parameters=[_parameter("givenFloat", FLOAT_TYPE), _parameter("floatToCompare", FLOAT_TYPE)],
        code=[
            "return fabsf(givenFloat - floatToCompare) < FLT_EPSILON * fabsf(givenFloat + floatToCompare) "
            "|| fabsf(givenFloat - floatToCompare) < FLT_MIN;"
        ],
    ),
    EqualityFunction.HASH_FLOAT: objc.Function(
        name="HashFloat",
        return_type=objc.ReturnType(NSUINTEGER_TYPE),
        parameters=[_parameter("givenFloat", FLOAT_TYPE)],
        code=[
            "union {",
            "  float key;",
            "  uint32_t bits;",
            "} u;",
            "u.key = givenFloat;",
            "NSUInteger h = (NSUInteger)u.bits;",
            "#if !TARGET_RT_64_BIT",
            "h = ~h + (h << 15);",
            "h ^= (h >> 12);",
            "h += (h << 2);",
            "h ^= (h >> 4);",
            "h *= 2057;",
            "h ^= (h >> 16);",
            "#else",
            "h += ~h + (h << 21);",
            "h ^= (h >> 24);",
            "h = (h + (h << 3)) + (h << 8);",
            "h ^= (h >> 14);",
            "h = (h + (h << 2)) + (h << 4);",
            "h ^= (h >> 28);",
            "h += (h << 31);",
            "#endif",
            "return h;",
        ],
    ),
    EqualityFunction.COMPARE_DOUBLES: objc.Function(
        name="CompareDoubles",
        return_type=objc.ReturnType(BOOL_TYPE),
        parameters=[_parameter("givenDouble", DOUBLE_TYPE), _parameter("doubleToCompare", DOUBLE_TYPE)],
        code=[
            "return fabs(givenDouble - doubleToCompare) < DBL_EPSILON * fabs(givenDouble + doubleToCompare) "
            "|| fabs(givenDouble - doubleToCompare) < DBL_MIN;"
        ],
    ),
    EqualityFunction.HASH_DOUBLE: objc.Function(
        name="HashDouble",
        return_type=objc.ReturnType(NSUINTEGER_TYPE),
        parameters=[_parameter("givenDouble", DOUBLE_TYPE)],
        code=[
            "union {",
            "  double key;",
            "  uint64_t bits;",
            "} u;",
            "u.key = givenDouble;",
            "NSUInteger p = u.bits;",
            "p = (~p) + (p << 18);",
            "p ^= (p >> 31);",
            "p *=  21;",
            "p ^= (p >> 11);",
            "p += (p << 6);",
            "p ^= (p >> 22);",
            "return (NSUInteger) p;",
        ],
    ),
    EqualityFunction.COMPARE_CGFLOATS: objc.Function(
        name="CompareCGFloats",
        return_type=objc.ReturnType(BOOL_TYPE),
        parameters=[_parameter("givenCGFloat", CGFLOAT_TYPE), _parameter("cgFloatToCompare", CGFLOAT_TYPE)],
        code=_cgfloat_dispatch(
            "return CompareDoubles(givenCGFloat, cgFloatToCompare);",
            "return CompareFloats(givenCGFloat, cgFloatToCompare);",
        ),
    ),
    EqualityFunction.HASH_CGFLOAT: objc.Function(
        name="HashCGFloat",
        return_type=objc.ReturnType(NSUINTEGER_TYPE),
        parameters=[_parameter("givenCGFloat", CGFLOAT_TYPE)],
        code=_cgfloat_dispatch("return HashDouble(givenCGFloat);", "return HashFloat(givenCGFloat);"),
    ),
}


def functions_to_include(information: list[GeneratedTypeEqualityInformation]) -> list[objc.Function]:
    """Helper function definitions needed by the generated code, each emitted once."""
    needed: list[EqualityFunction] = []
    for info in information:
        for value in info.all_values:
            for function in value.functions_to_include:
                if function not in needed:
                    needed.append(function)
    return [_FUNCTION_DEFINITIONS[function] for function in needed]


def imports_to_include(information: list[GeneratedTypeEqualityInformation]) -> list[objc.Import]:
    return [an_import for info in information for value in info.all_values for an_import in value.imports_to_include]


def does_attribute_contain_an_unknown_type(attribute: Attribute) -> bool:
    return generation_group_for_type(attribute_utils.compute_type_of_attribute(attribute)) is None


def unknown_type_error(type_name: str, attribute: Attribute) -> Error:
    if attribute.type.underlying_type is not None:
        return Error(
            f'The Equality plugin does not know how to compare or hash the backing type "{attribute.type.underlying_type}" '
            f"from {type_name}.{attribute.name}. Did you declare the wrong backing type?"
        )
    return Error(
        f'The Equality plugin does not know how to compare or hash the type "{attribute.type.name}" '
        f"from {type_name}.{attribute.name}. Did you forget to declare a backing type?"
    )


class EqualityPlugin(ObjectSpecPlugin):
    required_includes_to_run = ["RMEquality"]

    def _information(self, object_type: ObjectType) -> list[GeneratedTypeEqualityInformation]:
        return [_information_for_attribute(attribute) for attribute in object_type.attributes]

    def functions(self, object_type: ObjectType) -> list[objc.Function]:
        return functions_to_include(self._information(object_type))

    def imports(self, object_type: ObjectType) -> list[objc.Import]:
        return imports_to_include(self._information(object_type))

    def instance_methods(self, object_type: ObjectType) -> list[objc.Method]:
        if not object_type.attributes:
            return []
        information = self._information(object_type)
        return [is_equal_instance_method(object_type.name, information), hash_instance_method(information)]

    def validation_errors(self, object_type: ObjectType) -> list[Error]:
        return [
            unknown_type_error(object_type.name, attribute)
            for attribute in object_type.attributes
            if does_attribute_contain_an_unknown_type(attribute)
        ]


class AlgebraicTypeEqualityPlugin(AlgebraicTypePlugin):
    """Equality for algebraic types; the subtype tag is compared and hashed first."""

    required_includes_to_run = ["RMEquality"]

    def functions(self, algebraic_type: AlgebraicType) -> list[objc.Function]:
        return functions_to_include(_information_for_algebraic_type(algebraic_type))

    def imports(self, algebraic_type: AlgebraicType) -> list[objc.Import]:
        return imports_to_include(_information_for_algebraic_type(algebraic_type))

    def instance_methods(self, algebraic_type: AlgebraicType) -> list[objc.Method]:
        information = _information_for_algebraic_type(algebraic_type)
        return [is_equal_instance_method(algebraic_type.name, information), hash_instance_method(information)]

    def validation_errors(self, algebraic_type: AlgebraicType) -> list[Error]:
        attributes = algebraic_type_utils.all_attributes_from_subtypes(algebraic_type.subtypes)
        return [
            unknown_type_error(algebraic_type.name, attribute)
            for attribute in attributes
            if does_attribute_contain_an_unknown_type(attribute)
        ]
