"""
Coding plugin: NSCoding / NSSecureCoding conformance.

Every attribute is stored under a string key constant (`k<Name>Key`). The
per-type coding statements decide which NSCoder selector encodes the value
and, for C structs, which string conversion functions round-trip it.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from ...utils import capitalize, indent_lines, underscored
from ..analyzer import algebraic_type_utils, attribute_utils
from ..analyzer.initializer_utils import INSTANCETYPE
from ..analyzer.type_matching import TypeMatchers, is_ns_object, match_type
from ..code_model import objc
from ..errors import Error
from ..spec_ast.nodes import AlgebraicType, AnnotationMap, Attribute, NamedAttributeCollectionSubtype, ObjectType, Subtype
from .base import AlgebraicTypePlugin, ObjectSpecPlugin

SECURE_CODING = "NSSecureCoding"

UI_GEOMETRY_IMPORT = objc.Import("UIGeometry.h", False, "UIKit")

NSCODER_TYPE = objc.Type("NSCoder", "NSCoder *")
NSSTRING_TYPE = objc.Type("NSString", "NSString *")


@dataclass(frozen=True)
class CodingStatements:
    """How values of one type are written to and read from an NSCoder.

    Attributes:
        encode_statement: NSCoder selector prefix, e.g. "encodeObject"
        encode_value: Wraps the value accessor before encoding (e.g. NSStringFromCGRect)
        decode_statement: Builds the raw decode call from (type, key, secure_coding)
        decode_value: Wraps the raw decoded value (e.g. CGRectFromString)
        coding_function_import: Header declaring the conversion functions
    """

    encode_statement: str
    encode_value: Callable[[str], str]
    decode_statement: Callable[[objc.Type, str, bool], str]
    decode_value: Callable[[str], str]
    coding_function_import: objc.Import | None = None


def _directly(value: str) -> str:
    return value


def _through(function: str) -> Callable[[str], str]:
    return lambda value: f"{function}({value})"


def _decode_object(type: objc.Type, key: str, secure_coding: bool) -> str:
    if secure_coding:
        return f"[aDecoder decodeObjectOfClass:[{type.name} class] forKey:{key}]"
    return f"[aDecoder decodeObjectForKey:{key}]"


def _decode_string(type: objc.Type, key: str, secure_coding: bool) -> str:
    if secure_coding:
        return f"[aDecoder decodeObjectOfClass:[NSString class] forKey:{key}]"
    return f"[aDecoder decodeObjectForKey:{key}]"


def _decode_with(selector: str) -> Callable[[objc.Type, str, bool], str]:
    return lambda type, key, secure_coding: f"[aDecoder {selector}:{key}]"


def _scalar(kind: str) -> CodingStatements:
    return CodingStatements(f"encode{kind}", _directly, _decode_with(f"decode{kind}ForKey"), _directly)


def _as_string(to_string: str, from_string: str, coding_function_import: objc.Import | None = None) -> CodingStatements:
    return CodingStatements("encodeObject", _through(to_string), _decode_string, _through(from_string), coding_function_import)


NSOBJECT_CODING_STATEMENTS = CodingStatements("encodeObject", _directly, _decode_object, _directly)
UNSUPPORTED_TYPE_CODING_STATEMENTS = CodingStatements("", _directly, lambda type, key, secure_coding: "", _directly)

_CODING_STATEMENTS: TypeMatchers[CodingStatements | None] = TypeMatchers(
    id=lambda: NSOBJECT_CODING_STATEMENTS,
    ns_object=lambda: NSOBJECT_CODING_STATEMENTS,
    bool=lambda: _scalar("Bool"),
    ns_integer=lambda: _scalar("Integer"),
    ns_uinteger=lambda: _scalar("Integer"),
    double=lambda: _scalar("Double"),
    float=lambda: _scalar("Float"),
    cg_float=lambda: _scalar("Float"),
    ns_time_interval=lambda: _scalar("Double"),
    uintptr_t=lambda: _scalar("Integer"),
    uint32_t=lambda: _scalar("Int32"),
    uint64_t=lambda: _scalar("Int64"),
    int32_t=lambda: _scalar("Int32"),
    int64_t=lambda: _scalar("Int64"),
    sel=lambda: _as_string("NSStringFromSelector", "NSSelectorFromString"),
    ns_range=lambda: _as_string("NSStringFromRange", "NSRangeFromString"),
    cg_rect=lambda: _as_string("NSStringFromCGRect", "CGRectFromString", UI_GEOMETRY_IMPORT),
    cg_point=lambda: _as_string("NSStringFromCGPoint", "CGPointFromString", UI_GEOMETRY_IMPORT),
    cg_size=lambda: _as_string("NSStringFromCGSize", "CGSizeFromString", UI_GEOMETRY_IMPORT),
    ui_edge_insets=lambda: _as_string("NSStringFromUIEdgeInsets", "UIEdgeInsetsFromString", UI_GEOMETRY_IMPORT),
    class_object=lambda: UNSUPPORTED_TYPE_CODING_STATEMENTS,
    dispatch_block_t=lambda: UNSUPPORTED_TYPE_CODING_STATEMENTS,
    unmatched_type=lambda: None,
)


def coding_statements_for_type(type: objc.Type) -> CodingStatements | None:
    """Coding statements for a type, or None when the type is unknown."""
    return match_type(_CODING_STATEMENTS, type)


_IS_NSCODING_COMPLIANT = TypeMatchers.constant(True, class_object=False, dispatch_block_t=False)

# Value a decoded attribute holds when its key is absent; "" when there is none
_NIL_VALUES: TypeMatchers[str] = TypeMatchers.constant(
    "0",
    id="nil",
    ns_object="nil",
    bool="NO",
    sel="",
    ns_range="",
    cg_rect="",
    cg_point="",
    cg_size="",
    ui_edge_insets="",
    class_object="nil",
    dispatch_block_t="",
    unmatched_type="",
)


def is_type_nscoding_compliant(type: objc.Type) -> bool:
    return match_type(_IS_NSCODING_COMPLIANT, type)


def nil_value_for_type(type: objc.Type) -> str:
    return match_type(_NIL_VALUES, type)


@dataclass
class CodeableAttribute:
    name: str
    value_accessor: str
    constant_name: str
    constant_value: str
    type: objc.Type
    original_type: objc.Type
    legacy_key_names: list[str] = field(default_factory=list)


def name_of_constant_for_value_name(value_name: str) -> str:
    return "k" + capitalize(value_name) + "Key"


def constant_value_for_attribute_name(attribute_name: str) -> str:
    return '@"' + underscored(attribute_name).upper() + '"'


def coding_keys_from_annotations(annotations: AnnotationMap) -> list[str]:
    return [annotation["name"] for annotation in annotations.get("codingKey", []) if "name" in annotation]


def legacy_coding_key_names_for_attribute(attribute: Attribute) -> list[str]:
    return [annotation.get("name", "") for annotation in attribute.annotations.get("codingLegacyKey", [])]


def coding_attribute_for_value_attribute(attribute: Attribute) -> CodeableAttribute:
    coding_keys = coding_keys_from_annotations(attribute.annotations)
    if len(coding_keys) == 1:
        constant_value = f'@"{coding_keys[0]}"'
    else:
        constant_value = constant_value_for_attribute_name(attribute.name)
    return CodeableAttribute(
        name=attribute.name,
        value_accessor=attribute_utils.ivar_for_attribute(attribute),
        constant_name=name_of_constant_for_value_name(attribute.name),
        constant_value=constant_value,
        type=attribute_utils.compute_type_of_attribute(attribute),
        original_type=attribute_utils.original_type_of_attribute(attribute),
        legacy_key_names=legacy_coding_key_names_for_attribute(attribute),
    )


def _decode_statement(
    type: objc.Type, original_type: objc.Type, value_accessor: str, coding_key: str, secure_coding: bool
) -> str:
    statements = coding_statements_for_type(type)
    if is_ns_object(type):
        cast = "(id)"
    elif type.name != original_type.name:
        cast = f"({original_type.name})"
    else:
        cast = ""
    raw_value = cast + statements.decode_statement(type, coding_key, secure_coding)
    return f"{value_accessor} = {statements.decode_value(raw_value)};"


def decode_statement_for_attribute(attribute: CodeableAttribute, secure_coding: bool) -> str:
    return _decode_statement(
        attribute.type, attribute.original_type, attribute.value_accessor, attribute.constant_name, secure_coding
    )


def _legacy_decode_statements(attribute: CodeableAttribute, nil_value: str, legacy_key: str, secure_coding: bool) -> list[str]:
    if not legacy_key:
        return []
    statement = _decode_statement(
        attribute.type, attribute.original_type, attribute.value_accessor, f'@"{legacy_key}"', secure_coding
    )
    return [f"if ({attribute.value_accessor} == {nil_value}) {{", "  " + statement, "}"]


def legacy_key_respecting_decode_statements(attribute: CodeableAttribute, secure_coding: bool) -> list[str]:
    """Decode from the current key, then fall back to each legacy key while the value is still unset."""
    statements = [decode_statement_for_attribute(attribute, secure_coding)]
    nil_value = nil_value_for_type(attribute.type)
    if not nil_value:
        return statements
    for legacy_key in attribute.legacy_key_names:
        statements += _legacy_decode_statements(attribute, nil_value, legacy_key, secure_coding)
    return statements


def encode_statement_for_attribute(attribute: CodeableAttribute) -> str:
    statements = coding_statements_for_type(attribute.type)
    value = statements.encode_value(attribute.value_accessor)
    return f"[aCoder {statements.encode_statement}:{value} forKey:{attribute.constant_name}];"


def static_constant_for_attribute(attribute: CodeableAttribute) -> objc.Constant:
    return objc.Constant(name=attribute.constant_name, type=NSSTRING_TYPE, value=attribute.constant_value)


def decode_method_with_code(code: list[str]) -> objc.Method:
    return objc.Method(
        keywords=[objc.Keyword("initWithCoder", objc.KeywordArgument("aDecoder", NSCODER_TYPE))],
        return_type=objc.ReturnType(INSTANCETYPE, [objc.KeywordArgumentModifier.NULLABLE]),
        code=["if ((self = [super init])) {", *indent_lines(2, code), "}", "return self;"],
        belongs_to_protocol="NSCoding",
    )


def encode_method_with_code(code: list[str]) -> objc.Method:
    return objc.Method(
        keywords=[objc.Keyword("encodeWithCoder", objc.KeywordArgument("aCoder", NSCODER_TYPE))],
        code=code,
        belongs_to_protocol="NSCoding",
    )


SUPPORTS_SECURE_CODING_METHOD = objc.Method(
    keywords=[objc.Keyword("supportsSecureCoding")],
    return_type=objc.ReturnType(objc.Type("BOOL", "BOOL")),
    code=["return YES;"],
    belongs_to_protocol=SECURE_CODING,
)


def uses_secure_coding(includes: list[str]) -> bool:
    return SECURE_CODING in includes


def _class_methods(includes: list[str]) -> list[objc.Method]:
    return [SUPPORTS_SECURE_CODING_METHOD] if uses_secure_coding(includes) else []


def _implemented_protocols(includes: list[str]) -> list[objc.ImplementedProtocol]:
    return [objc.ImplementedProtocol(SECURE_CODING if uses_secure_coding(includes) else "NSCoding")]


def _backing_type_description(attribute: Attribute) -> str:
    if attribute.type.underlying_type is not None:
        return f'backing type "{attribute.type.underlying_type}"'
    return f'type "{attribute.type.name}"'


def unknown_type_error(type_name: str, attribute: Attribute) -> Error:
    hint = (
        "Did you declare the wrong backing type?"
        if attribute.type.underlying_type is not None
        else "Did you forget to declare a backing type?"
    )
    return Error(
        f"The Coding plugin does not know how to decode and encode the {_backing_type_description(attribute)} "
        f"from {type_name}.{attribute.name}. {hint}"
    )


def unsupported_type_error(type_name: str, attribute: Attribute) -> Error:
    return Error(
        f"The Coding plugin does not know how to decode and encode the {_backing_type_description(attribute)} "
        f"from {type_name}.{attribute.name}. {attribute.type.name} is not NSCoding-compliant."
    )


def unsupported_legacy_key_type_error(type_name: str, attribute: Attribute) -> Error:
    described = attribute.type.underlying_type if attribute.type.underlying_type is not None else attribute.type.name
    return Error(f'%codingLegacyKey can\'t be used with "{described}" at {type_name}.{attribute.name}.')


def _type_errors(type_name: str, attributes: list[Attribute]) -> list[Error]:
    unknown, unsupported = [], []
    for attribute in attributes:
        type = attribute_utils.compute_type_of_attribute(attribute)
        if coding_statements_for_type(type) is None:
            unknown.append(unknown_type_error(type_name, attribute))
        if not is_type_nscoding_compliant(type):
            unsupported.append(unsupported_type_error(type_name, attribute))
    return unknown + unsupported


class CodingPlugin(ObjectSpecPlugin):
    required_includes_to_run = ["RMCoding"]

    def class_methods(self, object_type: ObjectType) -> list[objc.Method]:
        return _class_methods(object_type.includes)

    def implemented_protocols(self, object_type: ObjectType) -> list[objc.ImplementedProtocol]:
        return _implemented_protocols(object_type.includes)

    def imports(self, object_type: ObjectType) -> list[objc.Import]:
        imports = []
        for attribute in object_type.attributes:
            statements = coding_statements_for_type(attribute_utils.compute_type_of_attribute(attribute))
            if statements is not None and statements.coding_function_import is not None:
                imports.append(statements.coding_function_import)
        return imports

    def instance_methods(self, object_type: ObjectType) -> list[objc.Method]:
        if not object_type.attributes:
            return []
        secure_coding = uses_secure_coding(object_type.includes)
        coding_attributes = [coding_attribute_for_value_attribute(attribute) for attribute in object_type.attributes]
        decode_code = [
            line
            for attribute in coding_attributes
            for line in legacy_key_respecting_decode_statements(attribute, secure_coding)
        ]
        encode_code = [encode_statement_for_attribute(attribute) for attribute in coding_attributes]
        return [decode_method_with_code(decode_code), encode_method_with_code(encode_code)]

    def static_constants(self, object_type: ObjectType) -> list[objc.Constant]:
        return [
            static_constant_for_attribute(coding_attribute_for_value_attribute(attribute))
            for attribute in object_type.attributes
        ]

    def validation_errors(self, object_type: ObjectType) -> list[Error]:
        errors = _type_errors(object_type.name, object_type.attributes)
        errors += [
            unsupported_legacy_key_type_error(object_type.name, attribute)
            for attribute in object_type.attributes
            if legacy_coding_key_names_for_attribute(attribute)
            and not nil_value_for_type(attribute_utils.compute_type_of_attribute(attribute))
        ]
        for attribute in object_type.attributes:
            count = len(coding_keys_from_annotations(attribute.annotations))
            if count > 1:
                errors.append(
                    Error(f"Only one %codingKey name is supported: {object_type.name}.{attribute.name} has {count}.")
                )
        return errors


# -- algebraic types --------------------------------------------------------

# The subtype is coded as a string so that reordering subtypes keeps archives readable
CODED_SUBTYPE = CodeableAttribute(
    name="codedSubtype",
    value_accessor="codedSubtype",
    constant_name=name_of_constant_for_value_name("codedSubtype"),
    constant_value=constant_value_for_attribute_name("codedSubtype"),
    type=objc.Type("NSObject", "NSObject"),
    original_type=objc.Type("NSObject", "NSObject"),
)


def coding_name_for_subtype(subtype: Subtype) -> str:
    return constant_value_for_attribute_name("SUBTYPE_" + algebraic_type_utils.subtype_name_from_subtype(subtype))


def codeable_attribute_for_subtype_attribute(subtype: Subtype, attribute: Attribute) -> CodeableAttribute:
    name = algebraic_type_utils.name_of_instance_variable_for_attribute(subtype, attribute)
    if isinstance(subtype, NamedAttributeCollectionSubtype):
        value_name = capitalize(subtype.name) + capitalize(attribute.name)
    else:
        value_name = capitalize(attribute.name)
    return CodeableAttribute(
        name=name,
        value_accessor=algebraic_type_utils.value_accessor_for_instance_variable_for_attribute(subtype, attribute),
        constant_name=name_of_constant_for_value_name(value_name),
        constant_value=constant_value_for_attribute_name(name),
        type=attribute_utils.compute_type_of_attribute(attribute),
        original_type=attribute_utils.original_type_of_attribute(attribute),
        legacy_key_names=legacy_coding_key_names_for_attribute(attribute),
    )


def _decode_statements_for_subtype(algebraic_type: AlgebraicType, subtype: Subtype, secure_coding: bool) -> list[str]:
    statements = [
        decode_statement_for_attribute(codeable_attribute_for_subtype_attribute(subtype, attribute), secure_coding)
        for attribute in algebraic_type_utils.attributes_from_subtype(subtype)
    ]
    accessor = algebraic_type_utils.value_accessor_for_instance_variable_storing_subtype()
    enumeration_value = algebraic_type_utils.enumeration_value_name_for_subtype(algebraic_type, subtype)
    return statements + [f"{accessor} = {enumeration_value};"]


def code_for_branching_on_subtype(
    algebraic_type: AlgebraicType,
    subtype_value_accessor: str,
    mapper: Callable[[AlgebraicType, Subtype], list[str]],
) -> list[str]:
    """An if/else-if chain comparing the decoded subtype string, raising on anything else."""
    code = []
    for subtype in algebraic_type.subtypes:
        opening = "else if([" if code else "if(["
        code.append(f"{opening}{subtype_value_accessor} isEqualToString:{coding_name_for_subtype(subtype)}]) {{")
        code += indent_lines(2, mapper(algebraic_type, subtype))
        code.append("}")
    return code + [
        "else {",
        '  [[NSException exceptionWithName:@"InvalidSubtypeException" reason:@"nil or unknown subtype provided" '
        f'userInfo:@{{@"subtype": {CODED_SUBTYPE.value_accessor}}}] raise];',
        "}",
    ]


def decode_code_for_algebraic_type(algebraic_type: AlgebraicType, secure_coding: bool) -> list[str]:
    statements = coding_statements_for_type(CODED_SUBTYPE.type)
    decoded = statements.decode_value(
        statements.decode_statement(CODED_SUBTYPE.type, CODED_SUBTYPE.constant_name, secure_coding)
    )
    branches = code_for_branching_on_subtype(
        algebraic_type,
        CODED_SUBTYPE.value_accessor,
        lambda algebraic_type, subtype: _decode_statements_for_subtype(algebraic_type, subtype, secure_coding),
    )
    return [f"NSString *{CODED_SUBTYPE.value_accessor} = {decoded};", *branches]


def _encode_statements_for_subtype(algebraic_type: AlgebraicType, subtype: Subtype) -> list[str]:
    statements = [
        encode_statement_for_attribute(codeable_attribute_for_subtype_attribute(subtype, attribute))
        for attribute in algebraic_type_utils.attributes_from_subtype(subtype)
    ]
    subtype_statements = coding_statements_for_type(CODED_SUBTYPE.type)
    return statements + [
        f"[aCoder {subtype_statements.encode_statement}:{coding_name_for_subtype(subtype)} "
        f"forKey:{CODED_SUBTYPE.constant_name}];"
    ]


def encode_code_for_algebraic_type(algebraic_type: AlgebraicType) -> list[str]:
    return algebraic_type_utils.code_for_switching_on_subtype(
        algebraic_type,
        algebraic_type_utils.value_accessor_for_instance_variable_storing_subtype(),
        _encode_statements_for_subtype,
    )


class AlgebraicTypeCodingPlugin(AlgebraicTypePlugin):
    required_includes_to_run = ["RMCoding"]

    def class_methods(self, algebraic_type: AlgebraicType) -> list[objc.Method]:
        return _class_methods(algebraic_type.includes)

    def implemented_protocols(self, algebraic_type: AlgebraicType) -> list[objc.ImplementedProtocol]:
        return _implemented_protocols(algebraic_type.includes)

    def instance_methods(self, algebraic_type: AlgebraicType) -> list[objc.Method]:
        secure_coding = uses_secure_coding(algebraic_type.includes)
        return [
            decode_method_with_code(decode_code_for_algebraic_type(algebraic_type, secure_coding)),
            encode_method_with_code(encode_code_for_algebraic_type(algebraic_type)),
        ]

    def static_constants(self, algebraic_type: AlgebraicType) -> list[objc.Constant]:
        attributes = [CODED_SUBTYPE] + [
            codeable_attribute_for_subtype_attribute(subtype, attribute)
            for subtype, attribute in algebraic_type_utils.attributes_with_subtypes(algebraic_type.subtypes)
        ]
        return [static_constant_for_attribute(attribute) for attribute in attributes]

    def validation_errors(self, algebraic_type: AlgebraicType) -> list[Error]:
        attributes = algebraic_type_utils.all_attributes_from_subtypes(algebraic_type.subtypes)
        errors = _type_errors(algebraic_type.name, attributes)
        errors += [
            Error("Custom coding keys are not supported for algebraic type attributes")
            for attribute in attributes
            if coding_keys_from_annotations(attribute.annotations)
        ]
        return errors
