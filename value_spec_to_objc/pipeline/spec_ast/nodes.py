"""
Domain model of the input specifications.

Value/object types are described by `ObjectType`, sum types by
`AlgebraicType`. Both are produced once by the parser and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..code_model.clang_common import Nullability

# annotation name -> list of property bags, e.g. {"codingKey": [{"name": "x"}]}
AnnotationMap = dict[str, list[dict[str, str]]]


class TypeKind(str, Enum):
    VALUE = "value"
    OBJECT = "object"
    ALGEBRAIC = "algebraic"


@dataclass(frozen=True)
class TypeLookup:
    """Explicit instruction on how to import or forward declare a referenced type."""

    name: str
    library: str | None = None
    file: str | None = None
    can_forward_declare: bool = True


@dataclass(frozen=True)
class ReferencedGenericType:
    name: str
    conforming_protocol: str | None = None
    referenced_generic_types: tuple[ReferencedGenericType, ...] = ()


@dataclass(frozen=True)
class AttributeType:
    """Declared type of an attribute.

    Attributes:
        name: Type identifier (e.g. NSString, BOOL)
        reference: Usage form with pointer and generic syntax (e.g. "NSString *")
        underlying_type: Known type backing a custom typedef, if declared
        file_type_is_defined_in: Header the type lives in, when not <name>.h
        library_type_is_defined_in: Library the type lives in
        conforming_protocol: Protocol of an `id<P>` type
        referenced_generic_types: Generic parameters (e.g. the element type of NSArray<Foo *>)
    """

    name: str
    reference: str
    underlying_type: str | None = None
    file_type_is_defined_in: str | None = None
    library_type_is_defined_in: str | None = None
    conforming_protocol: str | None = None
    referenced_generic_types: tuple[ReferencedGenericType, ...] = ()


@dataclass(frozen=True)
class Attribute:
    name: str
    type: AttributeType
    nullability: Nullability = Nullability.INHERITED
    comments: tuple[str, ...] = ()
    annotations: AnnotationMap = field(default_factory=dict, hash=False)


@dataclass
class ObjectType:
    """A value type (immutable record) or an object type."""

    name: str
    attributes: list[Attribute] = field(default_factory=list)
    comments: list[str] = field(default_factory=list)
    includes: list[str] = field(default_factory=list)
    excludes: list[str] = field(default_factory=list)
    library_name: str | None = None
    type_lookups: list[TypeLookup] = field(default_factory=list)
    annotations: AnnotationMap = field(default_factory=dict)
    kind: TypeKind = TypeKind.VALUE


@dataclass(frozen=True)
class NamedAttributeCollectionSubtype:
    """A struct-like case of an algebraic type with zero or more named attributes."""

    name: str
    attributes: tuple[Attribute, ...] = ()
    comments: tuple[str, ...] = ()
    annotations: AnnotationMap = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class SingleAttributeSubtype:
    """A case of an algebraic type wrapping exactly one attribute."""

    attribute: Attribute


Subtype = NamedAttributeCollectionSubtype | SingleAttributeSubtype


@dataclass
class AlgebraicType:
    name: str
    subtypes: list[Subtype] = field(default_factory=list)
    comments: list[str] = field(default_factory=list)
    includes: list[str] = field(default_factory=list)
    excludes: list[str] = field(default_factory=list)
    library_name: str | None = None
    type_lookups: list[TypeLookup] = field(default_factory=list)
    annotations: AnnotationMap = field(default_factory=dict)

    kind = TypeKind.ALGEBRAIC


SpecType = ObjectType | AlgebraicType
