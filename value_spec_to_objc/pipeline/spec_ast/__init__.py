"""Spec AST: the input type model and its JSON parser."""

from .nodes import (
    AlgebraicType,
    Attribute,
    AttributeType,
    NamedAttributeCollectionSubtype,
    ObjectType,
    SingleAttributeSubtype,
    SpecType,
    Subtype,
    TypeKind,
    TypeLookup,
)
from .parser import parse, parse_file

__all__ = [
    "AlgebraicType",
    "Attribute",
    "AttributeType",
    "NamedAttributeCollectionSubtype",
    "ObjectType",
    "SingleAttributeSubtype",
    "SpecType",
    "Subtype",
    "TypeKind",
    "TypeLookup",
    "parse",
    "parse_file",
]
