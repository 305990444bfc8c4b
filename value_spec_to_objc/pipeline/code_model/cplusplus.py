"""
C++ code model used for Objective-C++ output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .clang_common import Nullability


class TemplateType(str, Enum):
    TYPENAME = "typename"
    CLASS = "class"


@dataclass
class TemplatedType:
    type: TemplateType
    value: str


@dataclass
class Template:
    templated_types: list[TemplatedType]
    code: list[str] = field(default_factory=list)


@dataclass
class Struct:
    """A C++ struct whose body is a list of code blocks, preceded by template declarations."""

    name: str
    templates: list[Template] = field(default_factory=list)
    code: list[list[str]] = field(default_factory=list)


@dataclass
class Namespace:
    name: str
    templates: list[Template] = field(default_factory=list)


class TypePassBy(str, Enum):
    VALUE = "value"
    REFERENCE = "reference"
    POINTER = "pointer"


@dataclass
class TypeQualifier:
    is_const: bool = False
    pass_by: TypePassBy = TypePassBy.VALUE
    nullability: Nullability = Nullability.INHERITED


@dataclass
class Type:
    base_type: str
    qualifier: TypeQualifier = field(default_factory=TypeQualifier)


@dataclass
class FunctionParam:
    name: str
    type: Type


@dataclass
class Function:
    """A C++ function or method; code None means declaration only."""

    name: str
    return_type: Type
    params: list[FunctionParam] = field(default_factory=list)
    code: list[str] | None = None
    is_const: bool = False


class ConstructorDefault(str, Enum):
    NONE = "none"
    DEFAULT = "default"
    DELETE = "delete"


@dataclass
class MemberInitializer:
    member_name: str
    expression: str


@dataclass
class ClassConstructor:
    name: str
    params: list[FunctionParam] = field(default_factory=list)
    initializers: list[MemberInitializer] = field(default_factory=list)
    default: ConstructorDefault = ConstructorDefault.NONE


@dataclass
class ClassMember:
    name: str
    type: Type


class ClassSectionVisibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


@dataclass
class ClassSection:
    visibility: ClassSectionVisibility
    constructors: list[ClassConstructor] = field(default_factory=list)
    methods: list[Function] = field(default_factory=list)
    members: list[ClassMember] = field(default_factory=list)


class ClassNullability(str, Enum):
    DEFAULT = "default"
    ASSUME_NONNULL = "assumeNonnull"


@dataclass
class Class:
    name: str
    sections: list[ClassSection] = field(default_factory=list)
    nullability: ClassNullability = ClassNullability.DEFAULT
