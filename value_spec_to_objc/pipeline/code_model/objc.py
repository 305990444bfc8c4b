"""
Objective-C code model.

Structured, still-abstract description of the pieces of an Objective-C
source file. Plugins build these values and the renderer turns them into text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .clang_common import Nullability


@dataclass(frozen=True)
class Type:
    """A type as written in source: `name` identifies it, `reference` is how it is spelled."""

    name: str
    reference: str


class ForwardDeclarationKind(str, Enum):
    CLASS = "class"
    PROTOCOL = "protocol"
    STRUCT = "struct"


@dataclass(frozen=True)
class ForwardDeclaration:
    kind: ForwardDeclarationKind
    name: str

    @classmethod
    def for_class(cls, name: str) -> ForwardDeclaration:
        return cls(ForwardDeclarationKind.CLASS, name)

    @classmethod
    def for_protocol(cls, name: str) -> ForwardDeclaration:
        return cls(ForwardDeclarationKind.PROTOCOL, name)

    @classmethod
    def for_struct(cls, name: str) -> ForwardDeclaration:
        return cls(ForwardDeclarationKind.STRUCT, name)


@dataclass(frozen=True)
class Import:
    """An #import line.

    Attributes:
        file: Header file name (e.g. "Foundation.h", or "memory" for system C++ headers)
        is_public: Public imports go to the header, private ones to the implementation
        library: Framework/library the file lives in, None for local headers
        requires_cplusplus: Guard the import with #ifdef __cplusplus
    """

    file: str
    is_public: bool
    library: str | None = None
    requires_cplusplus: bool = False


class KeywordArgumentModifier(str, Enum):
    NONNULL = "nonnull"
    NULLABLE = "nullable"
    NOESCAPE = "NS_NOESCAPE"
    UNSAFE_UNRETAINED = "__unsafe_unretained"


@dataclass
class KeywordArgument:
    name: str
    type: Type
    modifiers: list[KeywordArgumentModifier] = field(default_factory=list)


@dataclass
class Keyword:
    """One selector part of a method, e.g. `initWithName:(NSString *)name`."""

    name: str
    argument: KeywordArgument | None = None


@dataclass
class ReturnType:
    """Return type of a method or function; a None type means void."""

    type: Type | None = None
    modifiers: list[KeywordArgumentModifier] = field(default_factory=list)


@dataclass
class Preprocessor:
    opening_code: str
    closing_code: str


@dataclass
class Method:
    """An Objective-C method.

    Attributes:
        keywords: Selector parts in order
        return_type: Return type (None type means void)
        code: Body lines, or None for a declaration without implementation
        comments: Comment lines rendered above the declaration
        compiler_attributes: Trailing attributes such as NS_UNAVAILABLE
        belongs_to_protocol: Protocol that declares the method, if any
        preprocessors: Conditional compilation wrapping the method
    """

    keywords: list[Keyword]
    return_type: ReturnType = field(default_factory=ReturnType)
    code: list[str] | None = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)
    compiler_attributes: list[str] = field(default_factory=list)
    belongs_to_protocol: str | None = None
    preprocessors: list[Preprocessor] = field(default_factory=list)


@dataclass
class FunctionParameter:
    name: str
    type: Type
    modifiers: list[KeywordArgumentModifier] = field(default_factory=list)


@dataclass
class Function:
    """A C function.

    Public non-inline functions are declared in the header and defined in the
    implementation, public inline ones are defined in the header, and
    non-public ones are static to the implementation.
    """

    name: str
    return_type: ReturnType
    parameters: list[FunctionParameter] = field(default_factory=list)
    code: list[str] = field(default_factory=list)
    is_public: bool = False
    is_inline: bool = False
    comments: list[Comment] = field(default_factory=list)
    compiler_attributes: list[str] = field(default_factory=list)
    trailing_macros: list[str] = field(default_factory=list)
    wrapped_in_ifdef: str | None = None


@dataclass
class Macro:
    name: str
    parameters: list[str]
    code: str
    comments: list[Comment] = field(default_factory=list)


@dataclass
class BlockTypeParameter:
    name: str
    type: Type
    nullability: Nullability = Nullability.INHERITED
    trailing_macros: list[str] = field(default_factory=list)


class ClassNullability(str, Enum):
    DEFAULT = "default"
    ASSUME_NONNULL = "assumeNonnull"


class ClassVisibility(str, Enum):
    DEFAULT = "default"
    HIDDEN = "hidden"


@dataclass
class BlockType:
    """A block typedef; an empty parameter list renders as (void)."""

    name: str
    parameters: list[BlockTypeParameter]
    return_type: ReturnType = field(default_factory=ReturnType)
    is_public: bool = True
    is_inlined: bool = False
    nullability: ClassNullability = ClassNullability.DEFAULT
    comments: list[Comment] = field(default_factory=list)


@dataclass
class Enumeration:
    name: str
    underlying_type: str
    values: list[str]
    is_public: bool = False
    comments: list[Comment] = field(default_factory=list)


class PropertyModifier(str, Enum):
    ASSIGN = "assign"
    ATOMIC = "atomic"
    COPY = "copy"
    NONATOMIC = "nonatomic"
    NONNULL = "nonnull"
    NULLABLE = "nullable"
    NULL_UNSPECIFIED = "null_unspecified"
    READONLY = "readonly"
    READWRITE = "readwrite"
    STRONG = "strong"
    WEAK = "weak"
    UNSAFE_UNRETAINED = "unsafe_unretained"


class PropertyAccess(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class MemorySemantic(str, Enum):
    ASSIGN = "assign"
    COPY = "copy"
    STRONG = "strong"
    UNSAFE_UNRETAINED = "__unsafe_unretained"
    WEAK = "weak"


@dataclass
class Constant:
    """A file-level `static <semantic> <type> const <name> = <value>;`."""

    name: str
    type: Type
    value: str
    memory_semantic: MemorySemantic = MemorySemantic.UNSAFE_UNRETAINED
    comments: list[Comment] = field(default_factory=list)


class InstanceVariableAccess(str, Enum):
    PRIVATE = "@private"
    PACKAGE = "@package"
    PUBLIC = "@public"


class InstanceVariableModifier(str, Enum):
    ASSIGN = ""
    STRONG = "__strong"
    WEAK = "__weak"
    UNSAFE_UNRETAINED = "__unsafe_unretained"


@dataclass
class Property:
    name: str
    return_type: Type
    modifiers: list[PropertyModifier] = field(default_factory=list)
    access: PropertyAccess = PropertyAccess.PUBLIC
    comments: list[Comment] = field(default_factory=list)
    preprocessors: list[Preprocessor] = field(default_factory=list)


@dataclass
class InstanceVariable:
    """An instance variable; private ones live in the @implementation block."""

    name: str
    return_type: Type
    access: InstanceVariableAccess = InstanceVariableAccess.PRIVATE
    modifiers: list[InstanceVariableModifier] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)


@dataclass(frozen=True)
class ImplementedProtocol:
    name: str


@dataclass(frozen=True)
class Comment:
    content: str


@dataclass
class Class:
    name: str
    base_class_name: str = "NSObject"
    class_methods: list[Method] = field(default_factory=list)
    instance_methods: list[Method] = field(default_factory=list)
    properties: list[Property] = field(default_factory=list)
    instance_variables: list[InstanceVariable] = field(default_factory=list)
    implemented_protocols: list[ImplementedProtocol] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)
    covariant_types: list[str] = field(default_factory=list)
    inline_block_typedefs: list[BlockType] = field(default_factory=list)
    nullability: ClassNullability = ClassNullability.DEFAULT
    subclassing_restricted: bool = False
    visibility: ClassVisibility | None = None


@dataclass
class StructMember:
    name: str
    type: Type
    nullability: Nullability = Nullability.INHERITED
    comments: list[Comment] = field(default_factory=list)
    trailing_macros: list[str] = field(default_factory=list)


@dataclass
class Struct:
    """A plain C struct typedef."""

    name: str
    members: list[StructMember]
    comments: list[Comment] = field(default_factory=list)


@dataclass
class Protocol:
    name: str
    implemented_protocols: list[ImplementedProtocol] = field(default_factory=list)
    properties: list[Property] = field(default_factory=list)
    class_methods: list[Method] = field(default_factory=list)
    instance_methods: list[Method] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)
    nullability: ClassNullability = ClassNullability.DEFAULT


def comments_from_strings(lines: list[str]) -> list[Comment]:
    return [Comment(line) for line in lines]
