"""
Type-directed dispatch over the closed set of known Objective-C types.

Every concern that depends on the semantic kind of an attribute (equality,
hashing, coding, ownership, imports, nullability assertions...) goes through
`match_type` with one handler per known type plus a fallback for anything
else. Handlers are required dataclass fields, so leaving a case out fails
at construction time instead of silently falling through.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, fields
from enum import Enum
from typing import Generic, TypeVar

from ..code_model import objc

T = TypeVar("T")


class TypeName(str, Enum):
    """Known primitive and system type names."""

    ID = "id"
    NS_OBJECT = "NSObject"
    BOOL = "BOOL"
    NS_INTEGER = "NSInteger"
    NS_UINTEGER = "NSUInteger"
    DOUBLE = "double"
    FLOAT = "float"
    CG_FLOAT = "CGFloat"
    NS_TIME_INTERVAL = "NSTimeInterval"
    UINTPTR_T = "uintptr_t"
    UINT32_T = "uint32_t"
    UINT64_T = "uint64_t"
    INT32_T = "int32_t"
    INT64_T = "int64_t"
    SEL = "SEL"
    NS_RANGE = "NSRange"
    CG_RECT = "CGRect"
    CG_POINT = "CGPoint"
    CG_SIZE = "CGSize"
    UI_EDGE_INSETS = "UIEdgeInsets"
    CLASS_OBJECT = "Class"
    DISPATCH_BLOCK_T = "dispatch_block_t"

    @classmethod
    def lookup(cls, name: str) -> TypeName | None:
        try:
            return cls(name)
        except ValueError:
            return None


Handler = Callable[[], T]


@dataclass(frozen=True)
class TypeMatchers(Generic[T]):
    """One handler per known type name plus `unmatched_type`."""

    id: Handler
    ns_object: Handler
    bool: Handler
    ns_integer: Handler
    ns_uinteger: Handler
    double: Handler
    float: Handler
    cg_float: Handler
    ns_time_interval: Handler
    uintptr_t: Handler
    uint32_t: Handler
    uint64_t: Handler
    int32_t: Handler
    int64_t: Handler
    sel: Handler
    ns_range: Handler
    cg_rect: Handler
    cg_point: Handler
    cg_size: Handler
    ui_edge_insets: Handler
    class_object: Handler
    dispatch_block_t: Handler
    unmatched_type: Handler

    @classmethod
    def constant(cls, default: T, **overrides: T) -> TypeMatchers[T]:
        """Matchers returning `default` for every case except the named overrides."""
        names = {f.name for f in fields(cls)}
        unknown = set(overrides) - names
        if unknown:
            raise ValueError(f"Unknown type matcher cases: {sorted(unknown)}")
        handlers = {}
        for name in names:
            value = overrides.get(name, default)
            handlers[name] = lambda value=value: value
        return cls(**handlers)


def match_type_name(matchers: TypeMatchers[T], type_name: str) -> T:
    known = TypeName.lookup(type_name)
    if known is None:
        return matchers.unmatched_type()
    return getattr(matchers, known.name.lower())()


def match_type(matchers: TypeMatchers[T], type: objc.Type) -> T:
    return match_type_name(matchers, type.name)


_IS_NS_OBJECT = TypeMatchers.constant(False, ns_object=True)
_IS_OBJECT = TypeMatchers.constant(False, id=True, ns_object=True, class_object=True, dispatch_block_t=True)


def is_ns_object(type: objc.Type) -> bool:
    return match_type(_IS_NS_OBJECT, type)


def is_object(type: objc.Type) -> bool:
    """True for every type held by an object pointer (id, NSObject, Class, blocks)."""
    return match_type(_IS_OBJECT, type)
