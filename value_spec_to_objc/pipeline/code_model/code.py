"""
The render-ready file unit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from . import cplusplus, objc


class FileType(str, Enum):
    """Kind of source file, which decides the implementation extension."""

    OBJECTIVE_C = "objc"
    OBJECTIVE_CPLUSPLUS = "objc++"

    @property
    def implementation_extension(self) -> str:
        return ".m" if self is FileType.OBJECTIVE_C else ".mm"


# A struct is either a C struct typedef or a templated C++ struct
Struct = objc.Struct | cplusplus.Struct


@dataclass
class File:
    """Everything needed to render one header and (optionally) one implementation file."""

    name: str
    type: FileType = FileType.OBJECTIVE_C
    comments: list[objc.Comment] = field(default_factory=list)
    imports: list[objc.Import] = field(default_factory=list)
    forward_declarations: list[objc.ForwardDeclaration] = field(default_factory=list)
    enumerations: list[objc.Enumeration] = field(default_factory=list)
    block_types: list[objc.BlockType] = field(default_factory=list)
    static_constants: list[objc.Constant] = field(default_factory=list)
    functions: list[objc.Function] = field(default_factory=list)
    macros: list[objc.Macro] = field(default_factory=list)
    protocols: list[objc.Protocol] = field(default_factory=list)
    classes: list[objc.Class] = field(default_factory=list)
    structs: list[Struct] = field(default_factory=list)
    cpp_classes: list[cplusplus.Class] = field(default_factory=list)
    namespaces: list[cplusplus.Namespace] = field(default_factory=list)
    diagnostic_ignores: list[str] = field(default_factory=list)
    nullability: objc.ClassNullability = objc.ClassNullability.DEFAULT
