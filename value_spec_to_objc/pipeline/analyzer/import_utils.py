"""
Import and forward-declaration decisions for referenced types.
"""

from __future__ import annotations

from ..code_model import objc
from ..spec_ast.nodes import Attribute, ObjectType, TypeLookup
from .attribute_utils import compute_type_of_attribute
from .type_matching import TypeMatchers, match_type_name

# Known system types and the header defining them (None when always available)
KNOWN_SYSTEM_TYPE_IMPORTS: dict[str, objc.Import | None] = {
    "BOOL": None,
    "double": None,
    "float": None,
    "id": None,
    "CGFloat": objc.Import("CGBase.h", True, "CoreGraphics"),
    "CGPoint": objc.Import("CGGeometry.h", True, "CoreGraphics"),
    "CGRect": objc.Import("CGGeometry.h", True, "CoreGraphics"),
    "CGSize": objc.Import("CGGeometry.h", True, "CoreGraphics"),
    "int32_t": None,
    "int64_t": None,
    "SEL": None,
    "UIEdgeInsets": objc.Import("UIGeometry.h", True, "UIKit"),
    "uint64_t": None,
    "uint32_t": None,
    "uintptr_t": None,
    "Class": None,
    "dispatch_block_t": None,
}

FOUNDATION_IMPORT = objc.Import("Foundation.h", True, "Foundation")

_CAN_FORWARD_DECLARE = TypeMatchers.constant(False, ns_object=True)


def _is_foundation_type(type_name: str) -> bool:
    return type_name.startswith("NS")


def is_import_required_for_type_name(type_name: str) -> bool:
    if _is_foundation_type(type_name):
        return False
    return not (type_name in KNOWN_SYSTEM_TYPE_IMPORTS and KNOWN_SYSTEM_TYPE_IMPORTS[type_name] is None)


def should_include_import_for_type(type_lookups: list[TypeLookup], type_name: str) -> bool:
    return is_import_required_for_type_name(type_name) and not any(
        lookup.name == type_name for lookup in type_lookups
    )


def library_for_import(library_type_is_defined_in: str | None, object_library: str | None) -> str | None:
    return library_type_is_defined_in if library_type_is_defined_in is not None else object_library


def file_for_import(file_type_is_defined_in: str | None, type_name: str) -> str:
    return (file_type_is_defined_in or type_name) + ".h"


def type_definition_import_for_known_system_type(type_name: str) -> objc.Import | None:
    return KNOWN_SYSTEM_TYPE_IMPORTS.get(type_name)


def can_forward_declare_type_name(type_name: str) -> bool:
    return match_type_name(_CAN_FORWARD_DECLARE, type_name)


def requires_public_import_for_type(type_name: str, computed_type: objc.Type) -> bool:
    return is_import_required_for_type_name(type_name) and not can_forward_declare_type_name(computed_type.name)


def can_forward_declare_type(type_name: str, computed_type: objc.Type) -> bool:
    return is_import_required_for_type_name(type_name) and can_forward_declare_type_name(computed_type.name)


def can_forward_declare_type_for_attribute(attribute: Attribute) -> bool:
    return can_forward_declare_type(attribute.type.name, compute_type_of_attribute(attribute))


def forward_protocol_declaration_for_attribute(attribute: Attribute) -> objc.ForwardDeclaration | None:
    if attribute.type.conforming_protocol:
        return objc.ForwardDeclaration.for_protocol(attribute.type.conforming_protocol)
    return None


def import_for_type_lookup(default_library: str | None, is_public: bool, type_lookup: TypeLookup) -> objc.Import:
    return objc.Import(
        file=file_for_import(type_lookup.file, type_lookup.name),
        is_public=is_public,
        library=type_lookup.library if type_lookup.library is not None else default_library,
    )


def import_for_attribute(object_library: str | None, is_public: bool, attribute: Attribute) -> objc.Import:
    """The import declaring the type of an attribute.

    Known system types use their fixed header. Other types are imported
    publicly when asked to, or when they cannot be forward declared.
    """
    built_in = type_definition_import_for_known_system_type(attribute.type.name)
    if built_in is not None:
        return built_in
    requires_public_import = is_public or requires_public_import_for_type(
        attribute.type.name, compute_type_of_attribute(attribute)
    )
    return objc.Import(
        file=file_for_import(attribute.type.file_type_is_defined_in, attribute.type.name),
        is_public=requires_public_import,
        library=library_for_import(attribute.type.library_type_is_defined_in, object_library),
    )


def is_import_required_for_attribute(type_lookups: list[TypeLookup], attribute: Attribute) -> bool:
    required = should_include_import_for_type(type_lookups, attribute.type.name)
    protocol = attribute.type.conforming_protocol
    if protocol:
        return required or should_include_import_for_type(type_lookups, protocol)
    return required


def make_public_imports(includes: list[str]) -> bool:
    return "UseForwardDeclarations" not in includes


def skip_imports_in_implementation(includes: list[str]) -> bool:
    return "SkipImportsInImplementation" in includes


def imports_for_object_type(object_type: ObjectType) -> list[objc.Import]:
    """Imports for a value/object type file: Foundation, its own header, lookups and attributes."""
    base_imports = [FOUNDATION_IMPORT, objc.Import(object_type.name + ".h", False)]
    public = make_public_imports(object_type.includes)

    type_lookup_imports = [
        import_for_type_lookup(object_type.library_name, public or not lookup.can_forward_declare, lookup)
        for lookup in object_type.type_lookups
        if lookup.name != object_type.name
    ]

    attribute_imports = []
    if public or not skip_imports_in_implementation(object_type.includes):
        attribute_imports = [
            import_for_attribute(object_type.library_name, public, attribute)
            for attribute in object_type.attributes
            if is_import_required_for_attribute(object_type.type_lookups, attribute)
        ]
    return base_imports + type_lookup_imports + attribute_imports


def _type_lookups_allow_forward_declaration(type_lookups: list[TypeLookup], attribute: Attribute) -> bool:
    return not any(not lookup.can_forward_declare and lookup.name == attribute.type.name for lookup in type_lookups)


def forward_class_declarations_for_object_type(object_type: ObjectType) -> list[objc.ForwardDeclaration]:
    public = make_public_imports(object_type.includes)

    declarations = [
        objc.ForwardDeclaration.for_class(lookup.name)
        for lookup in object_type.type_lookups
        if lookup.name == object_type.name or (lookup.can_forward_declare and not public)
    ]

    for attribute in object_type.attributes:
        explicitly = (
            not public
            and _type_lookups_allow_forward_declaration(object_type.type_lookups, attribute)
            and can_forward_declare_type_for_attribute(attribute)
        )
        if explicitly or attribute.type.name == object_type.name:
            declarations.append(objc.ForwardDeclaration.for_class(attribute.type.name))

    if not public:
        for attribute in object_type.attributes:
            declaration = forward_protocol_declaration_for_attribute(attribute)
            if declaration is not None:
                declarations.append(declaration)
    return declarations
