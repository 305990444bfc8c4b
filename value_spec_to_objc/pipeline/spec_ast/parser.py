"""
Parser - loads type specifications from their JSON description.

Produces `ObjectType` / `AlgebraicType` values or a list of `ParseError`.
Structural errors are all collected rather than stopping at the first one.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from ..code_model.clang_common import Nullability
from ..errors import ParseError
from .nodes import (
    AlgebraicType,
    Attribute,
    AttributeType,
    NamedAttributeCollectionSubtype,
    ObjectType,
    ReferencedGenericType,
    SingleAttributeSubtype,
    SpecType,
    Subtype,
    TypeKind,
    TypeLookup,
)

logger = logging.getLogger(__name__)

# File suffix -> kind, used when the document does not say
SUFFIX_KINDS = {
    ".value.json": TypeKind.VALUE,
    ".object.json": TypeKind.OBJECT,
    ".adt.json": TypeKind.ALGEBRAIC,
}

_IDENTIFIER = re.compile(r"^\s*([A-Za-z_][A-Za-z0-9_]*)")

# Keys of an attribute type mapping that hold a single string
_TYPE_STRING_KEYS = ("name", "reference", "underlyingType", "library", "file", "conformingProtocol")


def kind_for_path(path: str | Path) -> TypeKind | None:
    name = Path(path).name
    for suffix, kind in SUFFIX_KINDS.items():
        if name.endswith(suffix):
            return kind
    return None


def _split_top_level(text: str) -> list[str]:
    """Split on commas that are not nested inside angle brackets."""
    parts = []
    depth = 0
    current = ""
    for char in text:
        if char == "<":
            depth += 1
        elif char == ">":
            depth -= 1
        if char == "," and depth == 0:
            parts.append(current.strip())
            current = ""
        else:
            current += char
    if current.strip():
        parts.append(current.strip())
    return parts


def _generic_section(reference: str) -> str | None:
    """Content of the outermost <...> of a type reference."""
    start = reference.find("<")
    end = reference.rfind(">")
    if start == -1 or end <= start:
        return None
    return reference[start + 1 : end]


def _referenced_generic_type(text: str) -> ReferencedGenericType:
    name, protocol, generics = _decompose_reference(text)
    return ReferencedGenericType(name=name, conforming_protocol=protocol, referenced_generic_types=generics)


def _decompose_reference(reference: str) -> tuple[str, str | None, tuple[ReferencedGenericType, ...]]:
    match = _IDENTIFIER.match(reference)
    if match is None:
        raise ValueError(f'Cannot read a type name from "{reference}"')
    name = match.group(1)
    section = _generic_section(reference)
    if section is None:
        return name, None, ()
    if name == "id":
        return name, section.strip(), ()
    generics = tuple(_referenced_generic_type(part) for part in _split_top_level(section))
    return name, None, generics


def underlying_type_for_type(provided: str | None, name: str, reference: str) -> str | None:
    if provided:
        return provided
    if "*" in reference and name != "id":
        return "NSObject"
    return None


def _check_type_mapping(value: Any) -> None:
    if not isinstance(value, dict):
        raise ValueError("an attribute type must be a string or an object")
    for key in _TYPE_STRING_KEYS:
        if value.get(key) is not None and not isinstance(value[key], str):
            raise ValueError(f'"{key}" of an attribute type must be a string')
    generics = value.get("referencedGenericTypes", [])
    if not isinstance(generics, list) or not all(isinstance(generic, str) for generic in generics):
        raise ValueError('"referencedGenericTypes" of an attribute type must be a list of strings')


def parse_attribute_type(value: str | dict[str, Any], annotations: dict[str, list[dict[str, str]]]) -> AttributeType:
    """Build an AttributeType from either a type string or an explicit mapping.

    Raises:
        ValueError: If the value is not a type string or a well-formed mapping
    """
    if isinstance(value, str):
        value = {"reference": value}
    _check_type_mapping(value)
    reference = value.get("reference") or value.get("name")
    if not reference:
        raise ValueError("an attribute type needs a name or a reference")
    parsed_name, protocol, generics = _decompose_reference(reference)
    name = value.get("name") or parsed_name
    import_hints = (annotations.get("import") or [{}])[0]
    return AttributeType(
        name=name,
        reference=reference.strip(),
        underlying_type=underlying_type_for_type(value.get("underlyingType"), name, reference),
        file_type_is_defined_in=value.get("file") or import_hints.get("file"),
        library_type_is_defined_in=value.get("library") or import_hints.get("library"),
        conforming_protocol=value.get("conformingProtocol") or protocol,
        referenced_generic_types=tuple(
            _referenced_generic_type(generic) for generic in value["referencedGenericTypes"]
        )
        if "referencedGenericTypes" in value
        else generics,
    )


class SpecParser:
    """Turns one JSON document into a spec type, collecting structural errors."""

    def __init__(self, default_kind: TypeKind | None = None):
        self.default_kind = default_kind
        self.errors: list[ParseError] = []

    def _error(self, reason: str) -> None:
        self.errors.append(ParseError(reason))

    def _string_list(self, data: dict[str, Any], key: str, context: str) -> list[str]:
        values = data.get(key, [])
        if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
            self._error(f'"{key}" of {context} must be a list of strings')
            return []
        return values

    def _annotations(self, data: dict[str, Any], context: str) -> dict[str, list[dict[str, str]]]:
        annotations = data.get("annotations", {})
        if not isinstance(annotations, dict):
            self._error(f'"annotations" of {context} must be an object')
            return {}
        result = {}
        for key, bags in annotations.items():
            if isinstance(bags, dict):
                bags = [bags]
            if not isinstance(bags, list) or not all(isinstance(bag, dict) for bag in bags):
                self._error(f'annotation "{key}" of {context} must be an object or a list of objects')
                continue
            result[key] = [{str(k): str(v) for k, v in bag.items()} for bag in bags]
        return result

    def _nullability(self, data: dict[str, Any], context: str) -> Nullability:
        value = data.get("nullability", Nullability.INHERITED.value)
        try:
            return Nullability(value)
        except ValueError:
            self._error(f'unknown nullability "{value}" for {context}')
            return Nullability.INHERITED

    def parse_attribute(self, data: Any, owner: str) -> Attribute | None:
        if not isinstance(data, dict):
            self._error(f"attributes of {owner} must be objects")
            return None
        name = data.get("name")
        if not isinstance(name, str) or not name:
            self._error(f"an attribute of {owner} is missing its name")
            return None
        context = f"{owner}.{name}"
        if "type" not in data:
            self._error(f"attribute {context} is missing its type")
            return None
        annotations = self._annotations(data, context)
        try:
            attribute_type = parse_attribute_type(data["type"], annotations)
        except ValueError as e:
            self._error(f"attribute {context}: {e}")
            return None
        return Attribute(
            name=name,
            type=attribute_type,
            nullability=self._nullability(data, context),
            comments=tuple(self._string_list(data, "comments", context)),
            annotations=annotations,
        )

    def _attributes(self, data: dict[str, Any], owner: str) -> list[Attribute]:
        raw = data.get("attributes", [])
        if not isinstance(raw, list):
            self._error(f'"attributes" of {owner} must be a list')
            return []
        attributes = [self.parse_attribute(item, owner) for item in raw]
        return [attribute for attribute in attributes if attribute is not None]

    def _optional_string(self, data: dict[str, Any], key: str, context: str) -> str | None:
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            self._error(f'"{key}" of {context} must be a string')
            return None
        return value

    def _type_lookups(self, data: dict[str, Any], owner: str) -> list[TypeLookup]:
        raw_lookups = data.get("typeLookups", [])
        if not isinstance(raw_lookups, list):
            self._error(f'"typeLookups" of {owner} must be a list')
            return []
        lookups = []
        for raw in raw_lookups:
            if not isinstance(raw, dict) or not isinstance(raw.get("name"), str):
                self._error(f"type lookups of {owner} need a name")
                continue
            context = f"type lookup {raw['name']} of {owner}"
            library = self._optional_string(raw, "library", context)
            file = self._optional_string(raw, "file", context)
            can_forward_declare = raw.get("canForwardDeclare", True)
            if not isinstance(can_forward_declare, bool):
                self._error(f'"canForwardDeclare" of {context} must be true or false')
                continue
            lookups.append(
                TypeLookup(
                    name=raw["name"],
                    library=library,
                    file=file,
                    can_forward_declare=can_forward_declare,
                )
            )
        return lookups

    def _subtype(self, data: Any, owner: str) -> Subtype | None:
        if not isinstance(data, dict):
            self._error(f"subtypes of {owner} must be objects")
            return None
        if "attribute" in data:
            attribute = self.parse_attribute(data["attribute"], owner)
            return SingleAttributeSubtype(attribute) if attribute is not None else None
        name = data.get("name")
        if not isinstance(name, str) or not name:
            self._error(f"a subtype of {owner} is missing its name")
            return None
        context = f"{owner}.{name}"
        return NamedAttributeCollectionSubtype(
            name=name,
            attributes=tuple(self._attributes(data, context)),
            comments=tuple(self._string_list(data, "comments", context)),
            annotations=self._annotations(data, context),
        )

    def parse(self, data: Any) -> SpecType | None:
        if not isinstance(data, dict):
            self._error("the specification must be a JSON object")
            return None

        name = data.get("name")
        if not isinstance(name, str) or not name:
            self._error('the specification is missing its "name"')
            name = "<unnamed>"

        raw_kind = data.get("kind", self.default_kind.value if self.default_kind else None)
        try:
            kind = TypeKind(raw_kind)
        except ValueError:
            self._error(f'unknown kind "{raw_kind}" for {name}')
            return None

        common = dict(
            name=name,
            comments=self._string_list(data, "comments", name),
            includes=self._string_list(data, "includes", name),
            excludes=self._string_list(data, "excludes", name),
            library_name=self._optional_string(data, "libraryName", name),
            type_lookups=self._type_lookups(data, name),
            annotations=self._annotations(data, name),
        )

        if kind is TypeKind.ALGEBRAIC:
            raw_subtypes = data.get("subtypes", [])
            if not isinstance(raw_subtypes, list) or not raw_subtypes:
                self._error(f"algebraic type {name} needs at least one subtype")
                raw_subtypes = []
            subtypes = [self._subtype(item, name) for item in raw_subtypes]
            return AlgebraicType(subtypes=[s for s in subtypes if s is not None], **common)

        return ObjectType(attributes=self._attributes(data, name), kind=kind, **common)


def parse(text: str, default_kind: TypeKind | None = None) -> tuple[SpecType | None, list[ParseError]]:
    """Parse a JSON document.

    Returns:
        (type, []) on success, (None, errors) otherwise
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        return None, [ParseError(e.msg, e.lineno, e.colno)]

    parser = SpecParser(default_kind)
    spec_type = parser.parse(data)
    if parser.errors:
        return None, parser.errors
    return spec_type, []


def parse_file(path: str | Path) -> tuple[SpecType | None, list[ParseError]]:
    path = Path(path)
    logger.debug("Parsing %s", path)
    return parse(path.read_text(encoding="utf-8"), kind_for_path(path))
