"""
String helpers shared by the generators.
"""

import re

# First run of capital letters, e.g. "RMT" in "RMTest"
_PREFIX_PATTERN = re.compile(r"[A-Z]+")

_CAMEL_BOUNDARY_PATTERN = re.compile(r"([a-z\d])([A-Z]+)")
_SEPARATOR_PATTERN = re.compile(r"[-\s]+")


def capitalize(text: str) -> str:
    """Uppercase the first character only ("fooBar" -> "FooBar")."""
    return text[:1].upper() + text[1:]


def lowercased(text: str) -> str:
    """Lowercase the first character only ("FooBar" -> "fooBar")."""
    return text[:1].lower() + text[1:]


def indent(spaces: int, line: str) -> str:
    """Indent a line by the given number of spaces, leaving empty lines untouched."""
    if line == "":
        return line
    return " " * spaces + line


def indent_lines(spaces: int, lines: list[str]) -> list[str]:
    return [indent(spaces, line) for line in lines]


def _prefix_including_first_character_of_name(text: str) -> str:
    match = _PREFIX_PATTERN.search(text)
    return match.group(0) if match else ""


def prefix_for_string(text: str) -> str:
    """Return the class prefix of a name ("RMTest" -> "RM")."""
    prefix = _prefix_including_first_character_of_name(text)
    if prefix == "":
        return text
    return text[: len(prefix) - 1]


def string_removing_capitalized_prefix(text: str) -> str:
    """Strip the class prefix of a name ("RMTest" -> "Test", "FooBar" -> "FooBar")."""
    prefix = _prefix_including_first_character_of_name(text)
    return text[max(len(prefix) - 1, 0) :]


def underscored(text: str) -> str:
    """Convert camelCase or spaced words to snake_case ("someValue" -> "some_value")."""
    with_boundaries = _CAMEL_BOUNDARY_PATTERN.sub(r"\1_\2", text.strip())
    return _SEPARATOR_PATTERN.sub("_", with_boundaries).lower()


def remove_duplicates(items: list) -> list:
    """Drop repeated items, keeping the first occurrence of each."""
    seen = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return seen
