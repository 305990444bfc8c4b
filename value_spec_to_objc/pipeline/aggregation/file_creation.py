"""
Folding plugin contributions into generated files.

Every active plugin is asked for each aspect of the type (methods, imports,
functions, ...). The contributions are concatenated in plugin order and
assembled into one `code.File` per type, which the writer then renders into
a header and an implementation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path

import jinja2

from ..analyzer.comment_utils import comments_as_block
from ..code_model import code, objc
from ..config import GeneratorConfig
from ..errors import Error, prefixed
from ..plugins.base import Plugin
from ..spec_ast.nodes import SpecType
from ..writer.file_writer import FileWriteRequest, requests_for_file

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent.parent / "templates"

_jinja_env = jinja2.Environment(
    loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
    lstrip_blocks=True,
    trim_blocks=True,
)


class ConflictError(Exception):
    """Two plugins asked for incompatible values of a single-valued aspect."""


@dataclass
class GenerationRequest:
    """Everything aggregation needs to know besides the type itself.

    Attributes:
        path: Input file the type was read from
        output_folder: Directory the generated files are written to
        config: Generator configuration
    """

    path: Path
    output_folder: Path
    config: GeneratorConfig = field(default_factory=GeneratorConfig)


@dataclass
class CreationResult:
    """Either the write request for a type, or the errors that prevented it."""

    file_write_request: FileWriteRequest | None = None
    errors: list[Error] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def generated_file_comment_lines(input_path: Path) -> list[str]:
    template = _jinja_env.get_template("generated_file_comments.jinja2")
    rendered = template.render(input_file_name=input_path.name)
    return [line for line in rendered.splitlines() if line.strip()]


def file_comments(plugin_comments: list[objc.Comment], input_path: Path) -> list[objc.Comment]:
    return plugin_comments + comments_as_block(generated_file_comment_lines(input_path))


def _first_keyword_name(method: objc.Method) -> str:
    return method.keywords[0].name


def sorted_methods(methods: list[objc.Method]) -> list[objc.Method]:
    """Initializers first, then the rest, each group ordered by first keyword."""
    return sorted(methods, key=lambda m: ("init" not in _first_keyword_name(m), _first_keyword_name(m)))


def _fold_single_value(values: Sequence, conflict_reason: str):
    """The one value every plugin agrees on, ignoring plugins with no opinion.

    Raises:
        ConflictError: If two plugins ask for different values
    """
    result = None
    for value in values:
        if value is None:
            continue
        if result is not None and value != result:
            raise ConflictError(conflict_reason)
        result = value
    return result


def _collect(plugins: Sequence[Plugin], aspect: Callable[[Plugin], list]) -> list:
    return [item for plugin in plugins for item in aspect(plugin)]


def imports_with_base_class(config: GeneratorConfig, imports: list[objc.Import]) -> list[objc.Import]:
    if config.base_class_library_name is None:
        return imports
    base_import = objc.Import(config.base_class_name + ".h", True, config.base_class_library_name)
    return [base_import] + imports


class FileCreator:
    """Builds the files of a type out of the contributions of its plugins."""

    def __init__(self, request: GenerationRequest, plugins: Sequence[Plugin]):
        self.request = request
        self.plugins = list(plugins)

    @property
    def config(self) -> GeneratorConfig:
        return self.request.config

    def validation_errors(self, spec_type: SpecType) -> list[Error]:
        return _collect(self.plugins, lambda p: p.validation_errors(spec_type))

    def file_type(self, spec_type: SpecType) -> code.FileType:
        file_type = _fold_single_value(
            [plugin.file_type(spec_type) for plugin in self.plugins], "conflicting file type requirements"
        )
        return file_type or code.FileType.OBJECTIVE_C

    def nullability(self, spec_type: SpecType) -> objc.ClassNullability:
        nullability = _fold_single_value(
            [plugin.nullability(spec_type) for plugin in self.plugins], "conflicting nullability requirements"
        )
        return nullability or objc.ClassNullability.DEFAULT

    def class_for_type(self, spec_type: SpecType, nullability: objc.ClassNullability) -> objc.Class | None:
        """The class of the type, or None when no plugin contributes to it."""
        class_methods = sorted_methods(_collect(self.plugins, lambda p: p.class_methods(spec_type)))
        instance_methods = sorted_methods(_collect(self.plugins, lambda p: p.instance_methods(spec_type)))
        properties = _collect(self.plugins, lambda p: p.properties(spec_type))
        instance_variables = _collect(self.plugins, lambda p: p.instance_variables(spec_type))
        # later plugins list their protocols first
        implemented_protocols = _collect(reversed(self.plugins), lambda p: p.implemented_protocols(spec_type))
        subclassing_restricted = any(plugin.subclassing_restricted(spec_type) for plugin in self.plugins)

        if not (
            class_methods
            or instance_methods
            or properties
            or instance_variables
            or implemented_protocols
            or subclassing_restricted
        ):
            return None
        return objc.Class(
            name=spec_type.name,
            base_class_name=self.config.base_class_name,
            class_methods=class_methods,
            instance_methods=instance_methods,
            properties=properties,
            instance_variables=instance_variables,
            implemented_protocols=implemented_protocols,
            comments=comments_as_block(spec_type.comments),
            nullability=nullability,
            subclassing_restricted=subclassing_restricted,
        )

    def base_file(self, spec_type: SpecType) -> code.File:
        """The file holding the class of the type and everything plugins add around it.

        Raises:
            ConflictError: If plugins disagree on the file type or the nullability
        """
        file_type = self.file_type(spec_type)
        nullability = self.nullability(spec_type)
        generated_class = self.class_for_type(spec_type, nullability)
        classes = [generated_class] if generated_class is not None else []
        return code.File(
            name=spec_type.name,
            type=file_type,
            comments=file_comments(_collect(self.plugins, lambda p: p.header_comments(spec_type)), self.request.path),
            imports=imports_with_base_class(self.config, _collect(self.plugins, lambda p: p.imports(spec_type))),
            forward_declarations=_collect(self.plugins, lambda p: p.forward_declarations(spec_type)),
            enumerations=_collect(self.plugins, lambda p: p.enumerations(spec_type)),
            block_types=_collect(self.plugins, lambda p: p.block_types(spec_type)),
            static_constants=_collect(self.plugins, lambda p: p.static_constants(spec_type)),
            functions=_collect(self.plugins, lambda p: p.functions(spec_type)),
            macros=_collect(self.plugins, lambda p: p.macros(spec_type)),
            protocols=_collect(self.plugins, lambda p: p.protocols(spec_type)),
            classes=classes,
            structs=_collect(self.plugins, lambda p: p.structs(spec_type)),
            diagnostic_ignores=list(self.config.diagnostic_ignores),
            nullability=objc.ClassNullability.DEFAULT if classes else nullability,
        )

    def transformed_base_file(self, spec_type: SpecType) -> code.File:
        base_file = self.base_file(spec_type)
        for plugin in self.plugins:
            base_file = plugin.transform_base_file(spec_type, base_file)
        return base_file

    def merge_companion_type(self, into: code.File, companion: SpecType) -> code.File:
        """Fold the file of a companion type into an existing file (single-file mode).

        The companion's own header is never written, so imports of it are
        dropped from the merged file.
        """
        companion_file = self.transformed_base_file(companion)
        own_header = companion.name + ".h"
        return replace(
            into,
            imports=[i for i in into.imports + companion_file.imports if i.file != own_header],
            forward_declarations=into.forward_declarations
            + companion_file.forward_declarations
            + [objc.ForwardDeclaration.for_class(companion.name)],
            enumerations=into.enumerations + companion_file.enumerations,
            block_types=into.block_types + companion_file.block_types,
            static_constants=into.static_constants + companion_file.static_constants,
            functions=into.functions + companion_file.functions,
            macros=into.macros + companion_file.macros,
            classes=into.classes + companion_file.classes,
            structs=into.structs + companion_file.structs,
        )

    def files_for_type(self, spec_type: SpecType) -> list[code.File]:
        return [self.base_file(spec_type)] + _collect(self.plugins, lambda p: p.additional_files(spec_type))

    def file_write_request(self, spec_type: SpecType, companion_types: Sequence[SpecType] = ()) -> CreationResult:
        """Validate the type and build every write it needs.

        Companion types contributed by plugins end up in the same write
        request as the type itself.
        """
        logger.debug(
            "Generating %s with plugins: %s",
            spec_type.name,
            ", ".join(type(plugin).__name__ for plugin in self.plugins),
        )
        errors = self.validation_errors(spec_type)
        if errors:
            errors = prefixed(str(self.request.path), errors)
            for error in errors:
                logger.error("%s", error)
            return CreationResult(errors=errors)

        folder = self.request.output_folder
        try:
            if self.config.single_file:
                file = self.transformed_base_file(spec_type)
                for companion in companion_types:
                    file = self.merge_companion_type(file, companion)
                requests = requests_for_file(folder, file)
            else:
                requests = [
                    request
                    for each in [spec_type, *companion_types]
                    for file in self.files_for_type(each)
                    for request in requests_for_file(folder, file)
                ]
        except ConflictError as e:
            error = Error(str(e))
            logger.error("%s", error)
            return CreationResult(errors=[error])

        for plugin in reversed(self.plugins):
            requests = [plugin.transform_file_request(request) for request in requests]
        return CreationResult(FileWriteRequest(spec_type.name, requests))


