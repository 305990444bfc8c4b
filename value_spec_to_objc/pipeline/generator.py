"""
Generator - runs the whole pipeline for a set of input files.

1. Find the spec files (directories are scanned by suffix)
2. Parse each file into an `ObjectType` or an `AlgebraicType`
3. Apply the default includes of its kind
4. Aggregate the contributions of the active plugins into files
5. Render and write them atomically
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from pathlib import Path

from .aggregation import algebraic_type_creation, object_spec_creation
from .aggregation.file_creation import CreationResult, GenerationRequest
from .config import GeneratorConfig
from .errors import Error, GenerationError, prefixed
from .plugins import algebraic_type_plugins, object_spec_plugins
from .spec_ast.nodes import AlgebraicType, SpecType
from .spec_ast.parser import SUFFIX_KINDS, parse_file
from .writer import AtomicWriter, FileWriteRequest

logger = logging.getLogger(__name__)


def find_spec_files(paths: Iterable[str | Path]) -> list[Path]:
    """Input files named by paths; directories are searched recursively by suffix."""
    found = []
    for path in map(Path, paths):
        if path.is_dir():
            found.extend(
                sorted(p for p in path.rglob("*.json") if any(p.name.endswith(s) for s in SUFFIX_KINDS))
            )
        else:
            found.append(path)
    return found


@dataclass
class GenerationReport:
    """Outcome of a run: what was written and what failed."""

    written: list[Path] = field(default_factory=list)
    errors: list[Error] = field(default_factory=list)


class Generator:
    """Generates Objective-C sources for spec files."""

    def __init__(self, config: GeneratorConfig | None = None, writer: AtomicWriter | None = None):
        self.config = config or GeneratorConfig()
        self.writer = writer or AtomicWriter()
        self.object_plugins = object_spec_plugins()
        self.algebraic_plugins = algebraic_type_plugins()

    def with_effective_includes(self, spec_type: SpecType) -> SpecType:
        return replace(spec_type, includes=self.config.effective_includes(spec_type))

    def file_write_request_for_type(self, spec_type: SpecType, path: Path) -> CreationResult:
        request = GenerationRequest(path.resolve(), self.config.output_folder_for(path.resolve()), self.config)
        spec_type = self.with_effective_includes(spec_type)
        if isinstance(spec_type, AlgebraicType):
            return algebraic_type_creation.file_write_request(request, spec_type, self.algebraic_plugins)
        return object_spec_creation.file_write_request(request, spec_type, self.object_plugins)

    def file_write_request_for_path(self, path: Path) -> CreationResult:
        """Parse and aggregate one input file without writing anything."""
        try:
            spec_type, parse_errors = parse_file(path)
        except (OSError, UnicodeDecodeError) as e:
            return CreationResult(errors=[Error(f"[{path}] {e}")])
        if parse_errors:
            return CreationResult(errors=prefixed(str(path), parse_errors))
        return self.file_write_request_for_type(spec_type, path)

    def write(self, file_write_request: FileWriteRequest) -> list[Path]:
        return self.writer.write_request(file_write_request)

    def generate(self, paths: Iterable[str | Path]) -> GenerationReport:
        """Generate every input file; a failing file does not stop the others."""
        report = GenerationReport()
        for path in find_spec_files(paths):
            result = self.file_write_request_for_path(path)
            if not result.ok:
                report.errors.extend(result.errors)
                continue
            report.written.extend(self.write(result.file_write_request))
        return report

    def run(self, paths: Iterable[str | Path]) -> list[Path]:
        """Generate every input file.

        Raises:
            GenerationError: If any file failed, after the others were written
        """
        report = self.generate(paths)
        if report.errors:
            raise GenerationError(report.errors)
        return report.written
