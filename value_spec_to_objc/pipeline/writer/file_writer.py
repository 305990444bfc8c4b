"""
Write requests for generated files and the atomic writer persisting them.
"""

from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from ..code_model.code import File
from ..renderers import render_header, render_implementation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Request:
    """Contents to be written at an absolute path."""

    path: Path
    content: str


@dataclass
class FileWriteRequest:
    """Every write needed for one logical unit (a type and its companion files)."""

    name: str
    requests: list[Request] = field(default_factory=list)


def requests_for_file(containing_folder: Path, file: File) -> list[Request]:
    """Header always, implementation only when the file has something to implement."""
    requests = [Request(containing_folder / f"{file.name}.h", render_header(file))]
    implementation = render_implementation(file)
    if implementation is not None:
        path = containing_folder / f"{file.name}{file.type.implementation_extension}"
        requests.append(Request(path, implementation))
    return requests


def requests_for_files(containing_folder: Path, files: list[File]) -> list[Request]:
    return [request for file in files for request in requests_for_file(containing_folder, file)]


class AtomicWriter:
    """Writes files through a temporary file in the target directory.

    An interrupted write never leaves a generated file half written: the
    content is written next to the target and then renamed over it.
    """

    def write(self, path: Path, content: str) -> None:
        """Write content to path atomically.

        Raises:
            OSError: If file operations fail
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory so the rename stays on one filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)
            temp_path.replace(path)
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise

    def write_request(self, file_write_request: FileWriteRequest) -> list[Path]:
        """Persist every request of a logical unit, returning the written paths."""
        written = []
        for request in file_write_request.requests:
            self.write(request.path, request.content)
            logger.info("Wrote %s", request.path)
            written.append(request.path)
        return written
