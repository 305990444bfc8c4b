"""Writing generated files to disk."""

from .file_writer import AtomicWriter, FileWriteRequest, Request, requests_for_file, requests_for_files

__all__ = ["AtomicWriter", "FileWriteRequest", "Request", "requests_for_file", "requests_for_files"]
