"""Code model: Objective-C, C++ and file-level descriptions of generated source."""

from . import clang_common, code, cplusplus, objc

__all__ = ["clang_common", "code", "cplusplus", "objc"]
