"""Aggregation of plugin contributions into file write requests."""

from . import algebraic_type_creation, object_spec_creation
from .file_creation import ConflictError, CreationResult, FileCreator, GenerationRequest, sorted_methods

__all__ = [
    "ConflictError",
    "CreationResult",
    "FileCreator",
    "GenerationRequest",
    "algebraic_type_creation",
    "object_spec_creation",
    "sorted_methods",
]
