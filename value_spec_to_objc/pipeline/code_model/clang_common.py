"""
Concepts shared by the Objective-C and C++ code models.
"""

from __future__ import annotations

from enum import Enum


class Nullability(str, Enum):
    """Nullability of a pointer value.

    INHERITED leaves the value unannotated so it picks up whatever the
    surrounding assume-nonnull region says.
    """

    INHERITED = "inherited"
    NONNULL = "nonnull"
    NULLABLE = "nullable"
