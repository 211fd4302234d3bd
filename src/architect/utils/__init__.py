"""
Utility functions for Architect.

General-purpose helpers that don't belong to a specific domain.
"""

import architect.utils.objects as objects
from architect.utils.objects import (
    async_filter,
    composite_hash,
    is_record,
    recursive_merge,
    recursive_merge_these,
    to_array,
)

__all__ = [
    "async_filter",
    "composite_hash",
    "is_record",
    "objects",
    "recursive_merge",
    "recursive_merge_these",
    "to_array",
]
