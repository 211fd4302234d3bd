"""
Shared constants for Architect.

This module provides a single source of truth for default values
that are used across multiple modules.
"""

# Lazy engine limits
MAX_EVALUATION_DEPTH = 100
"""Maximum nesting of resolutions before a reference cycle is assumed.

Every accessor resolution (including references, links and conditions
resolved while evaluating another value) counts one level. This is a
heuristic guard, not a proof of acyclicity: a legitimate chain deeper than
this ceiling fails the same way a cycle does.
"""

# Output defaults
DEFAULT_OUTPUT_DIR = "out"
"""Default directory for written build results."""

DEFAULT_OUTPUT_FORMAT = "yaml"
"""Default serialisation format for written build results."""

OUTPUT_FORMATS = ("yaml", "json")
"""Supported output formats."""

# Component identifiers
RID_UUID_LENGTH = 7
"""Number of uuid characters used in a component's short result id."""
