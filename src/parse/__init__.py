"""Import extraction and path resolution for archsentinel."""

from parse.imports import (
    SUPPRESSION_MARKER,
    Dialect,
    ImportMatch,
    dialect_for_path,
    extract_imports,
    is_suppressed,
)
from parse.resolution import (
    DEFAULT_EXTENSIONS,
    DiskProbe,
    ExistenceProbe,
    InMemoryProbe,
    PathResolver,
    resolve_import,
)

__all__ = [
    "DEFAULT_EXTENSIONS",
    "SUPPRESSION_MARKER",
    "Dialect",
    "DiskProbe",
    "ExistenceProbe",
    "ImportMatch",
    "InMemoryProbe",
    "PathResolver",
    "dialect_for_path",
    "extract_imports",
    "is_suppressed",
    "resolve_import",
]
