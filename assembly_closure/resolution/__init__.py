"""Closure resolution: lookup chain, traversal and companion files."""

from .companions import companion_path
from .companions import find_companions
from .core import resolve_closure
from .core import resolve_runtime_dependencies
from .resolver import UNRESOLVED
from .resolver import ClosureResolver
from .resolver import ClosureResult
from .resolver import Resolved

__all__ = [
    "UNRESOLVED",
    "ClosureResolver",
    "ClosureResult",
    "Resolved",
    "companion_path",
    "find_companions",
    "resolve_closure",
    "resolve_runtime_dependencies",
]
