"""Companion debug-symbol lookup for resolved modules."""

import os
from collections.abc import Iterable

DEFAULT_SYMBOL_EXTENSION = ".pdb"


def companion_path(module_path: str, extension: str = DEFAULT_SYMBOL_EXTENSION) -> str:
    """Return the companion path for a module (same base name, new extension).

    A path without an extension gets the extension appended.
    """
    if not extension.startswith("."):
        extension = "." + extension
    root, _ext = os.path.splitext(module_path)
    return root + extension


def find_companions(module_paths: Iterable[str], extension: str = DEFAULT_SYMBOL_EXTENSION) -> list[str]:
    """Return companion paths that exist on disk, in module order.

    Args:
        module_paths: Resolved module paths
        extension: Companion file extension

    Returns:
        Existing companion paths
    """
    candidates = (companion_path(path, extension) for path in module_paths)
    return [path for path in candidates if os.path.isfile(path)]
