"""Module catalogs - candidate modules keyed by their metadata name.

Two catalogs take part in a resolution run:
1. Platform (runtime-provided modules, enumerated from directories)
2. Application (modules shipped with the app, given as explicit files)

Names always come from module metadata, never from file names.
"""

import logging
from collections.abc import Iterable
from collections.abc import Iterator
from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict

from .errors import NotAContainerError
from .errors import UnreadableModuleError
from .metadata import ModuleReader

logger = logging.getLogger(__name__)


class ModuleDescriptor(BaseModel):
    """A module file and the name declared in its metadata.

    Attributes:
        name: Logical module name from metadata
        path: File path exactly as supplied by the caller
    """

    model_config = ConfigDict(frozen=True)

    name: str
    path: str

    def __str__(self) -> str:
        return self.name


class ModuleCatalog:
    """Ordered, read-only collection of module descriptors."""

    def __init__(self, label: str, descriptors: Iterable[ModuleDescriptor] = ()):
        """Initialize catalog.

        Args:
            label: Catalog label used in diagnostics ("platform", "application")
            descriptors: Descriptors in insertion order
        """
        self.label = label
        self._descriptors = tuple(descriptors)

    def find(self, name: str) -> ModuleDescriptor | None:
        """Return the first descriptor declaring this name, or None."""
        return next((d for d in self._descriptors if d.name == name), None)

    def names(self) -> list[str]:
        """Return declared names in catalog order."""
        return [d.name for d in self._descriptors]

    def __iter__(self) -> Iterator[ModuleDescriptor]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __repr__(self) -> str:
        return f"ModuleCatalog({self.label}, {len(self._descriptors)} modules)"


def read_module_name(path: str, reader: ModuleReader) -> ModuleDescriptor:
    """Read one input module's descriptor.

    Args:
        path: Module file path (kept verbatim in the descriptor)
        reader: Metadata reader

    Returns:
        ModuleDescriptor for the file

    Raises:
        UnreadableModuleError: File cannot be opened or has no metadata name
    """
    try:
        header = reader.read_header(path)
    except NotAContainerError as e:
        raise UnreadableModuleError(path, e.reason) from e
    return ModuleDescriptor(name=header.name, path=path)


def _unique(paths: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result = []
    for path in paths:
        if path not in seen:
            seen.add(path)
            result.append(path)
    return result


def load_application_catalog(paths: Iterable[str], reader: ModuleReader) -> ModuleCatalog:
    """Build the application catalog from explicit dependency files.

    Args:
        paths: Dependency file paths, in priority order
        reader: Metadata reader

    Returns:
        ModuleCatalog with one descriptor per distinct path

    Raises:
        UnreadableModuleError: Any listed file is not a readable module
    """
    descriptors = [read_module_name(path, reader) for path in _unique(paths)]
    logger.debug(f"[catalog:application] loaded {len(descriptors)} modules")
    return ModuleCatalog("application", descriptors)


def enumerate_module_files(directory: str, extension: str = ".dll") -> list[str]:
    """List module files directly inside a directory (non-recursive).

    Args:
        directory: Directory to scan
        extension: Module file extension, matched case-insensitively

    Returns:
        File paths sorted by file name

    Raises:
        UnreadableModuleError: Directory does not exist
    """
    root = Path(directory)
    if not root.is_dir():
        raise UnreadableModuleError(directory, "platform directory not found")

    extension = extension.lower()
    files = sorted(
        (entry for entry in root.iterdir() if entry.is_file() and entry.suffix.lower() == extension),
        key=lambda entry: entry.name,
    )
    return [str(entry) for entry in files]


def load_platform_catalog(
    directories: Iterable[str],
    reader: ModuleReader,
    extension: str = ".dll",
) -> ModuleCatalog:
    """Build the platform catalog by enumerating module directories.

    Args:
        directories: Platform directories, in priority order
        reader: Metadata reader
        extension: Module file extension

    Returns:
        ModuleCatalog with every module file of every directory

    Raises:
        UnreadableModuleError: A directory is missing or a file is not a readable module
    """
    paths: list[str] = []
    for directory in directories:
        paths.extend(enumerate_module_files(directory, extension))

    descriptors = [read_module_name(path, reader) for path in _unique(paths)]
    logger.debug(f"[catalog:platform] loaded {len(descriptors)} modules")
    return ModuleCatalog("platform", descriptors)
