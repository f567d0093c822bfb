"""Runtime dependency resolution entry points."""

import logging
from collections.abc import Iterable

from ..catalog import load_application_catalog
from ..catalog import load_platform_catalog
from ..catalog import read_module_name
from ..metadata import ModuleReader
from ..metadata import PEMetadataReader
from ..settings import ClosureSettings
from .companions import find_companions
from .resolver import ClosureResolver
from .resolver import ClosureResult

logger = logging.getLogger(__name__)


def resolve_closure(
    entry_point: str,
    application_dependencies: Iterable[str],
    platform_directories: Iterable[str],
    *,
    reader: ModuleReader | None = None,
    settings: ClosureSettings | None = None,
) -> ClosureResult:
    """Resolve the module closure of an entry point.

    Args:
        entry_point: Entry module file path
        application_dependencies: Application module file paths
        platform_directories: Directories holding platform modules
        reader: Metadata reader (defaults to PEMetadataReader)
        settings: Closure settings (defaults to ClosureSettings())

    Returns:
        ClosureResult with resolved modules and companion files

    Raises:
        UnreadableModuleError: An input module has no readable name
    """
    reader = reader or PEMetadataReader()
    settings = settings or ClosureSettings()

    entry = read_module_name(entry_point, reader)
    application = load_application_catalog(application_dependencies, reader)
    platform = load_platform_catalog(platform_directories, reader, settings.module_extension)

    resolver = ClosureResolver(entry, platform, application, reader)
    resolved = resolver.resolve()
    companions = find_companions((r.descriptor.path for r in resolved), settings.symbol_extension)

    logger.info(
        f"[closure:done] {entry.name}: {len(resolved)} modules, {len(companions)} symbol files "
        f"(platform={len(platform)}, application={len(application)})"
    )
    return ClosureResult(entry=entry, resolved=resolved, companions=companions)


def resolve_runtime_dependencies(
    entry_point: str,
    application_dependencies: Iterable[str],
    platform_directories: Iterable[str],
    *,
    reader: ModuleReader | None = None,
    settings: ClosureSettings | None = None,
) -> list[str]:
    """Resolve the files needed to run an entry point.

    Returns:
        Module paths in discovery order, then existing companion paths

    Raises:
        UnreadableModuleError: An input module has no readable name
    """
    result = resolve_closure(
        entry_point,
        application_dependencies,
        platform_directories,
        reader=reader,
        settings=settings,
    )
    return result.paths()
