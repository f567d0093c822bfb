"""Closure resolver - transitive module closure from an entry module.

Resolution order for each name (first match wins):
1. Identity (the entry module itself)
2. Platform catalog
3. Application catalog

Names matching none of these are dropped, the same way the runtime's
linker skips unresolved references.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from dataclasses import field

from ..catalog import ModuleCatalog
from ..catalog import ModuleDescriptor
from ..metadata import ModuleReader

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolved:
    """A name that matched a lookup step.

    Attributes:
        descriptor: Matched module
        source: Lookup step that matched (entry, platform, application)
    """

    descriptor: ModuleDescriptor
    source: str


class _Unresolved:
    def __repr__(self) -> str:
        return "UNRESOLVED"


UNRESOLVED = _Unresolved()

Resolution = Resolved | _Unresolved

Lookup = Callable[[str], Resolution]


@dataclass
class ResolutionState:
    """Mutable state for a single resolution run."""

    visited: set[str] = field(default_factory=set)
    pending: list[str] = field(default_factory=list)
    results: list[Resolved] = field(default_factory=list)


@dataclass
class ClosureResult:
    """Outcome of a resolution run.

    Attributes:
        entry: The entry module
        resolved: Resolved modules in discovery order, entry first
        companions: Existing debug-symbol paths, in module order
    """

    entry: ModuleDescriptor
    resolved: list[Resolved]
    companions: list[str] = field(default_factory=list)

    @property
    def modules(self) -> list[ModuleDescriptor]:
        return [r.descriptor for r in self.resolved]

    def paths(self) -> list[str]:
        """Module paths followed by companion paths."""
        return [m.path for m in self.modules] + list(self.companions)


class ClosureResolver:
    """Depth-first closure over module references.

    Uses an explicit LIFO stack and a visited set, so cycles and deep graphs
    terminate without recursion.
    """

    def __init__(
        self,
        entry: ModuleDescriptor,
        platform: ModuleCatalog,
        application: ModuleCatalog,
        reader: ModuleReader,
    ):
        """Initialize resolver.

        Args:
            entry: Entry module descriptor
            platform: Platform catalog (preferred)
            application: Application catalog
            reader: Reader used to extract references of resolved modules
        """
        self.entry = entry
        self.platform = platform
        self.application = application
        self.reader = reader
        self._lookups: list[Lookup] = [
            self._lookup_entry,
            self._catalog_lookup(platform),
            self._catalog_lookup(application),
        ]

    def _lookup_entry(self, name: str) -> Resolution:
        if name == self.entry.name:
            return Resolved(self.entry, "entry")
        return UNRESOLVED

    @staticmethod
    def _catalog_lookup(catalog: ModuleCatalog) -> Lookup:
        def lookup(name: str) -> Resolution:
            descriptor = catalog.find(name)
            if descriptor is None:
                return UNRESOLVED
            return Resolved(descriptor, catalog.label)

        return lookup

    def lookup(self, name: str) -> Resolution:
        """Resolve a name through the lookup chain.

        Args:
            name: Module name

        Returns:
            Resolved for the first matching step, otherwise UNRESOLVED
        """
        for step in self._lookups:
            resolution = step(name)
            if resolution is not UNRESOLVED:
                return resolution
        return UNRESOLVED

    def resolve(self) -> list[Resolved]:
        """Compute the closure of the entry module.

        Returns:
            Resolved modules in discovery order, each name at most once
        """
        state = ResolutionState()
        state.pending.append(self.entry.name)

        while state.pending:
            name = state.pending.pop()
            if name in state.visited:
                continue
            state.visited.add(name)

            resolution = self.lookup(name)
            if not isinstance(resolution, Resolved):
                logger.debug(f"[closure:resolve] {name} -> unresolved, skipping")
                continue

            logger.debug(f"[closure:resolve] {name} -> {resolution.source} ({resolution.descriptor.path})")
            state.results.append(resolution)
            state.pending.extend(self.reader.read_references(resolution.descriptor.path))

        return state.results

    def __repr__(self) -> str:
        return f"ClosureResolver({self.entry.name}, platform={len(self.platform)}, application={len(self.application)})"
