"""assembly-closure.

Computes the set of .NET assemblies an entry assembly needs at runtime,
preferring platform-provided modules over application-shipped ones.
"""

from .catalog import ModuleCatalog
from .catalog import ModuleDescriptor
from .errors import ClosureError
from .errors import NotAContainerError
from .errors import UnreadableModuleError
from .manifest import BootManifest
from .manifest import write_boot_manifest
from .resolution import resolve_closure
from .resolution import resolve_runtime_dependencies

__all__ = [
    "BootManifest",
    "ClosureError",
    "ModuleCatalog",
    "ModuleDescriptor",
    "NotAContainerError",
    "UnreadableModuleError",
    "resolve_closure",
    "resolve_runtime_dependencies",
    "write_boot_manifest",
]
