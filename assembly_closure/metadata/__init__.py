"""Binary metadata readers.

The resolver depends only on the ModuleReader protocol; PEMetadataReader is
the concrete reader for .NET assemblies.
"""

from .pe_reader import PEMetadataReader
from .protocols import HeaderInfo
from .protocols import ModuleReader

__all__ = [
    "HeaderInfo",
    "ModuleReader",
    "PEMetadataReader",
]
