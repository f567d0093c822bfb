"""Module reader protocol.

The resolver only depends on this contract. Concrete readers decide how a
container format is parsed:
- read_header: cheap read of the module's declared name
- read_references: names of the modules it references
"""

from typing import Protocol

from pydantic import BaseModel
from pydantic import ConfigDict


class HeaderInfo(BaseModel):
    """Identity read from a module header.

    Attributes:
        name: Declared module name from metadata (not the file name)
        version: Four-part version string (major.minor.build.revision)
    """

    model_config = ConfigDict(frozen=True)

    name: str
    version: str = "0.0.0.0"


class ModuleReader(Protocol):
    """Protocol for binary module readers."""

    def read_header(self, path: str) -> HeaderInfo:
        """Read the module's declared identity.

        Args:
            path: Path to the module file

        Returns:
            HeaderInfo for the module

        Raises:
            NotAContainerError: File is missing, unreadable or not a managed module
        """
        ...

    def read_references(self, path: str) -> list[str]:
        """Read the names of modules referenced by this module.

        Malformed or non-managed files yield an empty list rather than an error.

        Args:
            path: Path to the module file

        Returns:
            Referenced module names in metadata order
        """
        ...
