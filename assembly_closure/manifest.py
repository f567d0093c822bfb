"""Boot manifest - the JSON document the runtime loader reads at startup."""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

logger = logging.getLogger(__name__)


class BootManifest(BaseModel):
    """Structure of a boot manifest file.

    Attributes:
        entry_assembly: Metadata name of the entry module
        assembly_references: File names of all files to load
        linker_enabled: Whether the app was linked before packaging
    """

    model_config = ConfigDict(populate_by_name=True)

    entry_assembly: str = Field(alias="entryAssembly")
    assembly_references: list[str] = Field(default_factory=list, alias="assemblyReferences")
    linker_enabled: bool = Field(default=False, alias="linkerEnabled")

    @classmethod
    def build(cls, entry_name: str, reference_paths: Iterable[str], linker_enabled: bool) -> "BootManifest":
        """Create a manifest from resolved paths (only file names are kept)."""
        return cls(
            entry_assembly=entry_name,
            assembly_references=[os.path.basename(p) for p in reference_paths],
            linker_enabled=linker_enabled,
        )

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


def write_boot_manifest(manifest: BootManifest, output_path: str | Path) -> Path:
    """Write a manifest as JSON.

    Args:
        manifest: Manifest to write
        output_path: Destination file (parent directories are created)

    Returns:
        Path of the written file
    """
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(manifest.to_json() + "\n", encoding="utf-8")
    logger.info(f"[manifest:write] {path} ({len(manifest.assembly_references)} references)")
    return path
