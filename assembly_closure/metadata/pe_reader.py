"""PE/CLI metadata reader - reads .NET assembly metadata with dnfile.

Concrete ModuleReader for PE images carrying ECMA-335 metadata:
- Assembly table row -> declared module name and version
- AssemblyRef table rows -> referenced module names

Any non-OSError raised while parsing (pefile, dnfile row construction,
table access) is treated as malformed content.
"""

import logging

import dnfile
import pefile

from ..errors import NotAContainerError
from .protocols import HeaderInfo

logger = logging.getLogger(__name__)


def _heap_string(item) -> str | None:
    """Return the text of a #Strings heap item.

    Newer dnfile releases wrap heap strings in HeapItemString; older ones
    hand back plain str.
    """
    if item is None:
        return None
    value = getattr(item, "value", item)
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    return value or None


def _metadata_tables(pe: dnfile.dnPE):
    """Return the image's metadata tables, or None for non-managed images."""
    net = getattr(pe, "net", None)
    if net is None:
        return None
    return getattr(net, "mdtables", None)


def _describe(e: Exception) -> str:
    if isinstance(e, pefile.PEFormatError):
        return f"not a PE image ({e})"
    return f"invalid metadata ({type(e).__name__}: {e})"


class PEMetadataReader:
    """ModuleReader for .NET assemblies (PE32/PE32+ with a CLI header)."""

    def read_header(self, path: str) -> HeaderInfo:
        """Read the declared assembly name and version.

        Args:
            path: Path to the assembly file

        Returns:
            HeaderInfo with metadata name and version

        Raises:
            NotAContainerError: Missing file, malformed image or no Assembly row
        """
        try:
            pe = dnfile.dnPE(path)
        except OSError as e:
            raise NotAContainerError(path, f"cannot open file ({e.strerror or e})") from e
        except Exception as e:
            raise NotAContainerError(path, _describe(e)) from e

        try:
            tables = _metadata_tables(pe)
            if tables is None:
                raise NotAContainerError(path, "image has no CLI metadata")

            assembly = getattr(tables, "Assembly", None)
            if assembly is None or not assembly.rows:
                raise NotAContainerError(path, "metadata has no Assembly table")

            row = assembly.rows[0]
            name = _heap_string(getattr(row, "Name", None))
            if not name:
                raise NotAContainerError(path, "Assembly row has no name")

            version = ".".join(
                str(getattr(row, field, 0) or 0)
                for field in ("MajorVersion", "MinorVersion", "BuildNumber", "RevisionNumber")
            )
            return HeaderInfo(name=name, version=version)
        except NotAContainerError:
            raise
        except Exception as e:
            raise NotAContainerError(path, _describe(e)) from e
        finally:
            pe.close()

    def read_references(self, path: str) -> list[str]:
        """Read the names of referenced assemblies.

        Images that are not managed, or whose metadata cannot be parsed,
        contribute no references.

        Args:
            path: Path to the assembly file

        Returns:
            AssemblyRef names in table order
        """
        try:
            pe = dnfile.dnPE(path)
        except OSError:
            raise
        except Exception as e:
            logger.debug(f"[metadata:refs] {path}: {_describe(e)}, no references")
            return []

        try:
            tables = _metadata_tables(pe)
            if tables is None:
                logger.debug(f"[metadata:refs] {path} has no CLI metadata, no references")
                return []

            assembly_refs = getattr(tables, "AssemblyRef", None)
            if assembly_refs is None:
                return []

            references = []
            for row in assembly_refs.rows:
                name = _heap_string(getattr(row, "Name", None))
                if name:
                    references.append(name)
            return references
        except OSError:
            raise
        except Exception as e:
            logger.debug(f"[metadata:refs] {path}: {_describe(e)}, no references")
            return []
        finally:
            pe.close()

    def __repr__(self) -> str:
        return "PEMetadataReader(dnfile)"
