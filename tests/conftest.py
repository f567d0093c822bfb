"""Pytest configuration for assembly-closure tests.

Test assemblies are synthesized here: a minimal PE32 image with a CLI header
and a metadata root holding Module, Assembly and AssemblyRef tables. This is
enough for dnfile to read names and references without a .NET SDK.
"""

import struct
from collections.abc import Sequence
from pathlib import Path

import pytest

from assembly_closure.errors import NotAContainerError
from assembly_closure.metadata import HeaderInfo

FILE_ALIGNMENT = 0x200
SECTION_ALIGNMENT = 0x1000
TEXT_RVA = 0x1000
CLI_HEADER_SIZE = 72

TABLE_MODULE = 0x00
TABLE_ASSEMBLY = 0x20
TABLE_ASSEMBLY_REF = 0x23


def _align(value: int, alignment: int) -> int:
    return (value + alignment - 1) // alignment * alignment


def _pad4(data: bytes) -> bytes:
    return data + b"\0" * (-len(data) % 4)


class _StringHeap:
    def __init__(self):
        self.data = bytearray(b"\0")
        self.offsets: dict[str, int] = {}

    def add(self, value: str) -> int:
        if value in self.offsets:
            return self.offsets[value]
        offset = len(self.data)
        self.data += value.encode("utf-8") + b"\0"
        self.offsets[value] = offset
        return offset


def build_metadata(
    name: str,
    references: Sequence[str] = (),
    version: tuple[int, int, int, int] = (1, 0, 0, 0),
    with_assembly: bool = True,
) -> bytes:
    """Build an ECMA-335 metadata root with Module/Assembly/AssemblyRef tables."""
    strings = _StringHeap()
    module_name = strings.add(f"{name}.dll")
    assembly_name = strings.add(name)
    reference_names = [strings.add(r) for r in references]

    # All heap indexes are 2 bytes (HeapSizes = 0)
    tables = [(TABLE_MODULE, [struct.pack("<HHHHH", 0, module_name, 1, 0, 0)])]
    if with_assembly:
        row = struct.pack("<IHHHHIHHH", 0x8004, *version, 0, 0, assembly_name, 0)
        tables.append((TABLE_ASSEMBLY, [row]))
    if references:
        rows = [struct.pack("<HHHHIHHHH", 4, 0, 0, 0, 0, 0, ref, 0, 0) for ref in reference_names]
        tables.append((TABLE_ASSEMBLY_REF, rows))

    valid = sum(1 << number for number, _rows in tables)
    table_stream = struct.pack("<IBBBBQQ", 0, 2, 0, 0, 1, valid, 0)
    table_stream += b"".join(struct.pack("<I", len(rows)) for _number, rows in tables)
    table_stream += b"".join(b"".join(rows) for _number, rows in tables)

    streams = [
        ("#~", _pad4(table_stream)),
        ("#Strings", _pad4(bytes(strings.data))),
        ("#US", _pad4(b"\0")),
        ("#GUID", bytes(range(16))),
        ("#Blob", _pad4(b"\0")),
    ]

    version_string = _pad4(b"v4.0.30319\0")
    root = struct.pack("<IHHII", 0x424A5342, 1, 1, 0, len(version_string)) + version_string
    root += struct.pack("<HH", 0, len(streams))

    header_names = [_pad4(stream_name.encode("ascii") + b"\0") for stream_name, _data in streams]
    offset = len(root) + sum(8 + len(n) for n in header_names)
    headers = b""
    for (_stream_name, data), encoded_name in zip(streams, header_names):
        headers += struct.pack("<II", offset, len(data)) + encoded_name
        offset += len(data)

    return root + headers + b"".join(data for _name, data in streams)


def build_pe(section_data: bytes, clr_directory: tuple[int, int] | None = None) -> bytes:
    """Wrap section data in a single-section PE32 DLL image."""
    virtual_size = len(section_data)
    raw_size = _align(virtual_size, FILE_ALIGNMENT)
    size_of_image = TEXT_RVA + _align(virtual_size, SECTION_ALIGNMENT)

    dos_header = b"MZ" + b"\0" * 58 + struct.pack("<I", 0x80)
    dos_header = dos_header.ljust(0x80, b"\0")

    file_header = struct.pack("<HHIIIHH", 0x14C, 1, 0, 0, 0, 0xE0, 0x2102)
    optional_header = struct.pack(
        "<HBBIIIIIIIIIHHHHHHIIIIHHIIIIII",
        0x10B, 8, 0,
        raw_size, 0, 0, 0, TEXT_RVA, 0,
        0x10000000, SECTION_ALIGNMENT, FILE_ALIGNMENT,
        4, 0, 0, 0, 4, 0,
        0, size_of_image, FILE_ALIGNMENT, 0,
        3, 0x8540,
        0x100000, 0x1000, 0x100000, 0x1000,
        0, 16,
    )
    for index in range(16):
        entry = clr_directory if index == 14 and clr_directory else (0, 0)
        optional_header += struct.pack("<II", *entry)

    section_header = struct.pack(
        "<8sIIIIIIHHI", b".text", virtual_size, TEXT_RVA, raw_size, FILE_ALIGNMENT, 0, 0, 0, 0, 0x60000020
    )

    headers = dos_header + b"PE\0\0" + file_header + optional_header + section_header
    return headers.ljust(FILE_ALIGNMENT, b"\0") + section_data.ljust(raw_size, b"\0")


def build_assembly(name: str, references: Sequence[str] = (), **kwargs) -> bytes:
    """Build a managed DLL image declaring `name` and referencing `references`."""
    metadata = build_metadata(name, references, **kwargs)
    cli_header = struct.pack("<IHHIIII", CLI_HEADER_SIZE, 2, 5, TEXT_RVA + CLI_HEADER_SIZE, len(metadata), 1, 0)
    cli_header += b"\0" * (CLI_HEADER_SIZE - len(cli_header))
    return build_pe(cli_header + metadata, clr_directory=(TEXT_RVA, CLI_HEADER_SIZE))


def build_native_image() -> bytes:
    """Build a PE image without a CLI header."""
    return build_pe(b"\xc3" + b"\0" * 15)


@pytest.fixture
def make_assembly(tmp_path: Path):
    """Write a synthesized assembly under tmp_path and return its path string."""

    def _make(relpath: str, name: str, references: Sequence[str] = (), **kwargs) -> str:
        path = tmp_path / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(build_assembly(name, references, **kwargs))
        return str(path)

    return _make


@pytest.fixture
def make_file(tmp_path: Path):
    """Write arbitrary bytes under tmp_path and return its path string."""

    def _make(relpath: str, content: bytes = b"") -> str:
        path = tmp_path / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return str(path)

    return _make


class FakeReader:
    """In-memory ModuleReader keyed by path.

    Paths mapped to None have no readable header but still answer
    read_references with an empty list, like a native image.
    """

    def __init__(self, modules: dict[str, tuple[str, list[str]] | None]):
        self.modules = modules
        self.reference_reads: list[str] = []

    def read_header(self, path: str) -> HeaderInfo:
        entry = self.modules.get(path)
        if entry is None:
            raise NotAContainerError(path, "not a managed module")
        return HeaderInfo(name=entry[0])

    def read_references(self, path: str) -> list[str]:
        self.reference_reads.append(path)
        entry = self.modules.get(path)
        return list(entry[1]) if entry else []


@pytest.fixture
def fake_reader_factory():
    return FakeReader


@pytest.fixture
def make_native(make_file):
    """Write a native (non-managed) PE image and return its path string."""

    def _make(relpath: str) -> str:
        return make_file(relpath, build_native_image())

    return _make


@pytest.fixture
def assembly_image():
    """Build assembly bytes and return them with the slice covering the metadata root."""

    def _build(name: str, references: Sequence[str] = ()) -> tuple[bytes, slice]:
        image = build_assembly(name, references)
        start = FILE_ALIGNMENT + CLI_HEADER_SIZE
        return image, slice(start, start + len(build_metadata(name, references)))

    return _build
