"""Contract binary verification and inspection.

verify_contract() checks the handful of ELF64 header fields a TBPF
loader cares about, straight from the raw bytes:

    offset 0   e_ident[0:4]  magic 0x7F 'E' 'L' 'F'
    offset 4   EI_CLASS      2 (64-bit)
    offset 48  e_flags       little-endian u32, the TBPF arch version

read_contract_info() is the looser summary behind `tako info`; it also
uses pyelftools to report machine, type and section count when the
header parses.
"""

import logging
import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from elftools.common.exceptions import ELFError
from elftools.construct.core import ConstructError
from elftools.elf.elffile import ELFFile

from tako.build.arch import ArchitectureVersion, expected_flags
from tako.errors import BuildFailedError, TakoError

logger = logging.getLogger(__name__)

ELF_MAGIC = b"\x7fELF"
ELF_CLASS_64 = 2
ELF64_HEADER_SIZE = 64
E_FLAGS_OFFSET = 48

MAX_REASONABLE_SIZE = 10 * 1024 * 1024


@dataclass
class VerificationReport:
    """Facts about a contract that passed verification."""

    path: Path
    size: int
    e_flags: int
    arch: str
    warnings: List[str] = field(default_factory=list)

    @property
    def size_kib(self) -> float:
        return self.size / 1024.0

    @property
    def arch_label(self) -> str:
        return self.arch.upper()


def _arch_name(arch: Union[ArchitectureVersion, str]) -> str:
    return arch.value if isinstance(arch, ArchitectureVersion) else arch


def verify_contract(
    path: Path, arch: Union[ArchitectureVersion, str]
) -> VerificationReport:
    """Verify a built contract binary for an architecture version.

    Checks, in order:
        - File exists
        - File is at least as large as an ELF64 header
        - ELF magic bytes
        - 64-bit ELF class
        - e_flags matches the architecture version

    A contract over 10 MiB only produces a warning.

    Raises:
        BuildFailedError: On the first failing check
    """
    path = Path(path)
    arch_name = _arch_name(arch)

    if not path.exists():
        raise BuildFailedError(f"Contract binary not found: {path}")

    try:
        contents = path.read_bytes()
    except OSError as e:
        raise BuildFailedError(f"Failed to read contract: {e}")

    if len(contents) < ELF64_HEADER_SIZE:
        raise BuildFailedError(f"Contract file too small ({len(contents)} bytes)")

    if contents[0:4] != ELF_MAGIC:
        raise BuildFailedError("Invalid ELF file: wrong magic bytes")

    elf_class = contents[4]
    if elf_class != ELF_CLASS_64:
        raise BuildFailedError(
            f"Invalid ELF class: expected 64-bit (2), got {elf_class}"
        )

    (e_flags,) = struct.unpack_from("<I", contents, E_FLAGS_OFFSET)
    expected = expected_flags(arch_name)
    if e_flags != expected:
        raise BuildFailedError(
            f"Wrong e_flags: expected 0x{expected:x} for {arch_name}, got 0x{e_flags:x}"
        )

    report = VerificationReport(
        path=path, size=len(contents), e_flags=e_flags, arch=arch_name
    )
    if len(contents) > MAX_REASONABLE_SIZE:
        message = (
            f"Contract is very large ({len(contents)} bytes). "
            + "Consider optimizing with --release"
        )
        logger.debug(message)
        report.warnings.append(message)

    return report


@dataclass
class ContractInfo:
    """Summary of a contract file for display."""

    path: Path
    size: int
    is_elf: bool
    elf_class: Optional[str] = None
    machine: Optional[str] = None
    elf_type: Optional[str] = None
    entry: Optional[int] = None
    section_count: Optional[int] = None

    @property
    def size_kib(self) -> float:
        return self.size / 1024.0


def read_contract_info(path: Path) -> ContractInfo:
    """Read a size/format summary of a contract binary.

    Raises:
        TakoError: If the path does not exist or is not a regular file
    """
    path = Path(path)
    if not path.exists():
        raise TakoError(f"Contract not found: {path}")
    if not path.is_file():
        raise TakoError(f"Contract is not a file: {path}")

    content = path.read_bytes()
    info = ContractInfo(path=path, size=len(content), is_elf=content[0:4] == ELF_MAGIC)
    if not info.is_elf:
        return info

    if len(content) > 4:
        info.elf_class = {1: "32-bit", 2: "64-bit"}.get(content[4], "unknown")

    try:
        with open(path, "rb") as f:
            elffile = ELFFile(f)
            header = elffile.header
            info.machine = str(header.e_machine)
            info.elf_type = str(header.e_type)
            info.entry = header.e_entry
            info.section_count = elffile.num_sections()
    except (ELFError, ConstructError) as e:
        logger.debug(f"pyelftools could not parse {path}: {e}")

    return info
