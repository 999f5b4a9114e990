"""TBPF architecture versions and build profiles.

Each architecture version maps to a cargo target triple and to the
e_flags value the linker stamps into the contract's ELF header:

    v0 -> tbpf-tos-tos     e_flags 0x0
    v1 -> tbpfv1-tos-tos   e_flags 0x1
    ...
    v4 -> tbpfv4-tos-tos   e_flags 0x4
"""

from enum import Enum
from typing import List, Union

BASE_TARGET = "tbpf-tos-tos"


class ArchitectureVersion(Enum):
    """TBPF instruction-set revision."""

    V0 = "v0"
    V1 = "v1"
    V2 = "v2"
    V3 = "v3"
    V4 = "v4"

    @property
    def label(self) -> str:
        return self.value.upper()

    @classmethod
    def names(cls) -> List[str]:
        return [arch.value for arch in cls]


DEFAULT_ARCH = ArchitectureVersion.V3

_EXPECTED_FLAGS = {
    ArchitectureVersion.V0: 0x0,
    ArchitectureVersion.V1: 0x1,
    ArchitectureVersion.V2: 0x2,
    ArchitectureVersion.V3: 0x3,
    ArchitectureVersion.V4: 0x4,
}


def _arch_value(arch: Union[ArchitectureVersion, str]) -> str:
    if isinstance(arch, ArchitectureVersion):
        return arch.value
    return arch


def target_triple(arch: Union[ArchitectureVersion, str]) -> str:
    """Get the cargo target triple for an architecture version.

    Examples:
        target_triple("v0")  # "tbpf-tos-tos"
        target_triple("v3")  # "tbpfv3-tos-tos"
    """
    value = _arch_value(arch)
    if value == ArchitectureVersion.V0.value:
        return BASE_TARGET
    return f"tbpf{value}-tos-tos"


def expected_flags(arch: Union[ArchitectureVersion, str]) -> int:
    """Get the expected ELF e_flags for an architecture version.

    Unrecognized architecture strings map to 0x0.
    """
    value = _arch_value(arch)
    for version, flags in _EXPECTED_FLAGS.items():
        if version.value == value:
            return flags
    return 0x0


class BuildProfile(Enum):
    """Cargo build profile."""

    DEBUG = "debug"
    RELEASE = "release"

    @classmethod
    def from_release(cls, release: bool) -> "BuildProfile":
        return cls.RELEASE if release else cls.DEBUG

    @property
    def dir_name(self) -> str:
        """Output subdirectory cargo uses for this profile."""
        return self.value

    @property
    def cargo_flags(self) -> List[str]:
        return ["--release"] if self is BuildProfile.RELEASE else []
