"""TOS platform-tools discovery.

This module locates an installed platform-tools bundle (a rustc/cargo
build plus LLVM binutils that know about the TBPF targets).

Directory Structure:
    ~/.cache/tos/<version>/platform-tools/
    ├── rust/
    │   ├── bin/
    │   │   ├── cargo
    │   │   └── rustc
    │   └── lib/rustlib/tbpfv3-tos-tos/
    └── llvm/
        └── bin/
            ├── clang
            ├── lld
            └── llvm-objdump

The cache root can be moved with the TAKO_CACHE_DIR environment variable.

Search order (first match wins):
    1. <cache>/<requested version>/platform-tools/rust/bin/
    2. <cache>/<any installed version>/platform-tools/rust/bin/ (newest first)
    3. ~/tos-network/platform-tools/rust/bin/ (legacy, unversioned)
    4. ~/tos-network/platform-tools/out/rust/bin/ (build output)
    5. ~/.tos/platform-tools/rust/bin/ (user local)
    6. /usr/local/tos/platform-tools/rust/bin/ (system-wide)

Not finding anything is not an error: callers fall back to the system
cargo and rustc.
"""

import logging
import os
import re
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

# Should match a tos-platform-tools release tag on GitHub (v<major>.<minor>)
DEFAULT_PLATFORM_TOOLS_VERSION = "v1.52"

# rustc version bundled in the default platform-tools release
DEFAULT_RUST_VERSION = "1.89.0"

EXE_SUFFIX = ".exe" if sys.platform == "win32" else ""

SYSTEM_PLATFORM_TOOLS = Path("/usr/local/tos/platform-tools")


class ToolchainError(Exception):
    """Raised when toolchain operations fail."""

    pass


class ToolchainSource(Enum):
    """Where a toolchain installation was found."""

    VERSIONED_CACHE = "versioned-cache"
    LEGACY = "legacy"


@dataclass(frozen=True)
class PlatformTools:
    """A located platform-tools installation."""

    version: str
    rust_bin: Path
    llvm_bin: Path
    source: ToolchainSource

    def _rust_tool(self, name: str) -> Path:
        return self.rust_bin / f"{name}{EXE_SUFFIX}"

    def _llvm_tool(self, name: str) -> Path:
        return self.llvm_bin / f"{name}{EXE_SUFFIX}"

    @property
    def rustc(self) -> Path:
        return self._rust_tool("rustc")

    @property
    def cargo(self) -> Path:
        return self._rust_tool("cargo")

    @property
    def clang(self) -> Path:
        return self._llvm_tool("clang")

    @property
    def lld(self) -> Path:
        return self._llvm_tool("lld")

    @property
    def llvm_ar(self) -> Path:
        return self._llvm_tool("llvm-ar")

    @property
    def llvm_objdump(self) -> Path:
        return self._llvm_tool("llvm-objdump")

    @property
    def llvm_objcopy(self) -> Path:
        return self._llvm_tool("llvm-objcopy")

    @property
    def llvm_readelf(self) -> Path:
        return self._llvm_tool("llvm-readelf")

    def is_valid(self) -> bool:
        """Check that both rustc and cargo are present."""
        return self.rustc.exists() and self.cargo.exists()

    def display_path(self) -> str:
        """Human readable location of the installation."""
        if self.source is ToolchainSource.VERSIONED_CACHE:
            return f"~/.cache/tos/{self.version}/platform-tools"
        return str(self.rust_bin)


def home_dir() -> Path:
    """Get the user's home directory (HOME, then USERPROFILE)."""
    home = os.environ.get("HOME") or os.environ.get("USERPROFILE")
    if home:
        return Path(home)
    return Path.home()


def cache_dir() -> Path:
    """Get the TOS tools cache directory (~/.cache/tos/ by default)."""
    cache_env = os.environ.get("TAKO_CACHE_DIR")
    if cache_env:
        return Path(cache_env)
    return home_dir() / ".cache" / "tos"


def platform_tools_path(version: str, cache_root: Optional[Path] = None) -> Path:
    """<cache>/<version>/platform-tools/"""
    root = cache_root if cache_root is not None else cache_dir()
    return root / version / "platform-tools"


def rust_bin_path(version: str, cache_root: Optional[Path] = None) -> Path:
    """<cache>/<version>/platform-tools/rust/bin/"""
    return platform_tools_path(version, cache_root) / "rust" / "bin"


def llvm_bin_path(version: str, cache_root: Optional[Path] = None) -> Path:
    """<cache>/<version>/platform-tools/llvm/bin/"""
    return platform_tools_path(version, cache_root) / "llvm" / "bin"


def version_sort_key(version: str) -> Tuple[Tuple[int, ...], str]:
    """Sort key that orders "v1.52" after "v1.9" and "v1.0"."""
    numbers = tuple(int(part) for part in re.findall(r"\d+", version))
    return numbers, version


def find_installed_versions(cache_root: Optional[Path] = None) -> List[str]:
    """List installed platform-tools versions, newest first.

    A version counts as installed when <cache>/<version>/platform-tools/
    is a directory.
    """
    root = cache_root if cache_root is not None else cache_dir()
    try:
        entries = list(root.iterdir())
    except OSError:
        return []

    versions = [
        entry.name for entry in entries if (entry / "platform-tools").is_dir()
    ]
    return sorted(versions, key=version_sort_key, reverse=True)


def is_installed(version: str, cache_root: Optional[Path] = None) -> bool:
    """Check if platform-tools is installed for a specific version."""
    rust_bin = rust_bin_path(version, cache_root)
    return (rust_bin / f"rustc{EXE_SUFFIX}").exists() and (
        rust_bin / f"cargo{EXE_SUFFIX}"
    ).exists()


class ToolchainRepository(ABC):
    """Source of platform-tools installations."""

    @abstractmethod
    def locate(self, version: Optional[str] = None) -> Optional[PlatformTools]:
        """Find a toolchain, preferring version when given.

        Returns:
            PlatformTools, or None when nothing usable is installed
        """


class FilesystemToolchainRepository(ToolchainRepository):
    """Searches the versioned cache and the legacy install locations on disk."""

    def __init__(
        self,
        home: Optional[Path] = None,
        cache_root: Optional[Path] = None,
        system_root: Path = SYSTEM_PLATFORM_TOOLS,
    ):
        """Initialize repository.

        Args:
            home: Home directory for legacy locations (default: home_dir())
            cache_root: Versioned cache root (default: cache_dir())
            system_root: System-wide platform-tools directory, searched last
        """
        self.home = home if home is not None else home_dir()
        self.cache_root = cache_root if cache_root is not None else cache_dir()
        self.system_root = Path(system_root)

    def legacy_candidates(self) -> List[Tuple[Path, Path]]:
        """(rust_bin, llvm_bin) pairs of unversioned installs, in search order."""
        roots = [
            self.home / "tos-network" / "platform-tools",
            self.home / "tos-network" / "platform-tools" / "out",
            self.home / ".tos" / "platform-tools",
            self.system_root,
        ]
        return [(root / "rust" / "bin", root / "llvm" / "bin") for root in roots]

    def _from_cache(self, version: str) -> Optional[PlatformTools]:
        rust_bin = rust_bin_path(version, self.cache_root)
        if not (rust_bin / f"rustc{EXE_SUFFIX}").exists():
            return None
        return PlatformTools(
            version=version,
            rust_bin=rust_bin,
            llvm_bin=llvm_bin_path(version, self.cache_root),
            source=ToolchainSource.VERSIONED_CACHE,
        )

    def locate(self, version: Optional[str] = None) -> Optional[PlatformTools]:
        if version:
            tools = self._from_cache(version)
            if tools:
                logger.debug(f"Using requested platform-tools {version}")
                return tools
            logger.debug(f"Platform-tools {version} not installed in {self.cache_root}")

        for installed in find_installed_versions(self.cache_root):
            tools = self._from_cache(installed)
            if tools:
                logger.debug(f"Using installed platform-tools {installed}")
                return tools

        for rust_bin, llvm_bin in self.legacy_candidates():
            if (rust_bin / f"rustc{EXE_SUFFIX}").exists():
                logger.debug(f"Using legacy platform-tools at {rust_bin}")
                return PlatformTools(
                    version="unknown",
                    rust_bin=rust_bin,
                    llvm_bin=llvm_bin,
                    source=ToolchainSource.LEGACY,
                )

        logger.debug("No platform-tools installation found")
        return None


def find_platform_tools(
    version: Optional[str] = None,
    repository: Optional[ToolchainRepository] = None,
) -> Optional[PlatformTools]:
    """Find the best available platform-tools installation.

    Args:
        version: Preferred version (e.g. DEFAULT_PLATFORM_TOOLS_VERSION)
        repository: Where to look (default: the real filesystem)

    Returns:
        PlatformTools, or None to use the system toolchain
    """
    if repository is None:
        repository = FilesystemToolchainRepository()
    return repository.locate(version)


def expected_locations() -> List[str]:
    """Locations listed in the 'toolchain not found' warning."""
    return [
        "~/.cache/tos/<version>/platform-tools/rust/bin/",
        "~/tos-network/platform-tools/rust/bin/",
        "~/.tos/platform-tools/rust/bin/",
    ]
