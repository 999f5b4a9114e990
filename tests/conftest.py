"""Shared fixtures for tako unit tests."""

import struct
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

import pytest

from tako.build.process_runner import ProcessResult, ProcessRunner
from tako.packages.toolchain import (
    PlatformTools,
    ToolchainRepository,
    ToolchainSource,
)


class FakeRunner(ProcessRunner):
    """ProcessRunner that records calls and replays scripted outcomes.

    Each outcome is either a ProcessResult or an exception to raise.
    Once the script runs out, every call succeeds.
    """

    def __init__(self, outcomes: Optional[List[Union[ProcessResult, Exception]]] = None):
        self.outcomes = list(outcomes or [])
        self.calls: List[Dict] = []

    def run(self, command, env=None, cwd=None, echo=True):
        self.calls.append({"command": list(command), "env": env, "cwd": cwd, "echo": echo})
        if not self.outcomes:
            return ProcessResult(returncode=0)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    @property
    def commands(self) -> List[List[str]]:
        return [call["command"] for call in self.calls]


class StaticRepository(ToolchainRepository):
    """Toolchain repository that always returns the same answer."""

    def __init__(self, tools: Optional[PlatformTools] = None):
        self.tools = tools
        self.requested: List[Optional[str]] = []

    def locate(self, version=None):
        self.requested.append(version)
        return self.tools


def build_elf(
    e_flags: int = 0x3,
    size: int = 64,
    elf_class: int = 2,
    magic: bytes = b"\x7fELF",
) -> bytes:
    """Minimal little-endian ELF64 header padded to size."""
    data = bytearray(max(size, 64))
    data[0:4] = magic
    data[4] = elf_class
    data[5] = 1  # ELFDATA2LSB
    data[6] = 1  # EV_CURRENT
    struct.pack_into("<I", data, 48, e_flags)
    return bytes(data[:size])


@pytest.fixture
def fake_runner() -> Callable[..., FakeRunner]:
    """Factory for FakeRunner instances."""
    return FakeRunner


@pytest.fixture
def static_repository() -> Callable[..., StaticRepository]:
    """Factory for StaticRepository instances."""
    return StaticRepository


@pytest.fixture
def no_toolchain() -> StaticRepository:
    """Repository with nothing installed."""
    return StaticRepository(None)


@pytest.fixture
def make_elf(tmp_path) -> Callable[..., Path]:
    """Write a synthetic ELF64 contract and return its path."""

    def _make(name: str = "contract.so", **kwargs) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(build_elf(**kwargs))
        return path

    return _make


@pytest.fixture
def make_platform_tools(tmp_path) -> Callable[..., PlatformTools]:
    """Create a fake platform-tools tree and return its PlatformTools."""

    def _make(
        version: str = "v1.52",
        with_cargo: bool = True,
        with_rustc: bool = True,
        with_llvm: bool = True,
    ) -> PlatformTools:
        root = tmp_path / "tools" / version / "platform-tools"
        tools = PlatformTools(
            version=version,
            rust_bin=root / "rust" / "bin",
            llvm_bin=root / "llvm" / "bin",
            source=ToolchainSource.VERSIONED_CACHE,
        )
        tools.rust_bin.mkdir(parents=True, exist_ok=True)
        if with_rustc:
            tools.rustc.write_text("")
        if with_cargo:
            tools.cargo.write_text("")
        if with_llvm:
            tools.llvm_bin.mkdir(parents=True, exist_ok=True)
            tools.llvm_readelf.write_text("")
        return tools

    return _make
