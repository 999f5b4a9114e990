"""Contract build invocation.

This module drives `cargo build` for a TBPF target:

    cargo build [--release] --target <triple> -Zbuild-std=core,alloc

TBPF targets ship no prebuilt standard library, so core and alloc are
always rebuilt from source. When TOS platform-tools are installed their
rustc (and cargo, when present) and LLVM binutils are handed to cargo
through environment variables set for the child process only.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from tako.build.arch import ArchitectureVersion, BuildProfile, target_triple
from tako.build.artifact import find_contract_binary
from tako.build.process_runner import ProcessRunner, SubprocessRunner
from tako.cli_utils import ErrorFormatter
from tako.errors import BuildFailedError
from tako.packages.toolchain import (
    DEFAULT_PLATFORM_TOOLS_VERSION,
    PlatformTools,
    ToolchainRepository,
    expected_locations,
    find_platform_tools,
)

logger = logging.getLogger(__name__)

BUILD_STD_FLAG = "-Zbuild-std=core,alloc"
SYSTEM_CARGO = "cargo"


@dataclass
class BuildInvocation:
    """Fully resolved cargo command for one build."""

    command: List[str]
    env_overrides: Dict[str, str]
    target: str
    toolchain: Optional[PlatformTools]


def select_cargo_and_rustc(
    tools: Optional[PlatformTools],
) -> Tuple[str, Optional[Path]]:
    """Pick the cargo to run and the rustc to hand it via RUSTC.

    A toolchain without cargo still contributes its rustc, driven by the
    system cargo.
    """
    if tools is None:
        return SYSTEM_CARGO, None
    if tools.cargo.exists():
        return str(tools.cargo), tools.rustc
    if tools.rustc.exists():
        return SYSTEM_CARGO, tools.rustc
    return SYSTEM_CARGO, None


class ContractBuilder:
    """Builds a contract crate for a TBPF target."""

    def __init__(
        self,
        project_dir: Optional[Path] = None,
        runner: Optional[ProcessRunner] = None,
        repository: Optional[ToolchainRepository] = None,
    ):
        """Initialize builder.

        Args:
            project_dir: Contract project directory (default: current directory)
            runner: Process runner used to spawn cargo
            repository: Where to look for platform-tools (default: filesystem)
        """
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self.runner = runner if runner is not None else SubprocessRunner()
        self.repository = repository

    def prepare(
        self,
        profile: BuildProfile,
        arch: Union[ArchitectureVersion, str],
        target: Optional[str] = None,
    ) -> BuildInvocation:
        """Resolve the target, toolchain, command line and environment."""
        resolved_target = target or target_triple(arch)

        tools = find_platform_tools(DEFAULT_PLATFORM_TOOLS_VERSION, self.repository)
        cargo, rustc = select_cargo_and_rustc(tools)

        command = [cargo, "build"]
        command.extend(profile.cargo_flags)
        command.extend(["--target", resolved_target, BUILD_STD_FLAG])

        env_overrides: Dict[str, str] = {}
        if rustc is not None:
            env_overrides["RUSTC"] = str(rustc)

        if tools is not None and tools.llvm_bin.exists():
            env_overrides["CC"] = str(tools.clang)
            env_overrides["AR"] = str(tools.llvm_ar)
            env_overrides["OBJDUMP"] = str(tools.llvm_objdump)
            env_overrides["OBJCOPY"] = str(tools.llvm_objcopy)

        logger.debug(f"Build command: {command}")
        logger.debug(f"Environment overrides: {env_overrides}")
        return BuildInvocation(
            command=command,
            env_overrides=env_overrides,
            target=resolved_target,
            toolchain=tools,
        )

    def build(
        self,
        profile: BuildProfile,
        arch: Union[ArchitectureVersion, str],
        target: Optional[str] = None,
    ) -> Path:
        """Build the contract and return the path to its binary.

        Args:
            profile: Debug or release
            arch: TBPF architecture version
            target: Target triple override (derived from arch if None)

        Returns:
            Path to the built contract binary

        Raises:
            BuildFailedError: If cargo cannot be run, exits nonzero, or
                produces no binary
        """
        invocation = self.prepare(profile, arch, target)
        arch_name = arch.value if isinstance(arch, ArchitectureVersion) else arch

        print(f"  Arch: {arch_name}")
        print(f"  Target: {invocation.target}")
        print(f"  Profile: {profile.dir_name}")

        tools = invocation.toolchain
        if tools is not None:
            print(f"  Toolchain: {tools.display_path()} ({tools.version})")
        else:
            print("  Toolchain: system (TOS platform-tools not found)")
            _warn_toolchain_missing()

        print(f"Running: {' '.join(['cargo'] + invocation.command[1:])}")

        env = dict(os.environ)
        env.update(invocation.env_overrides)

        try:
            result = self.runner.run(
                invocation.command, env=env, cwd=self.project_dir, echo=True
            )
        except OSError as e:
            raise BuildFailedError(f"Failed to execute cargo: {e}")

        if not result.success:
            raise BuildFailedError(
                f"cargo exited with code {result.returncode}:\n{result.stderr}"
            )

        binary_path = find_contract_binary(profile, invocation.target, self.project_dir)
        print("✓ Build successful")
        return binary_path


def _warn_toolchain_missing() -> None:
    lines = [
        "TOS platform-tools not found. TBPF targets may not be available.",
        "Expected locations:",
    ]
    lines.extend(
        f"  {index}. {location}"
        for index, location in enumerate(expected_locations(), start=1)
    )
    ErrorFormatter.print_warning("\n".join(lines))
