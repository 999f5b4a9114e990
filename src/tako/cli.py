"""
Command-line interface for tako.

This module provides the `tako` CLI tool for developing TAKO smart contracts.
"""

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, TypeVar

from tako import __version__
from tako.build import (
    DEFAULT_ARCH,
    ArchitectureVersion,
    BuildProfile,
    ContractBuilder,
    ContractSummaryPrinter,
    ContractTestRunner,
    clean_build_artifacts,
    dump_elf,
    file_size,
    find_default_contract_binary,
    read_contract_info,
    verify_contract,
)
from tako.cli_utils import ErrorFormatter, PathValidator, setup_logging
from tako.config import TakoConfig
from tako.errors import TakoError
from tako.packages import (
    DEFAULT_PLATFORM_TOOLS_VERSION,
    PlatformToolsInstaller,
    ToolchainError,
    find_platform_tools,
)
from tako.project import DEFAULT_TEMPLATE, ProjectScaffolder, list_templates


@dataclass
class NewArgs:
    """Arguments for the new command."""

    name: str
    path: Optional[Path] = None
    template: str = DEFAULT_TEMPLATE
    verbose: bool = False


@dataclass
class InitArgs:
    """Arguments for the init command."""

    project_dir: Path
    template: str = DEFAULT_TEMPLATE
    verbose: bool = False


@dataclass
class BuildArgs:
    """Arguments for the build command."""

    project_dir: Path
    release: bool = False
    arch: str = DEFAULT_ARCH.value
    target: Optional[str] = None
    verify: bool = False
    dump: bool = False
    verbose: bool = False


@dataclass
class ContractTestArgs:
    """Arguments for the test command."""

    project_dir: Path
    filter: Optional[str] = None
    release: bool = False
    verbose: bool = False


@dataclass
class CleanArgs:
    """Arguments for the clean command."""

    project_dir: Path
    verbose: bool = False


@dataclass
class InfoArgs:
    """Arguments for the info command."""

    project_dir: Path
    contract: Optional[Path] = None
    verbose: bool = False


@dataclass
class ToolchainArgs:
    """Arguments for the toolchain subcommands."""

    action: str
    version: Optional[str] = None
    archive: Optional[Path] = None
    force: bool = False
    sha256: Optional[str] = None
    verbose: bool = False


def new_command(args: NewArgs) -> None:
    """Create a new TAKO smart contract project.

    Examples:
        tako new counter                    # ./counter from the default template
        tako new token --template erc20     # ERC-20 token project
        tako new nft --path ~/contracts     # ~/contracts/nft
    """
    ErrorFormatter.print_step("Creating", "TAKO contract project...")
    ProjectScaffolder().create_new_project(args.name, args.path, args.template)
    print()
    ErrorFormatter.print_success(f"Created contract project: {args.name}")
    print()
    print("Next steps:")
    print(f"  cd {args.name}")
    print("  tako build")
    print("  tako test")


def init_command(args: InitArgs) -> None:
    """Initialize TAKO in an existing Rust project."""
    ErrorFormatter.print_step("Initializing", "TAKO in current project...")
    ProjectScaffolder().init_current_project(args.template, args.project_dir)
    ErrorFormatter.print_success("TAKO contract initialized")
    print()
    print("Next steps:")
    print("  1. Add TAKO dependencies to Cargo.toml:")
    print("     [dependencies]")
    print('     tako-sdk = { git = "https://github.com/tos-network/tako" }')
    print()
    print("  2. Set crate type to cdylib:")
    print("     [lib]")
    print('     crate-type = ["cdylib"]')
    print()
    print("  3. Run: tako build")


def build_command(args: BuildArgs) -> None:
    """Build the TAKO smart contract.

    Examples:
        tako build                          # Debug build for TBPF v3
        tako build --release --arch v2      # Release build for TBPF v2
        tako build --release --verify       # Build and check the ELF header
        tako build --dump                   # Build and print readelf output
    """
    ErrorFormatter.print_step("Building", "TAKO contract...")

    target = args.target
    if target is None:
        config = TakoConfig.load_from_dir(args.project_dir)
        if config is not None:
            target = config.build.target

    arch = ArchitectureVersion(args.arch)
    builder = ContractBuilder(project_dir=args.project_dir)
    output = builder.build(BuildProfile.from_release(args.release), arch, target)

    print()
    ErrorFormatter.print_success("Built contract:")
    print(f"  Binary: {output}")
    print(f"  Size: {file_size(output)} bytes")
    print(f"  Arch: {arch.value}")

    if args.verify:
        print()
        ErrorFormatter.print_step("Verifying", "contract...", ErrorFormatter.CYAN)
        report = verify_contract(output, arch)
        for warning in report.warnings:
            ErrorFormatter.print_warning(warning)
        ContractSummaryPrinter.print_verification(report)

    if args.dump:
        print()
        ErrorFormatter.print_step("Dumping", "ELF information...", ErrorFormatter.CYAN)
        dump_elf(output)


def contract_test_command(args: ContractTestArgs) -> None:
    """Run the contract tests."""
    ErrorFormatter.print_step("Running", "tests...")
    ContractTestRunner(project_dir=args.project_dir).run(args.filter, args.release)


def clean_command(args: CleanArgs) -> None:
    """Remove the target/ directory."""
    ErrorFormatter.print_step("Cleaning", "build artifacts...")
    clean_build_artifacts(args.project_dir)
    ErrorFormatter.print_success("Build artifacts removed")


def info_command(args: InfoArgs) -> None:
    """Display contract information."""
    ErrorFormatter.print_step("Reading", "contract information...", ErrorFormatter.CYAN)
    path = args.contract
    if path is None:
        path = find_default_contract_binary(BuildProfile.DEBUG, args.project_dir)
    ContractSummaryPrinter.print_info(read_contract_info(path))


def toolchain_command(args: ToolchainArgs) -> None:
    """Install or show TOS platform-tools."""
    if args.action == "install":
        version = args.version or DEFAULT_PLATFORM_TOOLS_VERSION
        installer = PlatformToolsInstaller(show_progress=True)
        tools_dir = installer.install(version, args.archive, args.force, args.sha256)
        ErrorFormatter.print_success(f"Platform-tools {version} installed at {tools_dir}")
        return

    tools = find_platform_tools(args.version or DEFAULT_PLATFORM_TOOLS_VERSION)
    if tools is None:
        ErrorFormatter.print_warning(
            "TOS platform-tools not found. Run 'tako toolchain install' to install them."
        )
        return

    print("Platform-tools Information:")
    print(f"  Version: {tools.version}")
    print(f"  Location: {tools.display_path()}")
    print(f"  Source: {tools.source.value}")
    print(f"  Rustc: {tools.rustc}")
    print(f"  Cargo: {tools.cargo}")
    if tools.llvm_bin.exists():
        print(f"  LLVM: {tools.llvm_bin}")


A = TypeVar("A")


def run_command(command: Callable[[A], None], args: A, verbose: bool = False) -> None:
    """Run a command, turning failures into messages and exit codes.

    Raises:
        SystemExit: Always; 0 on success, 1 on failure, 130 on interrupt
    """
    try:
        command(args)
    except (TakoError, ToolchainError) as e:
        ErrorFormatter.print_error(str(e))
        sys.exit(1)
    except FileNotFoundError as e:
        ErrorFormatter.handle_file_not_found(e)
    except PermissionError as e:
        ErrorFormatter.handle_permission_error(e)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, verbose)
    sys.exit(0)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tako",
        description="TAKO smart contract development tool",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"tako {__version__}",
    )
    parser.add_argument(
        "-C",
        "--project-dir",
        type=Path,
        default=None,
        help="Contract project directory (default: current directory)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")
    templates = list_templates()

    # New command
    new_parser = subparsers.add_parser(
        "new",
        help="Create a new TAKO smart contract project",
    )
    new_parser.add_argument("name", help="Name of the project")
    new_parser.add_argument(
        "--path",
        type=Path,
        default=None,
        help="Where to create the project (default: current directory)",
    )
    new_parser.add_argument(
        "--template",
        default=DEFAULT_TEMPLATE,
        choices=templates,
        help=f"Project template (default: {DEFAULT_TEMPLATE})",
    )

    # Init command
    init_parser = subparsers.add_parser(
        "init",
        help="Initialize TAKO in an existing Rust project",
    )
    init_parser.add_argument(
        "--template",
        default=DEFAULT_TEMPLATE,
        choices=templates,
        help=f"Project template (default: {DEFAULT_TEMPLATE})",
    )

    # Build command
    build_parser_ = subparsers.add_parser(
        "build",
        help="Build the TAKO smart contract",
    )
    build_parser_.add_argument(
        "--release",
        action="store_true",
        help="Build in release mode",
    )
    build_parser_.add_argument(
        "--arch",
        default=DEFAULT_ARCH.value,
        choices=ArchitectureVersion.names(),
        help=f"TBPF architecture version (default: {DEFAULT_ARCH.value})",
    )
    build_parser_.add_argument(
        "--target",
        default=None,
        help="Target to build for (default: derived from --arch)",
    )
    build_parser_.add_argument(
        "--verify",
        action="store_true",
        help="Verify the built contract",
    )
    build_parser_.add_argument(
        "--dump",
        action="store_true",
        help="Dump ELF information after build",
    )

    # Test command
    test_parser = subparsers.add_parser(
        "test",
        help="Run tests for the smart contract",
    )
    test_parser.add_argument(
        "filter",
        nargs="?",
        default=None,
        help="Run only tests matching this filter",
    )
    test_parser.add_argument(
        "--release",
        action="store_true",
        help="Run tests in release mode",
    )

    # Clean command
    subparsers.add_parser(
        "clean",
        help="Clean build artifacts",
    )

    # Info command
    info_parser = subparsers.add_parser(
        "info",
        help="Display contract information",
    )
    info_parser.add_argument(
        "--contract",
        type=Path,
        default=None,
        help="Path to the contract binary (default: latest debug build)",
    )

    # Toolchain command
    toolchain_parser = subparsers.add_parser(
        "toolchain",
        help="Manage TOS platform-tools",
    )
    toolchain_sub = toolchain_parser.add_subparsers(dest="action", help="Action")
    install_parser = toolchain_sub.add_parser(
        "install",
        help="Install platform-tools into ~/.cache/tos",
    )
    install_parser.add_argument(
        "--version",
        dest="tools_version",
        default=None,
        help=f"Platform-tools version (default: {DEFAULT_PLATFORM_TOOLS_VERSION})",
    )
    install_parser.add_argument(
        "--archive",
        type=Path,
        default=None,
        help="Install from a local .tar.bz2 archive instead of downloading",
    )
    install_parser.add_argument(
        "--force",
        action="store_true",
        help="Reinstall even if already installed",
    )
    install_parser.add_argument(
        "--sha256",
        default=None,
        metavar="DIGEST",
        help="Expected SHA256 of the platform-tools archive",
    )
    info_tools_parser = toolchain_sub.add_parser(
        "info",
        help="Show the platform-tools installation in use",
    )
    info_tools_parser.add_argument(
        "--version",
        dest="tools_version",
        default=None,
        help="Preferred platform-tools version",
    )

    return parser


def main() -> None:
    """tako - TAKO smart contract development tool."""
    parser = build_parser()
    parsed_args = parser.parse_args()

    # If no command specified, show help
    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    verbose = parsed_args.verbose
    setup_logging(verbose)

    project_dir = parsed_args.project_dir or Path.cwd()
    if parsed_args.project_dir is not None:
        PathValidator.validate_project_dir(project_dir)

    if parsed_args.command == "new":
        run_command(
            new_command,
            NewArgs(
                name=parsed_args.name,
                path=parsed_args.path,
                template=parsed_args.template,
                verbose=verbose,
            ),
            verbose,
        )
    elif parsed_args.command == "init":
        run_command(
            init_command,
            InitArgs(project_dir=project_dir, template=parsed_args.template, verbose=verbose),
            verbose,
        )
    elif parsed_args.command == "build":
        run_command(
            build_command,
            BuildArgs(
                project_dir=project_dir,
                release=parsed_args.release,
                arch=parsed_args.arch,
                target=parsed_args.target,
                verify=parsed_args.verify,
                dump=parsed_args.dump,
                verbose=verbose,
            ),
            verbose,
        )
    elif parsed_args.command == "test":
        run_command(
            contract_test_command,
            ContractTestArgs(
                project_dir=project_dir,
                filter=parsed_args.filter,
                release=parsed_args.release,
                verbose=verbose,
            ),
            verbose,
        )
    elif parsed_args.command == "clean":
        run_command(clean_command, CleanArgs(project_dir=project_dir, verbose=verbose), verbose)
    elif parsed_args.command == "info":
        run_command(
            info_command,
            InfoArgs(project_dir=project_dir, contract=parsed_args.contract, verbose=verbose),
            verbose,
        )
    elif parsed_args.command == "toolchain":
        if not parsed_args.action:
            parser.parse_args(["toolchain", "--help"])
        run_command(
            toolchain_command,
            ToolchainArgs(
                action=parsed_args.action,
                version=parsed_args.tools_version,
                archive=getattr(parsed_args, "archive", None),
                force=getattr(parsed_args, "force", False),
                sha256=getattr(parsed_args, "sha256", None),
                verbose=verbose,
            ),
            verbose,
        )


if __name__ == "__main__":
    main()
