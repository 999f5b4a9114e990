"""Build utilities for tako.

This module provides helpers around build output: removing the cargo
target directory and printing contract summaries.
"""

import shutil
from pathlib import Path
from typing import Optional

from .verifier import ContractInfo, VerificationReport


def clean_build_artifacts(project_dir: Optional[Path] = None) -> bool:
    """Remove the project's target/ directory.

    Returns:
        True if a target directory was removed
    """
    base = Path(project_dir) if project_dir is not None else Path.cwd()
    target_dir = base / "target"
    if not target_dir.exists():
        return False
    shutil.rmtree(target_dir)
    return True


def file_size(path: Path) -> int:
    """Size of a file in bytes."""
    return Path(path).stat().st_size


class ContractSummaryPrinter:
    """Utility class for printing contract summaries."""

    @staticmethod
    def print_verification(report: VerificationReport) -> None:
        """
        Print the result of a successful verification.

        Args:
            report: Report returned by verify_contract()
        """
        print("✓ Contract verified")
        print("  Format: ELF 64-bit")
        print(f"  e_flags: 0x{report.e_flags:x} ({report.arch_label})")
        print(f"  Size: {report.size} bytes ({report.size_kib:.2f} KB)")
        print(f"  Type: TBPF {report.arch_label} contract (ready for deployment)")

    @staticmethod
    def print_info(info: ContractInfo) -> None:
        """
        Print the output of `tako info`.

        Args:
            info: Summary returned by read_contract_info()
        """
        print("Contract Information:")
        print(f"  Path: {info.path}")
        print(f"  Size: {info.size} bytes ({info.size_kib:.2f} KB)")
        if not info.is_elf:
            print("  Format: Invalid (not ELF)")
            return

        print("  Format: ELF (valid)")
        if info.elf_class:
            print(f"  Class: {info.elf_class}")
        if info.machine:
            print(f"  Machine: {info.machine}")
        if info.elf_type:
            print(f"  Type: {info.elf_type}")
        if info.entry is not None:
            print(f"  Entry: 0x{info.entry:x}")
        if info.section_count is not None:
            print(f"  Sections: {info.section_count}")
