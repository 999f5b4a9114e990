"""Contract build system.

This module builds TBPF contracts with cargo, locates the produced
binary, verifies its ELF header and runs contract tests.
"""

from .arch import (
    BASE_TARGET,
    DEFAULT_ARCH,
    ArchitectureVersion,
    BuildProfile,
    expected_flags,
    target_triple,
)
from .artifact import find_contract_binary, find_default_contract_binary
from .build_utils import ContractSummaryPrinter, clean_build_artifacts, file_size
from .builder import BuildInvocation, ContractBuilder
from .contract_tests import ContractTestRunner
from .elf_dump import dump_elf
from .process_runner import ProcessResult, ProcessRunner, SubprocessRunner
from .verifier import ContractInfo, VerificationReport, read_contract_info, verify_contract

__all__ = [
    "BASE_TARGET",
    "DEFAULT_ARCH",
    "ArchitectureVersion",
    "BuildProfile",
    "expected_flags",
    "target_triple",
    "find_contract_binary",
    "find_default_contract_binary",
    "ContractBuilder",
    "BuildInvocation",
    "ContractTestRunner",
    "dump_elf",
    "ProcessRunner",
    "ProcessResult",
    "SubprocessRunner",
    "verify_contract",
    "read_contract_info",
    "VerificationReport",
    "ContractInfo",
    "ContractSummaryPrinter",
    "clean_build_artifacts",
    "file_size",
]
