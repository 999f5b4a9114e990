"""ELF header dump of a built contract via llvm-readelf / readelf."""

import logging
from pathlib import Path
from typing import List, Optional

from tako.build.process_runner import ProcessRunner, SubprocessRunner
from tako.cli_utils import ErrorFormatter
from tako.errors import BuildFailedError
from tako.packages.toolchain import ToolchainRepository, find_platform_tools

logger = logging.getLogger(__name__)

READELF_ARGS = ["-h", "-l"]


def readelf_candidates(repository: Optional[ToolchainRepository] = None) -> List[str]:
    """readelf programs to try, in order.

    The platform-tools llvm-readelf understands TBPF e_flags, so it comes
    first when installed.
    """
    candidates = []
    tools = find_platform_tools(None, repository)
    if tools is not None and tools.llvm_readelf.exists():
        candidates.append(str(tools.llvm_readelf))
    candidates.extend(["llvm-readelf", "readelf"])
    return candidates


def dump_elf(
    path: Path,
    runner: Optional[ProcessRunner] = None,
    repository: Optional[ToolchainRepository] = None,
) -> bool:
    """Print ELF header and program headers of a contract.

    The first readelf that can be spawned is used. If it runs but fails,
    a warning is printed and False is returned.

    Raises:
        BuildFailedError: If no readelf program can be run at all
    """
    runner = runner if runner is not None else SubprocessRunner()
    print(f"ELF dump for {path}")
    print()

    for program in readelf_candidates(repository):
        try:
            result = runner.run([program] + READELF_ARGS + [str(path)], echo=False)
        except OSError as e:
            logger.debug(f"Could not run {program}: {e}")
            continue

        if result.success:
            print(result.stdout)
            return True

        ErrorFormatter.print_warning(f"readelf failed: {result.stderr.strip()}")
        return False

    raise BuildFailedError("Failed to run readelf or llvm-readelf")
