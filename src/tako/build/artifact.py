"""Contract artifact lookup.

cargo writes the contract library to a target directory that depends on
whether the crate is standalone or a workspace member, so several
locations are searched (relative to the project directory):

    1. target/<target>/<profile>/        cross-compiled standalone crate
    2. target/<profile>/                 native build
    3. ../target/<target>/<profile>/     workspace member
    4. ../../target/<target>/<profile>/  nested workspace member
"""

import logging
from pathlib import Path
from typing import List, Optional

from tako.build.arch import BASE_TARGET, BuildProfile
from tako.config import get_package_name
from tako.errors import BuildFailedError

logger = logging.getLogger(__name__)

LIBRARY_SUFFIXES = (".so", ".dylib", ".dll")


def candidate_dirs(profile: BuildProfile, target: str) -> List[Path]:
    """Output directories to search, relative to the project, in order."""
    profile_dir = profile.dir_name
    return [
        Path("target") / target / profile_dir,
        Path("target") / profile_dir,
        Path("..") / "target" / target / profile_dir,
        Path("..") / ".." / "target" / target / profile_dir,
    ]


def find_contract_binary(
    profile: BuildProfile, target: str, project_dir: Optional[Path] = None
) -> Path:
    """Find the contract binary produced for a target.

    The library named after the Cargo.toml package wins; otherwise the
    first .so/.dylib/.dll found outside a deps/ directory is used.

    Args:
        profile: Build profile that was built
        target: Target triple (e.g. "tbpfv3-tos-tos")
        project_dir: Project directory (default: current directory)

    Returns:
        Path to the contract binary

    Raises:
        BuildFailedError: If no binary is found
    """
    base = Path(project_dir) if project_dir is not None else Path.cwd()
    candidates = candidate_dirs(profile, target)

    package_name = get_package_name(base)
    if package_name:
        for candidate in candidates:
            specific = base / candidate / f"{package_name}.so"
            logger.debug(f"Probing {specific}")
            if specific.exists():
                return specific

    for candidate in candidates:
        directory = base / candidate
        try:
            entries = sorted(directory.iterdir())
        except OSError:
            continue

        for entry in entries:
            if entry.suffix not in LIBRARY_SUFFIXES or not entry.is_file():
                continue
            # deps/ holds intermediate outputs, not the final contract
            if "deps" in (candidate / entry.name).parts:
                continue
            logger.debug(f"Found contract binary {entry}")
            return entry

    raise BuildFailedError(
        "Contract binary (.so/.dylib/.dll) not found in "
        + f"target/{target}/{profile.dir_name}"
    )


def find_default_contract_binary(
    profile: BuildProfile = BuildProfile.DEBUG, project_dir: Optional[Path] = None
) -> Path:
    """Find the contract binary built for the base tbpf-tos-tos target."""
    return find_contract_binary(profile, BASE_TARGET, project_dir)
