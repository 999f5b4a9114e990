"""Configuration parsing for tako projects."""

from .project_config import (
    CONFIG_FILE,
    MANIFEST_FILE,
    BuildConfig,
    ContractConfig,
    PackageConfig,
    TakoConfig,
    get_package_name,
)

__all__ = [
    "CONFIG_FILE",
    "MANIFEST_FILE",
    "TakoConfig",
    "PackageConfig",
    "ContractConfig",
    "BuildConfig",
    "get_package_name",
]
