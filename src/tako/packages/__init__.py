"""Toolchain management for tako.

This module locates, downloads and installs the TOS platform-tools
toolchain used to build contracts.
"""

from .downloader import ChecksumError, DownloadError, ExtractionError, PackageDownloader
from .installer import PlatformToolsInstaller, get_download_filename, get_download_url
from .toolchain import (
    DEFAULT_PLATFORM_TOOLS_VERSION,
    DEFAULT_RUST_VERSION,
    FilesystemToolchainRepository,
    PlatformTools,
    ToolchainError,
    ToolchainRepository,
    ToolchainSource,
    cache_dir,
    find_installed_versions,
    find_platform_tools,
    home_dir,
    is_installed,
)

__all__ = [
    "DEFAULT_PLATFORM_TOOLS_VERSION",
    "DEFAULT_RUST_VERSION",
    "PlatformTools",
    "ToolchainSource",
    "ToolchainError",
    "ToolchainRepository",
    "FilesystemToolchainRepository",
    "find_platform_tools",
    "find_installed_versions",
    "is_installed",
    "home_dir",
    "cache_dir",
    "PlatformToolsInstaller",
    "get_download_filename",
    "get_download_url",
    "PackageDownloader",
    "DownloadError",
    "ChecksumError",
    "ExtractionError",
]
