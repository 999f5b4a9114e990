"""Platform-tools installation into the versioned cache.

Release archives are published as GitHub release assets:

    https://github.com/tos-network/platform-tools/releases/download/<version>/
        tos-platform-tools-<os>-<arch>.tar.bz2

and unpack to a single platform-tools/ directory, which ends up at
<cache>/<version>/platform-tools/.
"""

import logging
import platform
import shutil
import sys
import tempfile
from pathlib import Path
from typing import Optional

from .downloader import ChecksumError, DownloadError, ExtractionError, PackageDownloader
from .toolchain import (
    EXE_SUFFIX,
    ToolchainError,
    cache_dir,
    platform_tools_path,
    rust_bin_path,
)

logger = logging.getLogger(__name__)

RELEASES_URL = "https://github.com/tos-network/platform-tools/releases/download"


def get_download_filename() -> str:
    """Get the release asset name for the host platform."""
    arch = "aarch64" if platform.machine().lower() in ("aarch64", "arm64") else "x86_64"

    if sys.platform == "win32":
        return f"tos-platform-tools-windows-{arch}.tar.bz2"
    if sys.platform == "darwin":
        return f"tos-platform-tools-osx-{arch}.tar.bz2"
    return f"tos-platform-tools-linux-{arch}.tar.bz2"


def get_download_url(version: str) -> str:
    """Get the download URL of the platform-tools release for this host."""
    return f"{RELEASES_URL}/{version}/{get_download_filename()}"


class PlatformToolsInstaller:
    """Installs platform-tools releases into the toolchain cache."""

    def __init__(
        self,
        cache_root: Optional[Path] = None,
        downloader: Optional[PackageDownloader] = None,
        show_progress: bool = True,
    ):
        """Initialize installer.

        Args:
            cache_root: Versioned cache root (default: cache_dir())
            downloader: Downloader used for remote archives
            show_progress: Whether to show download/extract progress
        """
        self.cache_root = cache_root if cache_root is not None else cache_dir()
        self.downloader = downloader if downloader is not None else PackageDownloader()
        self.show_progress = show_progress

    def _rustc(self, version: str) -> Path:
        return rust_bin_path(version, self.cache_root) / f"rustc{EXE_SUFFIX}"

    def install(
        self,
        version: str,
        archive_path: Optional[Path] = None,
        force: bool = False,
        sha256: Optional[str] = None,
    ) -> Path:
        """Install a platform-tools version.

        The release is unpacked into a staging directory under
        <cache>/<version>/ and only replaces an existing tree once rustc has
        been found in it, so a failed reinstall leaves the old tree usable.

        Args:
            version: Release version (e.g. "v1.52")
            archive_path: Local archive to install instead of downloading
            force: Reinstall even if the version is already present
            sha256: Expected SHA256 of the archive, checked before extracting

        Returns:
            Path to <cache>/<version>/platform-tools/

        Raises:
            ToolchainError: If download, checksum, extraction or verification fails
        """
        target_dir = self.cache_root / version
        tools_dir = platform_tools_path(version, self.cache_root)

        if not force and self._rustc(version).exists():
            print(f"Platform-tools {version} already installed")
            return tools_dir

        target_dir.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(prefix=".staging-", dir=target_dir))

        try:
            try:
                self._unpack(version, archive_path, sha256, staging)
            except (DownloadError, ChecksumError, ExtractionError) as e:
                raise ToolchainError(f"Failed to install platform-tools {version}: {e}")

            staged_tools = staging / tools_dir.name
            if not (staged_tools / "rust" / "bin" / f"rustc{EXE_SUFFIX}").exists():
                raise ToolchainError("Installation verification failed: rustc not found")

            # Replaces a previous install or the leftovers of an interrupted one
            if tools_dir.exists():
                logger.debug(f"Replacing {tools_dir}")
                shutil.rmtree(tools_dir)
            staged_tools.replace(tools_dir)
        finally:
            shutil.rmtree(staging, ignore_errors=True)

        return tools_dir

    def _unpack(
        self,
        version: str,
        archive_path: Optional[Path],
        sha256: Optional[str],
        dest_dir: Path,
    ) -> None:
        if archive_path is not None:
            archive_path = Path(archive_path)
            print(f"Installing platform-tools {version} from {archive_path}")
            if sha256 and archive_path.is_file():
                self.downloader.verify_checksum(archive_path, sha256)
            self.downloader.extract_archive(
                archive_path, dest_dir, show_progress=self.show_progress
            )
            return

        url = get_download_url(version)
        print(f"Installing platform-tools {version} from {url}")
        with tempfile.TemporaryDirectory() as temp_dir:
            downloaded = self.downloader.download(
                url,
                Path(temp_dir) / get_download_filename(),
                checksum=sha256,
                show_progress=self.show_progress,
            )
            self.downloader.extract_archive(
                downloaded, dest_dir, show_progress=self.show_progress
            )
