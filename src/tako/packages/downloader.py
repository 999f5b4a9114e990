"""Archive downloader with progress tracking and checksum verification.

Used to fetch platform-tools release archives and unpack them into the
toolchain cache.
"""

import hashlib
import logging
import tarfile
import zipfile
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import requests
from tqdm import tqdm

logger = logging.getLogger(__name__)


class DownloadError(Exception):
    """Raised when download fails."""

    pass


class ChecksumError(Exception):
    """Raised when checksum verification fails."""

    pass


class ExtractionError(Exception):
    """Raised when archive extraction fails."""

    pass


class PackageDownloader:
    """Downloads and extracts archives with progress tracking."""

    def __init__(self, chunk_size: int = 8192, timeout: int = 30):
        """Initialize downloader.

        Args:
            chunk_size: Size of chunks for downloading and hashing
            timeout: Connect/read timeout for HTTP requests in seconds
        """
        self.chunk_size = chunk_size
        self.timeout = timeout

    def verify_checksum(self, path: Path, checksum: str, source: Optional[str] = None) -> None:
        """Check a file against an expected SHA256 digest.

        Raises:
            ChecksumError: If the digest does not match
        """
        digest = hashlib.sha256()
        with open(path, "rb") as f:
            for block in iter(lambda: f.read(self.chunk_size), b""):
                digest.update(block)

        actual = digest.hexdigest()
        if actual != checksum.strip().lower():
            raise ChecksumError(
                f"Checksum mismatch for {source or Path(path).name}\n"
                f"Expected: {checksum}\n"
                f"Got: {actual}"
            )

    def download(
        self,
        url: str,
        dest_path: Path,
        checksum: Optional[str] = None,
        show_progress: bool = True,
    ) -> Path:
        """Download a file from a URL.

        The body is streamed to <dest_path>.tmp and renamed into place only
        once it is complete and, when `checksum` is given, matches it.

        Raises:
            DownloadError: If the request fails
            ChecksumError: If the downloaded file does not match `checksum`
        """
        dest_path = Path(dest_path)
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        partial = dest_path.with_name(dest_path.name + ".tmp")

        try:
            try:
                response = requests.get(url, stream=True, timeout=self.timeout)
                response.raise_for_status()
                self._stream_to(response, partial, url, show_progress)
            except requests.RequestException as e:
                raise DownloadError(f"Failed to download {url}: {e}")

            if checksum:
                self.verify_checksum(partial, checksum, source=url)

            partial.replace(dest_path)
        finally:
            partial.unlink(missing_ok=True)

        logger.debug(f"Downloaded {url} to {dest_path}")
        return dest_path

    def _stream_to(self, response, path: Path, url: str, show_progress: bool) -> None:
        total = int(response.headers.get("content-length", 0))
        progress = None
        if show_progress and total > 0:
            progress = tqdm(
                total=total,
                unit="B",
                unit_scale=True,
                unit_divisor=1024,
                desc=f"Downloading {Path(urlparse(url).path).name}",
            )

        try:
            with open(path, "wb") as f:
                for chunk in response.iter_content(chunk_size=self.chunk_size):
                    if not chunk:
                        continue
                    f.write(chunk)
                    if progress:
                        progress.update(len(chunk))
        finally:
            if progress:
                progress.close()

    def extract_archive(
        self, archive_path: Path, dest_dir: Path, show_progress: bool = True
    ) -> Path:
        """Extract an archive file.

        Supports .tar.gz, .tar.bz2, .tar.xz, and .zip formats.

        Args:
            archive_path: Path to the archive file
            dest_dir: Destination directory for extraction
            show_progress: Whether to show progress information

        Returns:
            Path to the extracted directory

        Raises:
            ExtractionError: If extraction fails
        """
        archive_path = Path(archive_path)
        dest_dir = Path(dest_dir)

        if not archive_path.exists():
            raise ExtractionError(f"Archive not found: {archive_path}")

        dest_dir.mkdir(parents=True, exist_ok=True)

        try:
            if show_progress:
                print(f"Extracting {archive_path.name}...")

            if archive_path.suffix == ".zip":
                with zipfile.ZipFile(archive_path, "r") as zip_file:
                    zip_file.extractall(dest_dir)
            elif archive_path.name.endswith((".tar.gz", ".tar.bz2", ".tar.xz")):
                with tarfile.open(archive_path, "r:*") as tar:
                    tar.extractall(dest_dir, filter="tar")
            else:
                raise ExtractionError(
                    f"Unsupported archive format: {archive_path.suffix}"
                )

            return dest_dir

        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(f"Failed to extract {archive_path}: {e}")
