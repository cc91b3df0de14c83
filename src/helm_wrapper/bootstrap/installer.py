"""Ensuring a helm version is present in the local cache."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from helm_wrapper.bootstrap.checksum import verify_archive
from helm_wrapper.bootstrap.download import ReleaseDownloader
from helm_wrapper.bootstrap.extract import extract_binary
from helm_wrapper.bootstrap.paths import WrapperPaths
from helm_wrapper.bootstrap.platform import PlatformInfo
from helm_wrapper.core.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass
class HelmInstaller:
    """Installs helm versions into the binary cache on demand.

    Handles:
    - Cache lookup (a present ``helm-{version}`` file short-circuits everything)
    - Archive download
    - Optional SHA-256 verification
    - Binary extraction
    """

    paths: WrapperPaths
    platform_info: PlatformInfo
    downloader: ReleaseDownloader
    checksums: Optional[Dict[str, str]] = None
    verify_checksum: bool = False

    def is_installed(self, version: str) -> bool:
        return self.paths.has_binary(version)

    def ensure_installed(self, version: str) -> Path:
        """Make sure ``helm-{version}`` exists in the cache.

        Returns:
            Path to the cached binary.

        Raises:
            WrapperError: If any download, verification or extraction step fails.
        """
        binary = self.paths.binary_path(version)
        if self.is_installed(version):
            LOGGER.debug(f"helm {version} found at {binary}")
            return binary

        archive = self.downloader.download(version)
        try:
            self._verify(archive, version)
        except BaseException:
            archive.unlink(missing_ok=True)
            raise

        return extract_binary(archive, self.platform_info.binary_entry, binary, version)

    def _verify(self, archive: Path, version: str) -> None:
        expected = (self.checksums or {}).get(version)
        if expected is None and self.verify_checksum:
            expected = self.downloader.fetch_published_checksum(version)
        if expected is None:
            return
        verify_archive(archive, expected, version)
