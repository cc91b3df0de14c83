"""Downloading helm release archives.

Downloads go through an SSL context built from certifi's CA bundle so they
work on hosts without a usable system certificate store.
"""

from __future__ import annotations

import ssl
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional
from urllib.error import HTTPError, URLError
from urllib.request import urlopen

import certifi

from helm_wrapper.bootstrap.paths import WrapperPaths
from helm_wrapper.bootstrap.platform import PlatformInfo
from helm_wrapper.core.errors import DownloadError, UnexpectedStatusError
from helm_wrapper.core.logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_BASE_URL = "https://get.helm.sh"

_CHUNK_SIZE = 64 * 1024


def get_ssl_context() -> ssl.SSLContext:
    """Get an SSL context that uses certifi's CA bundle."""
    return ssl.create_default_context(cafile=certifi.where())


def secure_urlopen(url: str, timeout: Optional[float] = 120.0):
    """Open a URL with proper SSL certificate verification.

    Args:
        url: The URL to open.
        timeout: Socket timeout in seconds.

    Returns:
        A file-like object for reading the response.

    Raises:
        URLError: If the URL cannot be opened.
        HTTPError: If the server answers with an error status.
        ValueError: If the URL is not HTTPS.
    """
    if not url.startswith("https://"):
        raise ValueError(f"Only HTTPS URLs are supported: {url}")

    return urlopen(url, timeout=timeout, context=get_ssl_context())  # nosec B310


def construct_archive_url(
    version: str, platform_info: PlatformInfo, base_url: str = DEFAULT_BASE_URL
) -> str:
    """Construct the download URL of a helm release archive.

    Example: https://get.helm.sh/helm-v2.16.7-linux-amd64.tar.gz
    """
    return f"{base_url.rstrip('/')}/helm-{version}-{platform_info.archive_name}.tar.gz"


@dataclass
class ReleaseDownloader:
    """Fetches helm release archives into the temporary directory.

    The archive is left in place for the extractor, which owns its removal.
    """

    paths: WrapperPaths
    platform_info: PlatformInfo
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 120.0
    opener: Callable[..., object] = field(default=secure_urlopen)

    def archive_url(self, version: str) -> str:
        return construct_archive_url(version, self.platform_info, self.base_url)

    def download(self, version: str) -> Path:
        """Download the release archive for ``version``.

        Returns:
            Path of the downloaded archive.

        Raises:
            UnexpectedStatusError: If the server does not answer 200.
            DownloadError: On any transport or local write failure, or if the
                whole transfer takes longer than ``timeout``.
        """
        url = self.archive_url(version)
        dest = self.paths.archive_path(version)
        LOGGER.info(f"Downloading helm {version} from {url}")

        # ``timeout`` bounds each socket operation; the deadline bounds the whole transfer.
        deadline = time.monotonic() + self.timeout
        try:
            with self.opener(url, timeout=self.timeout) as response:
                status = getattr(response, "status", 200)
                if status != 200:
                    raise UnexpectedStatusError(version, status, getattr(response, "reason", ""))
                self._write(response, dest, deadline, version)
        except HTTPError as e:
            raise UnexpectedStatusError(version, e.code, str(e.reason)) from e
        except URLError as e:
            raise DownloadError(f"couldn't download helm {version}: {e.reason}", version) from e
        except (OSError, ValueError) as e:
            raise DownloadError(f"couldn't download helm {version}: {e}", version) from e

        LOGGER.debug(f"Saved {url} to {dest} ({dest.stat().st_size} bytes)")
        return dest

    def fetch_published_checksum(self, version: str) -> str:
        """Fetch the SHA-256 digest helm publishes next to the archive.

        The ``.sha256sum`` file holds ``<digest>  <filename>``; only the
        digest is returned.

        Raises:
            DownloadError: If the checksum file cannot be fetched or is empty.
        """
        url = self.archive_url(version) + ".sha256sum"
        LOGGER.debug(f"Fetching published checksum from {url}")
        try:
            with self.opener(url, timeout=self.timeout) as response:
                body = response.read().decode("utf-8", errors="replace")
        except HTTPError as e:
            raise UnexpectedStatusError(version, e.code, str(e.reason)) from e
        except (URLError, OSError, ValueError) as e:
            raise DownloadError(f"couldn't fetch checksum for helm {version}: {e}", version) from e

        fields = body.split()
        if not fields:
            raise DownloadError(f"empty checksum file for helm {version}", version)
        return fields[0].lower()

    def _write(self, response, dest: Path, deadline: float, version: str) -> None:
        dest.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(dest, "wb") as f:
                while True:
                    chunk = response.read(_CHUNK_SIZE)
                    if not chunk:
                        break
                    f.write(chunk)
                    if time.monotonic() > deadline:
                        raise DownloadError(
                            f"couldn't download helm {version}: "
                            f"timed out after {self.timeout}s",
                            version,
                        )
        except BaseException:
            dest.unlink(missing_ok=True)
            raise
