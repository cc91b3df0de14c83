"""Error types raised while bootstrapping and launching helm.

Every failure the wrapper can hit maps to one of these classes. The CLI
catches ``WrapperError`` and turns it into a non-zero exit.
"""

from __future__ import annotations

from typing import Optional


class WrapperError(Exception):
    """Base error for all helm-wrapper failures.

    Attributes:
        step: Name of the bootstrap step that failed.
        version: Helm version being handled, if any.
    """

    step = "bootstrap"

    def __init__(self, message: str, version: Optional[str] = None) -> None:
        super().__init__(message)
        self.version = version

    def describe(self) -> str:
        """Human readable message including the failing step."""
        return f"{self.step}: {self}"


class CacheError(WrapperError):
    """Creating, inspecting or writing the binary cache failed."""

    step = "cache"


class DownloadError(WrapperError):
    """Transport failure while fetching a helm archive."""

    step = "download"


class UnexpectedStatusError(DownloadError):
    """The download endpoint answered with a status other than 200."""

    def __init__(self, version: str, status: int, reason: str) -> None:
        status_text = f"{status} {reason}".strip()
        super().__init__(f'couldn\'t download helm {version}: "{status_text}"', version)
        self.status = status
        self.reason = reason


class ChecksumError(WrapperError):
    """Downloaded archive does not match its trusted SHA-256 digest."""

    step = "verify"


class ArchiveError(WrapperError):
    """The downloaded archive is not a readable tar stream."""

    step = "extract"


class DecompressionError(ArchiveError):
    """The downloaded archive is not a valid gzip stream."""


class EntryNotFoundError(ArchiveError):
    """The archive holds no entry at the expected platform path."""

    def __init__(self, version: str, entry: str) -> None:
        super().__init__(f"helm {version} archive has no entry {entry!r}", version)
        self.entry = entry


class ClusterProbeError(WrapperError):
    """Querying the cluster for a Tiller deployment failed."""

    step = "cluster-probe"


class ServerVersionError(WrapperError):
    """Asking helm for the Tiller server version failed."""

    step = "server-version"


class LaunchError(WrapperError):
    """The resolved helm binary could not be executed."""

    step = "launch"
