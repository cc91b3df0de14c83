"""Platform detection for helm release archives.

helm publishes one archive per Go ``GOOS``/``GOARCH`` pair, so the host
platform is normalised to those names.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass
from typing import Optional

# Operating systems helm publishes client archives for (lowercase)
SUPPORTED_OS = frozenset({"darwin", "linux", "windows"})

# Go architecture names
SUPPORTED_ARCH = frozenset({"386", "amd64", "arm", "arm64", "ppc64le", "s390x"})

_ARCH_MAP = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "arm64": "arm64",
    "aarch64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv7l": "arm",
    "armv6l": "arm",
    "ppc64le": "ppc64le",
    "s390x": "s390x",
}


def normalize_arch(machine: str) -> Optional[str]:
    """Normalize architecture string to its Go name.

    Args:
        machine: Raw architecture string from platform.machine()

    Returns:
        Normalized architecture string or None if unknown.
    """
    return _ARCH_MAP.get(machine.lower())


def detect_os() -> str:
    """Detect the current operating system.

    Returns:
        Lowercase OS name (darwin, linux, windows).

    Raises:
        ValueError: If the OS is not supported.
    """
    system = platform.system().lower()
    if system not in SUPPORTED_OS:
        raise ValueError(
            f"Unsupported operating system: {platform.system()}. "
            f"Supported: {', '.join(sorted(SUPPORTED_OS))}"
        )
    return system


def detect_arch() -> str:
    """Detect the current CPU architecture.

    Raises:
        ValueError: If the architecture is not supported.
    """
    machine = platform.machine()
    normalized = normalize_arch(machine)
    if normalized is None:
        raise ValueError(
            f"Unsupported architecture: {machine}. "
            f"Supported: {', '.join(sorted(SUPPORTED_ARCH))}"
        )
    return normalized


@dataclass(frozen=True)
class PlatformInfo:
    """Operating system and architecture of the host.

    Attributes:
        os: Operating system (darwin, linux, windows).
        arch: CPU architecture in Go naming (amd64, arm64, ...).
    """

    os: str
    arch: str

    @property
    def archive_name(self) -> str:
        """Platform suffix used in release archive names, e.g. ``linux-amd64``."""
        return f"{self.os}-{self.arch}"

    @property
    def binary_entry(self) -> str:
        """Path of the helm binary inside the release archive."""
        return f"{self.archive_name}/helm"


def get_platform_info() -> PlatformInfo:
    """Detect and return current platform information.

    Raises:
        ValueError: If the platform is not supported.
    """
    return PlatformInfo(os=detect_os(), arch=detect_arch())
