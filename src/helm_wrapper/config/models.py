"""Configuration models for helm-wrapper."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Optional

from helm_wrapper.bootstrap.platform import PlatformInfo

DEFAULT_HELM_VERSION = "v2.16.7"
DEFAULT_DOWNLOAD_URL = "https://get.helm.sh"
DEFAULT_DOWNLOAD_TIMEOUT = 120.0
DEFAULT_PROBE_TIMEOUT = 30.0


class ProbeErrorPolicy(str, Enum):
    """What to do when the Tiller probe itself cannot query the cluster."""

    FALLBACK = "fallback"  # assume Tiller is absent, use the default version
    FAIL = "fail"  # abort the program


@dataclass(frozen=True)
class WrapperConfig:
    """Everything the bootstrap steps need, resolved once at startup.

    Attributes:
        home: Wrapper home directory; binaries live under ``home/bin``.
        tmp_dir: Directory holding transient release archives.
        platform: Target operating system and architecture.
        default_version: Helm version used when no Tiller server is found.
        download_url: Base URL of the helm release mirror.
        download_timeout: HTTP timeout in seconds.
        probe_timeout: Kubernetes API request timeout in seconds.
        on_probe_error: Policy applied when the cluster probe fails.
        skip_probe: Never query the cluster; always launch the default version.
        kubeconfig: Kubeconfig used by the cluster probe.
        checksums: Trusted SHA-256 digests keyed by helm version.
        verify_checksum: Verify against published ``.sha256sum`` files when
            no pinned digest exists.
        log_level: Root logging level name.
    """

    home: Path
    tmp_dir: Path
    platform: PlatformInfo
    default_version: str = DEFAULT_HELM_VERSION
    download_url: str = DEFAULT_DOWNLOAD_URL
    download_timeout: float = DEFAULT_DOWNLOAD_TIMEOUT
    probe_timeout: float = DEFAULT_PROBE_TIMEOUT
    on_probe_error: ProbeErrorPolicy = ProbeErrorPolicy.FALLBACK
    skip_probe: bool = False
    kubeconfig: Optional[Path] = None
    checksums: Dict[str, str] = field(default_factory=dict)
    verify_checksum: bool = False
    log_level: str = "WARNING"

