"""Resolving the helm version that should actually be launched."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from helm_wrapper.cluster.probe import ClusterProbe
from helm_wrapper.config.models import ProbeErrorPolicy
from helm_wrapper.core.errors import ClusterProbeError, ServerVersionError
from helm_wrapper.core.logging import get_logger
from helm_wrapper.core.subprocess_runner import run_combined

LOGGER = get_logger(__name__)

SERVER_VERSION_ARGS: List[str] = ["version", "--server", "--template", "{{.Server.SemVer}}"]


@dataclass
class VersionMatcher:
    """Picks the effective helm version.

    Without Tiller the default version is used. With Tiller, the default
    client reports the server's semantic version and that version wins.
    """

    probe: Optional[ClusterProbe]
    on_probe_error: ProbeErrorPolicy = ProbeErrorPolicy.FALLBACK
    timeout: Optional[float] = None
    runner: Callable[..., subprocess.CompletedProcess] = field(default=run_combined)

    def tiller_present(self) -> bool:
        """Probe the cluster, applying the configured error policy.

        Raises:
            ClusterProbeError: If the probe fails and the policy is ``fail``.
        """
        if self.probe is None:
            return False
        try:
            return self.probe.tiller_present()
        except ClusterProbeError as e:
            if self.on_probe_error is ProbeErrorPolicy.FAIL:
                raise
            LOGGER.warning(f"Cluster not reachable, assuming no Tiller: {e}")
            return False

    def server_version(self, default_binary: Path) -> str:
        """Ask the Tiller server for its version through ``default_binary``.

        Raises:
            ServerVersionError: If helm cannot be run, exits non-zero, or
                prints nothing.
        """
        try:
            result = self.runner(default_binary, SERVER_VERSION_ARGS, timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            raise ServerVersionError(f"{default_binary} timed out after {e.timeout}s") from e
        except OSError as e:
            raise ServerVersionError(f"Cannot run {default_binary}: {e}") from e

        output = (result.stdout or "").strip()
        if result.returncode != 0:
            raise ServerVersionError(
                f"{default_binary} {' '.join(SERVER_VERSION_ARGS)} exited with "
                f"status {result.returncode}: {output}"
            )
        if not output:
            raise ServerVersionError(f"{default_binary} reported an empty server version")
        return output

    def resolve(self, default_version: str, default_binary: Path) -> str:
        """Return the version to launch."""
        if not self.tiller_present():
            LOGGER.debug(f"No Tiller found, using helm {default_version}")
            return default_version

        version = self.server_version(default_binary)
        LOGGER.info(f"Tiller reports server version {version}")
        return version
