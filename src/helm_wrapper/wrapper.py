"""Bootstrap-and-launch orchestration.

Control flow is strictly linear:

    ensure cache directory
    -> ensure default helm installed
    -> resolve effective version (Tiller probe)
    -> ensure effective version installed, if different
    -> launch with the user's arguments

Any ``WrapperError`` aborts the sequence; nothing is retried.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from helm_wrapper.bootstrap.download import ReleaseDownloader
from helm_wrapper.bootstrap.installer import HelmInstaller
from helm_wrapper.bootstrap.paths import WrapperPaths
from helm_wrapper.cluster.probe import ClusterProbe, KubernetesTillerProbe
from helm_wrapper.cluster.version import VersionMatcher
from helm_wrapper.config.models import WrapperConfig
from helm_wrapper.core.logging import get_logger
from helm_wrapper.launcher import launch

LOGGER = get_logger(__name__)


@dataclass
class HelmWrapper:
    """Wires the bootstrap steps for one invocation."""

    config: WrapperConfig
    paths: WrapperPaths
    installer: HelmInstaller
    matcher: VersionMatcher

    @classmethod
    def from_config(
        cls,
        config: WrapperConfig,
        downloader: Optional[ReleaseDownloader] = None,
        probe: Optional[ClusterProbe] = None,
    ) -> "HelmWrapper":
        """Build a wrapper from configuration.

        ``downloader`` and ``probe`` default to the real HTTP downloader and
        Kubernetes probe; callers may inject their own.
        """
        paths = WrapperPaths(home=config.home, tmp_dir=config.tmp_dir)
        if downloader is None:
            downloader = ReleaseDownloader(
                paths=paths,
                platform_info=config.platform,
                base_url=config.download_url,
                timeout=config.download_timeout,
            )
        if probe is None and not config.skip_probe:
            probe = KubernetesTillerProbe(
                kubeconfig=config.kubeconfig,
                timeout=config.probe_timeout,
            )

        installer = HelmInstaller(
            paths=paths,
            platform_info=config.platform,
            downloader=downloader,
            checksums=config.checksums,
            verify_checksum=config.verify_checksum,
        )
        matcher = VersionMatcher(
            probe=None if config.skip_probe else probe,
            on_probe_error=config.on_probe_error,
            timeout=config.probe_timeout,
        )
        return cls(config=config, paths=paths, installer=installer, matcher=matcher)

    def prepare(self) -> Path:
        """Run every bootstrap step and return the binary to launch."""
        self.paths.ensure_directories()

        default_version = self.config.default_version
        default_binary = self.installer.ensure_installed(default_version)

        version = self.matcher.resolve(default_version, default_binary)
        if version == default_version:
            return default_binary

        return self.installer.ensure_installed(version)

    def run(self, args: Sequence[str]) -> int:
        """Bootstrap and launch helm with ``args``, returning its exit code."""
        binary = self.prepare()
        return launch(binary, args)
