"""End-to-end bootstrap scenarios with a faked network and cluster."""

from __future__ import annotations

import dataclasses
import io
import os
from urllib.error import HTTPError

import pytest

from helm_wrapper.bootstrap.download import ReleaseDownloader
from helm_wrapper.bootstrap.paths import WrapperPaths
from helm_wrapper.config.models import ProbeErrorPolicy, WrapperConfig
from helm_wrapper.core.errors import ClusterProbeError, UnexpectedStatusError
from helm_wrapper.wrapper import HelmWrapper

DEFAULT_URL = "https://get.helm.sh/helm-v2.16.7-linux-amd64.tar.gz"
SERVER_URL = "https://get.helm.sh/helm-v2.14.3-linux-amd64.tar.gz"


class StubProbe:
    def __init__(self, present: bool = False, error: Exception = None) -> None:
        self.present = present
        self.error = error

    def tiller_present(self) -> bool:
        if self.error is not None:
            raise self.error
        return self.present


def _build(config: WrapperConfig, fake_opener, probe=None) -> HelmWrapper:
    downloader = ReleaseDownloader(
        paths=WrapperPaths(home=config.home, tmp_dir=config.tmp_dir),
        platform_info=config.platform,
        opener=fake_opener,
    )
    return HelmWrapper.from_config(config, downloader=downloader, probe=probe)


@pytest.fixture
def helm_archives(fake_opener, targz, script):
    default_helm = script(
        'if [ "$1" = version ]; then printf "v2.14.3\\n"; else echo "default $*"; fi'
    )
    server_helm = script('echo "server $*"')
    fake_opener.responses[DEFAULT_URL] = targz({"linux-amd64/helm": default_helm})
    fake_opener.responses[SERVER_URL] = targz({"linux-amd64/helm": server_helm})
    return fake_opener


class TestColdCache:
    """Scenario: nothing cached yet."""

    def test_downloads_extracts_and_launches(
        self, wrapper_config: WrapperConfig, helm_archives, capsys
    ) -> None:
        assert not wrapper_config.home.exists()
        wrapper = _build(wrapper_config, helm_archives)

        code = wrapper.run(["list", "--all"])

        binary = wrapper.paths.binary_path("v2.16.7")
        assert code == 0
        assert capsys.readouterr().out == "default list --all\n"
        assert wrapper.paths.bin_dir.is_dir()
        assert os.access(binary, os.X_OK)
        assert helm_archives.urls == [DEFAULT_URL]
        assert not wrapper.paths.archive_path("v2.16.7").exists()

    def test_second_run_makes_no_network_calls(
        self, wrapper_config: WrapperConfig, helm_archives, capsys
    ) -> None:
        _build(wrapper_config, helm_archives).run(["version"])
        helm_archives.calls.clear()

        _build(wrapper_config, helm_archives).run(["list"])

        assert helm_archives.calls == []

    def test_download_failure_leaves_cache_empty(self, wrapper_config: WrapperConfig) -> None:
        def opener(url, timeout):
            raise HTTPError(url, 404, "Not Found", {}, io.BytesIO())

        wrapper = _build(wrapper_config, opener)
        with pytest.raises(UnexpectedStatusError):
            wrapper.run(["list"])

        assert list(wrapper.paths.bin_dir.iterdir()) == []


class TestWarmCache:
    """Scenario: requested version already cached."""

    def test_launches_without_network(
        self, wrapper_config: WrapperConfig, fake_opener, install_executable, script, capsys
    ) -> None:
        wrapper = _build(wrapper_config, fake_opener)
        install_executable(wrapper.paths.binary_path("v2.16.7"), script('echo "cached $*"'))

        code = wrapper.run(["repo", "list"])

        assert code == 0
        assert capsys.readouterr().out == "cached repo list\n"
        assert fake_opener.calls == []


class TestTillerMatching:
    """Scenario: a Tiller server pins a different version."""

    def test_launches_server_version(
        self, wrapper_config: WrapperConfig, helm_archives, capsys
    ) -> None:
        config = dataclasses.replace(wrapper_config, skip_probe=False)
        wrapper = _build(config, helm_archives, probe=StubProbe(present=True))

        code = wrapper.run(["ls"])

        assert code == 0
        assert capsys.readouterr().out == "server ls\n"
        assert helm_archives.urls == [DEFAULT_URL, SERVER_URL]
        assert wrapper.paths.has_binary("v2.14.3")

    def test_probe_error_falls_back_to_default(
        self, wrapper_config: WrapperConfig, helm_archives, capsys
    ) -> None:
        config = dataclasses.replace(wrapper_config, skip_probe=False)
        wrapper = _build(config, helm_archives, probe=StubProbe(error=ClusterProbeError("no kubeconfig")))

        code = wrapper.run(["ls"])

        assert code == 0
        assert capsys.readouterr().out == "default ls\n"
        assert helm_archives.urls == [DEFAULT_URL]

    def test_probe_error_fails_fast_under_fail_policy(
        self, wrapper_config: WrapperConfig, helm_archives, capsys
    ) -> None:
        config = dataclasses.replace(
            wrapper_config, skip_probe=False, on_probe_error=ProbeErrorPolicy.FAIL
        )
        wrapper = _build(config, helm_archives, probe=StubProbe(error=ClusterProbeError("no kubeconfig")))

        with pytest.raises(ClusterProbeError):
            wrapper.run(["ls"])

        assert capsys.readouterr().out == ""

    def test_skip_probe_ignores_injected_probe(
        self, wrapper_config: WrapperConfig, helm_archives, capsys
    ) -> None:
        wrapper = _build(wrapper_config, helm_archives, probe=StubProbe(present=True))

        wrapper.run(["ls"])

        assert capsys.readouterr().out == "default ls\n"
