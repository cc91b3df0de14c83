"""Shared fixtures for helm-wrapper tests."""

from __future__ import annotations

import io
import stat
import tarfile
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import pytest

from helm_wrapper.bootstrap.paths import WrapperPaths
from helm_wrapper.bootstrap.platform import PlatformInfo
from helm_wrapper.config.models import WrapperConfig


class FakeResponse(io.BytesIO):
    """In-memory stand-in for an ``urlopen`` response."""

    def __init__(self, body: bytes, status: int = 200, reason: str = "OK") -> None:
        super().__init__(body)
        self.status = status
        self.reason = reason


class FakeOpener:
    """Records requested URLs and serves canned bodies keyed by URL."""

    def __init__(self, responses: Optional[Dict[str, bytes]] = None) -> None:
        self.responses = responses or {}
        self.calls: List[Tuple[str, float]] = []

    def __call__(self, url: str, timeout: float = 0) -> FakeResponse:
        self.calls.append((url, timeout))
        if url not in self.responses:
            raise AssertionError(f"unexpected download of {url}")
        return FakeResponse(self.responses[url])

    @property
    def urls(self) -> List[str]:
        return [url for url, _ in self.calls]


def build_targz(entries: Dict[str, bytes], extra: Optional[List[tarfile.TarInfo]] = None) -> bytes:
    """Build a gzip-compressed tarball in memory."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for info in extra or []:
            tar.addfile(info)
        for name, data in entries.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def helm_script(body: str) -> bytes:
    """A tiny POSIX shell script standing in for a helm binary."""
    return f"#!/bin/sh\n{body}\n".encode()


def make_executable(path: Path, content: bytes) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def platform_info() -> PlatformInfo:
    return PlatformInfo(os="linux", arch="amd64")


@pytest.fixture
def paths(tmp_path: Path) -> WrapperPaths:
    tmp_dir = tmp_path / "tmp"
    tmp_dir.mkdir()
    return WrapperPaths(home=tmp_path / ".helm-wrapper", tmp_dir=tmp_dir)


@pytest.fixture
def wrapper_config(paths: WrapperPaths, platform_info: PlatformInfo) -> WrapperConfig:
    return WrapperConfig(
        home=paths.home,
        tmp_dir=paths.tmp_dir,
        platform=platform_info,
        skip_probe=True,
    )


@pytest.fixture
def targz() -> Callable[..., bytes]:
    return build_targz


@pytest.fixture
def fake_opener() -> FakeOpener:
    return FakeOpener()


@pytest.fixture
def script() -> Callable[[str], bytes]:
    return helm_script


@pytest.fixture
def install_executable() -> Callable[[Path, bytes], Path]:
    return make_executable
