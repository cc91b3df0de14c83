"""Tests for launching the resolved helm binary."""

from __future__ import annotations

import io
import signal
from pathlib import Path

import pytest

from helm_wrapper.core.errors import LaunchError
from helm_wrapper.launcher import exit_code_for, launch


class TestLaunch:
    """Tests for launch."""

    def test_relays_output_and_forwards_args_verbatim(
        self, tmp_path: Path, install_executable, script
    ) -> None:
        binary = install_executable(tmp_path / "helm-v2.16.7", script('printf "%s|" "$@"'))
        out = io.BytesIO()

        code = launch(binary, ["install", "my release", "--set", "a=b"], out=out)

        assert code == 0
        assert out.getvalue() == b"install|my release|--set|a=b|"

    def test_combines_stdout_and_stderr(
        self, tmp_path: Path, install_executable, script
    ) -> None:
        binary = install_executable(tmp_path / "helm", script("echo out; echo err >&2"))
        out = io.BytesIO()

        launch(binary, [], out=out)

        assert b"out\n" in out.getvalue()
        assert b"err\n" in out.getvalue()

    def test_relays_crlf_and_non_utf8_bytes_unchanged(
        self, tmp_path: Path, install_executable, script
    ) -> None:
        binary = install_executable(tmp_path / "helm", script("printf 'a: 1\\r\\nb: \\377\\n'"))
        out = io.BytesIO()

        launch(binary, ["template", "."], out=out)

        assert out.getvalue() == b"a: 1\r\nb: \xff\n"

    def test_writes_to_binary_stdout_by_default(
        self, tmp_path: Path, install_executable, script, capsysbinary
    ) -> None:
        binary = install_executable(tmp_path / "helm", script("printf 'x\\r\\n\\377'"))

        launch(binary, [])

        assert capsysbinary.readouterr().out == b"x\r\n\xff"

    def test_mirrors_non_zero_exit_and_still_relays_output(
        self, tmp_path: Path, install_executable, script
    ) -> None:
        binary = install_executable(tmp_path / "helm", script("echo 'Error: release not found'; exit 3"))
        out = io.BytesIO()

        code = launch(binary, ["status", "missing"], out=out)

        assert code == 3
        assert out.getvalue() == b"Error: release not found\n"

    def test_missing_binary_raises_launch_error(self, tmp_path: Path) -> None:
        with pytest.raises(LaunchError, match="Cannot run"):
            launch(tmp_path / "helm-v0.0.0", [], out=io.BytesIO())


class TestExitCodeFor:
    """Tests for exit code mapping."""

    def test_passthrough(self) -> None:
        assert exit_code_for(0) == 0
        assert exit_code_for(2) == 2

    def test_signal(self) -> None:
        assert exit_code_for(-signal.SIGTERM) == 128 + signal.SIGTERM
