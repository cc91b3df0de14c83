"""Subprocess helpers for running helm binaries."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Union


def run_combined(
    binary: Union[str, Path],
    args: Sequence[str],
    timeout: Optional[float] = None,
    text: bool = True,
) -> subprocess.CompletedProcess:
    """Run a binary with stdout and stderr merged into one captured stream.

    With ``text`` set, output is decoded as UTF-8 with replacement so
    arbitrary child output never raises. Without it, ``stdout`` holds the
    raw bytes exactly as the child wrote them.

    Args:
        binary: Executable to run.
        args: Arguments passed verbatim.
        timeout: Timeout in seconds, or None to wait indefinitely.
        text: Decode output to ``str`` instead of returning ``bytes``.

    Returns:
        CompletedProcess whose ``stdout`` holds the combined output.

    Raises:
        subprocess.TimeoutExpired: If the command times out.
        OSError: If the binary cannot be executed.
    """
    cmd: List[str] = [str(binary), *args]
    if not text:
        return subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            timeout=timeout,
        )
    return subprocess.run(
        cmd,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        encoding="utf-8",
        errors="replace",
        timeout=timeout,
    )
