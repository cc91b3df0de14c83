"""Running the resolved helm binary with the user's arguments."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import BinaryIO, Callable, Optional, Sequence

from helm_wrapper.core.errors import LaunchError
from helm_wrapper.core.logging import get_logger
from helm_wrapper.core.subprocess_runner import run_combined

LOGGER = get_logger(__name__)


def exit_code_for(returncode: int) -> int:
    """Map a child return code to this process's exit code.

    A child killed by signal N reports ``-N``; shells report that as
    ``128 + N``.
    """
    if returncode < 0:
        return 128 - returncode
    return returncode


def _stdout_buffer() -> BinaryIO:
    sys.stdout.flush()
    return sys.stdout.buffer


def launch(
    binary: Path,
    args: Sequence[str],
    out: Optional[BinaryIO] = None,
    runner: Callable = run_combined,
) -> int:
    """Run ``binary`` with ``args`` and relay its combined output.

    The child runs without a timeout. Its stdout and stderr are captured
    together as raw bytes and written unchanged to ``out`` (the binary
    stdout buffer by default) whether it succeeds or fails.

    Returns:
        Exit code mirroring the child's.

    Raises:
        LaunchError: If the binary cannot be executed.
    """
    LOGGER.debug(f"Launching {binary} {' '.join(args)}")

    try:
        result = runner(binary, list(args), text=False)
    except OSError as e:
        raise LaunchError(f"Cannot run {binary}: {e}") from e

    out = out if out is not None else _stdout_buffer()
    out.write(result.stdout or b"")
    out.flush()

    code = exit_code_for(result.returncode)
    if code != 0:
        LOGGER.error(f"{binary.name} exited with status {result.returncode}")
    return code
