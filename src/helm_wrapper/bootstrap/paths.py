"""Path management for the helm binary cache.

Directory structure:
    ~/.helm-wrapper/
        bin/
            helm-v2.16.7    - one executable per helm version
            helm-v2.14.3

Release archives are downloaded transiently to the temporary directory as
``helm-{version}.{pid}.tar.gz`` and removed once extracted. The pid keeps
concurrent invocations from sharing a half-written archive.
"""

from __future__ import annotations

import errno
import os
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

from helm_wrapper.core.errors import CacheError
from helm_wrapper.core.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class WrapperPaths:
    """Resolves cache and temporary paths for helm versions."""

    home: Path
    tmp_dir: Path

    _BIN_DIR: ClassVar[str] = "bin"
    _DIR_MODE: ClassVar[int] = 0o755

    @property
    def bin_dir(self) -> Path:
        """Directory containing versioned helm binaries."""
        return self.home / self._BIN_DIR

    def binary_path(self, version: str) -> Path:
        """Path of the cached helm binary for ``version``."""
        return self.bin_dir / f"helm-{version}"

    def archive_path(self, version: str) -> Path:
        """Path of the transient release archive for ``version``."""
        return self.tmp_dir / f"helm-{version}.{os.getpid()}.tar.gz"

    def ensure_directories(self) -> None:
        """Create the binary cache directory if it does not exist.

        An existing path is accepted as is, even if it is not a directory.

        Raises:
            CacheError: If the directory cannot be created.
        """
        try:
            self.bin_dir.stat()
            return
        except FileNotFoundError:
            pass
        except OSError as e:
            raise CacheError(f"Cannot access cache directory {self.bin_dir}: {e}") from e

        try:
            self.bin_dir.mkdir(mode=self._DIR_MODE, parents=True, exist_ok=True)
        except OSError as e:
            if e.errno == errno.EEXIST:
                return
            raise CacheError(f"Cannot create cache directory {self.bin_dir}: {e}") from e
        LOGGER.debug(f"Created cache directory {self.bin_dir}")

    def has_binary(self, version: str) -> bool:
        """Check whether a helm binary for ``version`` is already cached.

        Only existence is checked; size, integrity and mode are not.

        Raises:
            CacheError: If the path cannot be inspected for a reason other
                than not existing.
        """
        path = self.binary_path(version)
        try:
            path.stat()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise CacheError(f"Cannot inspect {path}: {e}", version) from e
        return True
