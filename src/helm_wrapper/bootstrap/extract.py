"""Extraction of the helm binary from a release archive."""

from __future__ import annotations

import gzip
import os
import shutil
import tarfile
import zlib
from pathlib import Path

from helm_wrapper.core.errors import (
    ArchiveError,
    CacheError,
    DecompressionError,
    EntryNotFoundError,
)
from helm_wrapper.core.logging import get_logger

LOGGER = get_logger(__name__)

BINARY_MODE = 0o755


def extract_binary(archive_path: Path, entry: str, dest_path: Path, version: str) -> Path:
    """Extract a single regular-file entry from a ``.tar.gz`` archive.

    The archive is walked sequentially. Entries that are not regular files,
    or whose name is not exactly ``entry``, are skipped. The match is
    written next to ``dest_path`` under a hidden name, made executable and
    renamed into place, so ``dest_path`` never exists half-written.

    The archive is removed on every exit path.

    Args:
        archive_path: Downloaded release archive.
        entry: Path of the binary inside the archive, e.g. ``linux-amd64/helm``.
        dest_path: Final location of the binary in the cache.
        version: Helm version, used in error messages.

    Returns:
        ``dest_path``.

    Raises:
        DecompressionError: If the archive is not valid gzip.
        ArchiveError: If the tar stream is malformed.
        EntryNotFoundError: If no regular file named ``entry`` exists.
        CacheError: If the archive cannot be opened or the binary written.
    """
    try:
        with gzip.open(archive_path, "rb") as stream:
            with tarfile.open(fileobj=stream, mode="r|") as tar:
                for member in tar:
                    if not member.isreg():
                        continue
                    if member.name != entry:
                        continue
                    source = tar.extractfile(member)
                    if source is None:
                        continue
                    _install(source, dest_path)
                    LOGGER.info(f"Installed helm {version} to {dest_path}")
                    return dest_path
    except (gzip.BadGzipFile, zlib.error, EOFError) as e:
        raise DecompressionError(f"helm {version} archive is not valid gzip: {e}", version) from e
    except tarfile.TarError as e:
        raise ArchiveError(f"helm {version} archive is not a valid tarball: {e}", version) from e
    except OSError as e:
        raise CacheError(f"Cannot extract helm {version}: {e}", version) from e
    finally:
        _remove_archive(archive_path)

    raise EntryNotFoundError(version, entry)


def _install(source, dest_path: Path) -> None:
    tmp_path = dest_path.with_name(f".{dest_path.name}.{os.getpid()}.tmp")
    try:
        with open(tmp_path, "wb") as out:
            shutil.copyfileobj(source, out)
        tmp_path.chmod(BINARY_MODE)
        os.replace(tmp_path, dest_path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def _remove_archive(archive_path: Path) -> None:
    try:
        archive_path.unlink(missing_ok=True)
    except OSError as e:
        LOGGER.warning(f"Could not remove {archive_path}: {e}")
