"""SHA-256 verification of downloaded archives."""

from __future__ import annotations

import hashlib
from pathlib import Path

from helm_wrapper.core.errors import CacheError, ChecksumError
from helm_wrapper.core.logging import get_logger

LOGGER = get_logger(__name__)


def compute_file_hash(path: Path) -> str:
    """Compute the SHA-256 hex digest of a file."""
    sha256_hash = hashlib.sha256()
    try:
        with open(path, "rb") as f:
            for byte_block in iter(lambda: f.read(65536), b""):
                sha256_hash.update(byte_block)
    except OSError as e:
        raise CacheError(f"Cannot read {path} for hashing: {e}") from e
    return sha256_hash.hexdigest()


def verify_archive(path: Path, expected: str, version: str) -> None:
    """Compare a file's digest against a trusted value.

    Raises:
        ChecksumError: If the digests differ.
    """
    actual = compute_file_hash(path)
    if actual != expected.lower():
        raise ChecksumError(
            f"checksum mismatch for helm {version}: expected {expected.lower()}, got {actual}",
            version,
        )
    LOGGER.debug(f"Checksum verified for helm {version}: {actual}")
