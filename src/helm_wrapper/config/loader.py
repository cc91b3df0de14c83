"""Configuration loading from environment variables.

helm-wrapper has no configuration file. Every setting comes from a
``HELM_WRAPPER_*`` environment variable, read exactly once here and passed
to the bootstrap steps as a ``WrapperConfig``.
"""

from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path
from typing import Dict, Mapping, Optional

from helm_wrapper.bootstrap.platform import PlatformInfo, get_platform_info
from helm_wrapper.config.models import (
    DEFAULT_DOWNLOAD_TIMEOUT,
    DEFAULT_DOWNLOAD_URL,
    DEFAULT_HELM_VERSION,
    DEFAULT_PROBE_TIMEOUT,
    ProbeErrorPolicy,
    WrapperConfig,
)
from helm_wrapper.core.errors import WrapperError
from helm_wrapper.core.logging import get_logger

LOGGER = get_logger(__name__)

# Default directory name under user home
DEFAULT_HOME_DIR_NAME = ".helm-wrapper"

ENV_PREFIX = "HELM_WRAPPER_"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})
_SHA256_PATTERN = re.compile(r"^[0-9a-fA-F]{64}$")


class ConfigError(WrapperError):
    """Invalid value in a HELM_WRAPPER_* environment variable."""

    step = "config"


def _env(environ: Mapping[str, str], name: str) -> Optional[str]:
    value = environ.get(ENV_PREFIX + name)
    if value is None:
        return None
    return value.strip()


def _parse_bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    value = _env(environ, name)
    if value is None:
        return default
    lowered = value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"{ENV_PREFIX}{name} must be a boolean, got {value!r}")


def _parse_seconds(environ: Mapping[str, str], name: str, default: float) -> float:
    value = _env(environ, name)
    if not value:
        return default
    try:
        seconds = float(value)
    except ValueError as e:
        raise ConfigError(f"{ENV_PREFIX}{name} must be a number, got {value!r}") from e
    if seconds <= 0:
        raise ConfigError(f"{ENV_PREFIX}{name} must be positive, got {value!r}")
    return seconds


def _parse_policy(environ: Mapping[str, str]) -> ProbeErrorPolicy:
    value = _env(environ, "ON_PROBE_ERROR")
    if not value:
        return ProbeErrorPolicy.FALLBACK
    try:
        return ProbeErrorPolicy(value.lower())
    except ValueError as e:
        choices = ", ".join(p.value for p in ProbeErrorPolicy)
        raise ConfigError(
            f"{ENV_PREFIX}ON_PROBE_ERROR must be one of {choices}, got {value!r}"
        ) from e


def parse_checksums(value: Optional[str]) -> Dict[str, str]:
    """Parse a ``version=sha256,version=sha256`` list.

    Args:
        value: Raw environment value, may be None or empty.

    Returns:
        Mapping of helm version to lowercase hex digest.

    Raises:
        ConfigError: If a pair is malformed or a digest is not SHA-256 hex.
    """
    checksums: Dict[str, str] = {}
    if not value:
        return checksums

    for pair in value.split(","):
        pair = pair.strip()
        if not pair:
            continue
        version, sep, digest = pair.partition("=")
        version, digest = version.strip(), digest.strip()
        if not sep or not version:
            raise ConfigError(f"Malformed checksum entry {pair!r}, expected version=sha256")
        if not _SHA256_PATTERN.match(digest):
            raise ConfigError(f"Checksum for {version} is not a SHA-256 hex digest")
        checksums[version] = digest.lower()
    return checksums


def get_wrapper_home(environ: Mapping[str, str]) -> Path:
    """Get the wrapper home directory.

    Resolution order:
    1. HELM_WRAPPER_HOME environment variable (if set)
    2. ~/.helm-wrapper (default)
    """
    env_home = _env(environ, "HOME")
    if env_home:
        return Path(env_home).expanduser()
    return Path.home() / DEFAULT_HOME_DIR_NAME


def load_config(
    environ: Optional[Mapping[str, str]] = None,
    platform_info: Optional[PlatformInfo] = None,
) -> WrapperConfig:
    """Build the wrapper configuration.

    Args:
        environ: Environment to read (defaults to ``os.environ``).
        platform_info: Target platform (defaults to the detected host).

    Returns:
        Resolved WrapperConfig instance.

    Raises:
        ConfigError: If any variable holds an invalid value or the host
            platform is unsupported.
    """
    if environ is None:
        environ = os.environ

    if platform_info is None:
        try:
            platform_info = get_platform_info()
        except ValueError as e:
            raise ConfigError(str(e)) from e

    tmp_dir = _env(environ, "TMPDIR")
    kubeconfig = _env(environ, "KUBECONFIG")

    config = WrapperConfig(
        home=get_wrapper_home(environ),
        tmp_dir=Path(tmp_dir) if tmp_dir else Path(tempfile.gettempdir()),
        platform=platform_info,
        default_version=_env(environ, "DEFAULT_VERSION") or DEFAULT_HELM_VERSION,
        download_url=(_env(environ, "DOWNLOAD_URL") or DEFAULT_DOWNLOAD_URL).rstrip("/"),
        download_timeout=_parse_seconds(environ, "DOWNLOAD_TIMEOUT", DEFAULT_DOWNLOAD_TIMEOUT),
        probe_timeout=_parse_seconds(environ, "PROBE_TIMEOUT", DEFAULT_PROBE_TIMEOUT),
        on_probe_error=_parse_policy(environ),
        skip_probe=_parse_bool(environ, "SKIP_PROBE", False),
        kubeconfig=Path(kubeconfig).expanduser() if kubeconfig else Path.home() / ".kube" / "config",
        checksums=parse_checksums(_env(environ, "SHA256")),
        verify_checksum=_parse_bool(environ, "VERIFY_CHECKSUM", False),
        log_level=(_env(environ, "LOG_LEVEL") or "WARNING").upper(),
    )

    LOGGER.debug(
        f"Loaded config: home={config.home} default={config.default_version} "
        f"platform={config.platform.archive_name} on_probe_error={config.on_probe_error.value}"
    )
    return config
