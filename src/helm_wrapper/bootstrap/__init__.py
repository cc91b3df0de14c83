"""
Bootstrap module for the helm binary cache.

This module handles:
- Platform detection (OS + architecture)
- Cache directory management (~/.helm-wrapper/bin/)
- Downloading, verifying and extracting helm release archives
"""

from helm_wrapper.bootstrap.platform import get_platform_info, PlatformInfo
from helm_wrapper.bootstrap.paths import WrapperPaths

__all__ = [
    "get_platform_info",
    "PlatformInfo",
    "WrapperPaths",
]
