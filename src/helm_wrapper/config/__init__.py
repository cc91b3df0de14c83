"""Wrapper configuration built from the process environment."""

from helm_wrapper.config.loader import ConfigError, load_config
from helm_wrapper.config.models import ProbeErrorPolicy, WrapperConfig

__all__ = [
    "ConfigError",
    "load_config",
    "ProbeErrorPolicy",
    "WrapperConfig",
]
