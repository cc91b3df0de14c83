"""helm-wrapper: version-resolving launcher for the helm client."""

__version__ = "0.1.0"
