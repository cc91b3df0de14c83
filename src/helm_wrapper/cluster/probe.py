"""Detecting a legacy Tiller deployment in the current cluster.

Helm 2 clients must match the Tiller server they talk to. Tiller runs as a
pod in ``kube-system`` labelled ``app=helm,name=tiller``; if one exists the
wrapper asks it for its version.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from kubernetes import client
from kubernetes import config as kube_config

from helm_wrapper.core.errors import ClusterProbeError
from helm_wrapper.core.logging import get_logger

LOGGER = get_logger(__name__)

TILLER_NAMESPACE = "kube-system"
TILLER_LABEL_SELECTOR = "app=helm,name=tiller"


class ClusterProbe(Protocol):
    """Anything that can tell whether Tiller is deployed."""

    def tiller_present(self) -> bool:
        ...


@dataclass
class KubernetesTillerProbe:
    """Lists Tiller pods through the Kubernetes API.

    The kubeconfig is loaded into a dedicated API client, so the probe never
    touches the kubernetes library's global default configuration.
    """

    kubeconfig: Optional[Path] = None
    timeout: float = 30.0
    namespace: str = TILLER_NAMESPACE
    label_selector: str = TILLER_LABEL_SELECTOR

    def tiller_present(self) -> bool:
        """Return True if at least one Tiller pod exists.

        Raises:
            ClusterProbeError: If the kubeconfig cannot be loaded or the API
                request fails for any reason.
        """
        config_file = str(self.kubeconfig) if self.kubeconfig else None
        try:
            with kube_config.new_client_from_config(config_file=config_file) as api_client:
                pods = client.CoreV1Api(api_client).list_namespaced_pod(
                    self.namespace,
                    label_selector=self.label_selector,
                    _request_timeout=self.timeout,
                )
        except Exception as e:
            raise ClusterProbeError(f"Cannot list Tiller pods: {e}") from e

        found = len(pods.items) > 0
        LOGGER.debug(
            f"Found {len(pods.items)} pod(s) in {self.namespace} matching {self.label_selector}"
        )
        return found
