"""
Kubernetes API helpers - the control-plane collaborator

The synchronizer only talks to the cluster through the ``APIHelpers``
interface.

``K8sHelpers`` implements it with the official Kubernetes client:

    helper = K8sHelpers()
    client = helper.get_client()
    node = helper.get_node(client)
    helper.remove_labels(node, LABEL_PREFIX)
    helper.add_labels(node, labels)
    helper.update_node(client, node)

Only ``update_node`` writes to the cluster. All other mutations happen on
the fetched node object in memory.
"""

from abc import ABC, abstractmethod
from typing import Mapping, Optional

import yaml
from kubernetes import client, config
from kubernetes.client.rest import ApiException
from urllib3.exceptions import HTTPError

from .config import KubernetesConfig, get_settings
from .exceptions import ClientAcquisitionError, NodeFetchError, NodePersistError
from .logger import logger


# What the kubeconfig and in-cluster loaders raise for missing, unreadable
# or malformed credentials
_LOADER_ERRORS = (
    config.ConfigException,
    yaml.YAMLError,
    OSError,
    TypeError,
    ValueError,
    KeyError,
    AttributeError,
)


class APIHelpers(ABC):
    """Operations the synchronizer needs from the control plane."""

    @abstractmethod
    def get_client(self):
        """Return an API client. Raises ClientAcquisitionError."""

    @abstractmethod
    def get_node(self, api_client):
        """Fetch the node this agent runs on. Raises NodeFetchError."""

    @abstractmethod
    def add_labels(self, node, labels: Mapping[str, str]) -> None:
        """Set (or overwrite) every label in ``labels`` on the in-memory node."""

    @abstractmethod
    def remove_labels(self, node, prefix: str) -> None:
        """Drop every label whose key starts with ``prefix`` from the in-memory node."""

    @abstractmethod
    def update_node(self, api_client, node) -> None:
        """Persist the node. Raises NodePersistError."""


class K8sHelpers(APIHelpers):
    """APIHelpers backed by the Kubernetes CoreV1 API."""

    def __init__(self, kube: Optional[KubernetesConfig] = None):
        self.kube = kube or get_settings().kubernetes

    def get_client(self) -> client.CoreV1Api:
        try:
            if self.kube.kubeconfig:
                config.load_kube_config(config_file=self.kube.kubeconfig)
            else:
                try:
                    config.load_incluster_config()
                except config.ConfigException:
                    config.load_kube_config()
        except _LOADER_ERRORS as e:
            raise ClientAcquisitionError(f"can't load Kubernetes client configuration: {e}") from e

        return client.CoreV1Api()

    def get_node(self, api_client: client.CoreV1Api) -> client.V1Node:
        node_name = self.kube.node_name or self._node_name_from_pod(api_client)
        try:
            return api_client.read_node(node_name)
        except ApiException as e:
            raise NodeFetchError(f"can't get node '{node_name}': {e.reason} ({e.status})") from e
        except HTTPError as e:
            raise NodeFetchError(f"can't reach API server to get node '{node_name}': {e}") from e

    def _node_name_from_pod(self, api_client: client.CoreV1Api) -> str:
        """Resolve the node through the pod this agent runs in (POD_NAME/POD_NAMESPACE)."""
        pod_name = self.kube.pod_name
        namespace = self.kube.pod_namespace
        if not pod_name or not namespace:
            raise NodeFetchError(
                "can't determine node name: set NODE_NAME, or POD_NAME and POD_NAMESPACE"
            )

        try:
            pod = api_client.read_namespaced_pod(pod_name, namespace)
        except ApiException as e:
            raise NodeFetchError(f"can't get pod {namespace}/{pod_name}: {e.reason} ({e.status})") from e
        except HTTPError as e:
            raise NodeFetchError(f"can't reach API server to get pod {namespace}/{pod_name}: {e}") from e

        node_name = pod.spec.node_name if pod.spec else None
        if not node_name:
            raise NodeFetchError(f"pod {namespace}/{pod_name} is not scheduled to a node")
        return node_name

    def add_labels(self, node: client.V1Node, labels: Mapping[str, str]) -> None:
        if not labels:
            return
        if node.metadata.labels is None:
            node.metadata.labels = {}
        node.metadata.labels.update(labels)

    def remove_labels(self, node: client.V1Node, prefix: str) -> None:
        existing = node.metadata.labels
        if not existing:
            return
        for key in [k for k in existing if k.startswith(prefix)]:
            del existing[key]

    def update_node(self, api_client: client.CoreV1Api, node: client.V1Node) -> None:
        name = node.metadata.name
        try:
            # replace (PUT) carries the fetched resourceVersion; a concurrent
            # update makes this fail with 409 and the next cycle starts over
            api_client.replace_node(name, node)
        except ApiException as e:
            raise NodePersistError(f"can't update node '{name}': {e.reason} ({e.status})") from e
        except HTTPError as e:
            raise NodePersistError(f"can't reach API server to update node '{name}': {e}") from e
        logger.debug(f"Node {name} updated")
