"""
Synchronizer - Reconcile computed labels with the node object

One reconcile is a read-modify-write of the node:

    1. get a client        (ClientAcquisitionError)
    2. fetch the node      (NodeFetchError)
    3. drop every label under LABEL_PREFIX
    4. add the freshly computed labels
    5. persist the node    (NodePersistError)

Steps 3 and 4 only touch the fetched object, so a failure anywhere leaves
the cluster untouched. After a successful reconcile the node's labels are
exactly ``(old labels - prefixed keys) | new labels``. Labels outside the
prefix are never touched.
"""

from typing import Mapping

from .k8s import APIHelpers
from .labels import LABEL_PREFIX
from .logger import logger


def advertise_feature_labels(
    helper: APIHelpers,
    labels: Mapping[str, str],
    prefix: str = LABEL_PREFIX,
) -> None:
    """
    Replace the node's feature labels with ``labels``.

    Raises:
        ControlPlaneError: any step failed; nothing was written
    """
    api_client = helper.get_client()
    node = helper.get_node(api_client)

    # Remove labels with our prefix so features that disappeared since the
    # previous cycle do not linger
    helper.remove_labels(node, prefix)
    helper.add_labels(node, labels)
    helper.update_node(api_client, node)

    logger.info(f"✅ Published {len(labels)} feature label(s) to node {_node_name(node)}")


def update_node_with_feature_labels(
    helper: APIHelpers,
    no_publish: bool,
    labels: Mapping[str, str],
) -> None:
    """Advertise ``labels`` unless publishing is disabled."""
    if no_publish:
        logger.info(f"Publishing disabled, {len(labels)} label(s) not advertised")
        return
    advertise_feature_labels(helper, labels)


def _node_name(node) -> str:
    metadata = getattr(node, "metadata", None)
    return getattr(metadata, "name", None) or "<unknown>"
