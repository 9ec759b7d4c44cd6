"""Context projection.

Extracts one context, together with the cluster and user it references,
into a fresh self-contained kubeconfig document.
"""

from __future__ import annotations

import copy
import logging

from kexplode.errors import ReferenceKind, ReferenceNotFoundError
from kexplode.schemas.kubeconfig import KubeConfig

logger = logging.getLogger(__name__)


def explode_context(config: KubeConfig, context_name: str) -> KubeConfig:
    """Project a single context out of a kubeconfig.

    The source document is only read. The result holds exactly one
    context, cluster and user under their original names, its
    current-context points at ``context_name``, and it carries copies of
    the source's preferences and top-level extensions.

    Args:
        config: The full source document.
        context_name: Key of the context to extract.

    Returns:
        A new, referentially closed KubeConfig.

    Raises:
        ReferenceNotFoundError: If the context, its cluster, or its user
            is missing from ``config``.
    """
    context = config.contexts.get(context_name)
    if context is None:
        raise ReferenceNotFoundError(ReferenceKind.CONTEXT, context_name)

    cluster = config.clusters.get(context.cluster)
    if cluster is None:
        raise ReferenceNotFoundError(
            ReferenceKind.CLUSTER, context.cluster, context=context_name
        )

    auth_info = config.auth_infos.get(context.auth_info)
    if auth_info is None:
        raise ReferenceNotFoundError(
            ReferenceKind.AUTHINFO, context.auth_info, context=context_name
        )

    logger.debug(
        "Projecting context %s (cluster=%s, user=%s)",
        context_name, context.cluster, context.auth_info,
    )
    return KubeConfig(
        contexts={context_name: context.model_copy(deep=True)},
        clusters={context.cluster: cluster.model_copy(deep=True)},
        auth_infos={context.auth_info: auth_info.model_copy(deep=True)},
        current_context=context_name,
        preferences=copy.deepcopy(config.preferences),
        extensions=copy.deepcopy(config.extensions),
    )
