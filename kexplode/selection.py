"""Resolve which contexts a run should export."""

from __future__ import annotations

import logging

from kexplode.errors import ContextNotFoundError, NoContextsError, UsageError
from kexplode.schemas.explode import ExplodeOptions
from kexplode.schemas.kubeconfig import KubeConfig

logger = logging.getLogger(__name__)


def resolve_contexts(config: KubeConfig, options: ExplodeOptions) -> list[str]:
    """Return the context names to export, in processing order.

    Explicit names are validated as a whole before anything is returned,
    so a single unknown name means no output at all. In ``--all`` mode
    every context is selected in lexicographic order.

    Raises:
        NoContextsError: If the document holds no contexts.
        UsageError: If neither names nor ``--all`` were given.
        ContextNotFoundError: If any explicit name is unknown.
    """
    if not options.all_contexts and not options.contexts:
        raise UsageError("must specify context names or --all")

    if not config.contexts:
        raise NoContextsError()

    if options.all_contexts:
        if options.contexts:
            logger.warning(
                "--all given, ignoring explicit context names: %s",
                ", ".join(options.contexts),
            )
        return sorted(config.contexts)

    # Duplicates collapse to their first occurrence
    selected = list(dict.fromkeys(options.contexts))
    missing = [name for name in selected if name not in config.contexts]
    if missing:
        raise ContextNotFoundError(missing)
    return selected
