"""Kubeconfig loading rules and YAML serialization.

Sources are tried in this order:
  1. An explicit path (``--kubeconfig``); it must exist.
  2. The ``KUBECONFIG`` environment variable, a list of paths separated by
     ``os.pathsep``. Missing files are skipped, the rest are merged.
  3. ``~/.kube/config``, if present. Otherwise the result is empty.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml

from kexplode.errors import ConfigLoadError
from kexplode.schemas.kubeconfig import (
    RECOMMENDED_CONFIG_DIR,
    AuthInfo,
    Cluster,
    KubeConfig,
)

logger = logging.getLogger(__name__)

KUBECONFIG_ENV = "KUBECONFIG"
RECOMMENDED_CONFIG_FILE = RECOMMENDED_CONFIG_DIR / "config"

# Fields holding file paths that are resolved against the kubeconfig's directory
_CLUSTER_PATH_FIELDS = ("certificate_authority",)
_AUTH_PATH_FIELDS = ("client_certificate", "client_key", "token_file")


def load_kubeconfig(
    explicit_path: Path | None = None,
    env: dict[str, str] | None = None,
) -> KubeConfig:
    """Load a kubeconfig following the standard precedence rules.

    Args:
        explicit_path: File to load instead of the environment defaults.
        env: Environment mapping. Defaults to ``os.environ``.

    Returns:
        The loaded (and possibly merged) document.

    Raises:
        ConfigLoadError: If a file is unreadable or not a valid kubeconfig.
    """
    if explicit_path is not None:
        path = Path(explicit_path).expanduser()
        if not path.is_file():
            raise ConfigLoadError(path, "file does not exist")
        return load_kubeconfig_file(path)

    env = os.environ if env is None else env
    paths = kubeconfig_paths(env.get(KUBECONFIG_ENV, ""))
    existing = [p for p in paths if p.is_file()]
    for skipped in paths:
        if skipped not in existing:
            logger.debug("Skipping missing kubeconfig %s", skipped)

    if not existing:
        logger.debug("No kubeconfig found, using an empty document")
        return KubeConfig()

    return merge_kubeconfigs([load_kubeconfig_file(p) for p in existing])


def kubeconfig_paths(env_value: str) -> list[Path]:
    """Return candidate paths from a ``KUBECONFIG`` value, or the default."""
    if not env_value:
        return [RECOMMENDED_CONFIG_FILE]

    paths: list[Path] = []
    for part in env_value.split(os.pathsep):
        if not part:
            continue
        path = Path(part).expanduser()
        if path not in paths:
            paths.append(path)
    return paths


def load_kubeconfig_file(path: Path) -> KubeConfig:
    """Parse one kubeconfig file and resolve its relative file references.

    Raises:
        ConfigLoadError: If the file cannot be read or parsed.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigLoadError(path, e.strerror or str(e)) from e
    except UnicodeDecodeError as e:
        raise ConfigLoadError(path, f"not valid UTF-8: {e.reason} at byte {e.start}") from e

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigLoadError(path, f"invalid YAML: {e}") from e

    try:
        config = KubeConfig.from_dict(raw)
    except ValueError as e:
        raise ConfigLoadError(path, str(e)) from e

    logger.info(
        "Loaded %s (%d contexts, %d clusters, %d users)",
        path, len(config.contexts), len(config.clusters), len(config.auth_infos),
    )
    return resolve_local_paths(config, path.resolve().parent)


def resolve_local_paths(config: KubeConfig, base_dir: Path) -> KubeConfig:
    """Return a copy with relative file references made absolute under base_dir."""
    return config.model_copy(
        update={
            "clusters": {
                name: _resolve_fields(cluster, _CLUSTER_PATH_FIELDS, base_dir)
                for name, cluster in config.clusters.items()
            },
            "auth_infos": {
                name: _resolve_fields(auth, _AUTH_PATH_FIELDS, base_dir)
                for name, auth in config.auth_infos.items()
            },
        }
    )


def _resolve_fields(
    entry: Cluster | AuthInfo, fields: tuple[str, ...], base_dir: Path
) -> Cluster | AuthInfo:
    update: dict[str, str] = {}
    for field in fields:
        value = getattr(entry, field)
        if value and not Path(value).expanduser().is_absolute():
            update[field] = str(base_dir / value)
    if not update:
        return entry
    return entry.model_copy(update=update)


def merge_kubeconfigs(configs: list[KubeConfig]) -> KubeConfig:
    """Merge documents in order; the first definition of any name wins."""
    if len(configs) == 1:
        return configs[0]

    merged = KubeConfig()
    for config in configs:
        for name, cluster in config.clusters.items():
            merged.clusters.setdefault(name, cluster)
        for name, auth in config.auth_infos.items():
            merged.auth_infos.setdefault(name, auth)
        for name, ctx in config.contexts.items():
            merged.contexts.setdefault(name, ctx)
        for name, ext in config.extensions.items():
            merged.extensions.setdefault(name, ext)
        if not merged.current_context:
            merged.current_context = config.current_context
        if not merged.preferences:
            merged.preferences = dict(config.preferences)

    logger.debug("Merged %d kubeconfig files", len(configs))
    return merged


def dump_kubeconfig(config: KubeConfig) -> str:
    """Serialize a document to kubectl-style YAML."""
    return yaml.safe_dump(
        config.to_dict(),
        default_flow_style=False,
        sort_keys=True,
        allow_unicode=True,
    )


def write_kubeconfig(config: KubeConfig, path: Path) -> None:
    """Write a document to path with owner-only permissions.

    Raises:
        OSError: If the directory or file cannot be written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    content = dump_kubeconfig(config)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(content)
    logger.debug("Wrote %s", path)
