"""Kubeconfig document schemas.

Pydantic v2 models for the ``apiVersion: v1 / kind: Config`` layout used by
kubectl. Clusters, users and contexts are stored as name-keyed mappings in
memory and converted to and from the named-list form found on disk.
Unknown keys are kept verbatim so that credentials round-trip untouched.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

API_VERSION = "v1"
KIND = "Config"

# kubectl's recommended config directory
RECOMMENDED_CONFIG_DIR = Path.home() / ".kube"


class Cluster(BaseModel):
    """Server endpoint and trust material for one cluster."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    server: str | None = Field(default=None, description="API server URL")
    certificate_authority: str | None = Field(
        default=None,
        alias="certificate-authority",
        description="Path to a CA bundle file",
    )
    certificate_authority_data: str | None = Field(
        default=None,
        alias="certificate-authority-data",
        description="Base64-encoded CA bundle",
    )


class AuthInfo(BaseModel):
    """Client credentials. Serialized as a ``users`` entry."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    client_certificate: str | None = Field(
        default=None,
        alias="client-certificate",
        description="Path to a client certificate file",
    )
    client_key: str | None = Field(
        default=None,
        alias="client-key",
        description="Path to a client key file",
    )
    token_file: str | None = Field(
        default=None,
        alias="tokenFile",
        description="Path to a file holding a bearer token",
    )


class Context(BaseModel):
    """Binding of a cluster to a user, plus an optional default namespace."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    cluster: str = Field(default="", description="Name of the referenced cluster")
    auth_info: str = Field(
        default="", alias="user", description="Name of the referenced user"
    )
    namespace: str | None = Field(default=None, description="Default namespace")
    extensions: list[dict[str, Any]] | None = Field(
        default=None, description="Context-scoped extensions, passed through"
    )


class KubeConfig(BaseModel):
    """A whole kubeconfig document."""

    clusters: dict[str, Cluster] = Field(default_factory=dict)
    auth_infos: dict[str, AuthInfo] = Field(default_factory=dict)
    contexts: dict[str, Context] = Field(default_factory=dict)
    current_context: str = Field(default="")
    preferences: dict[str, Any] = Field(default_factory=dict)
    extensions: dict[str, Any] = Field(
        default_factory=dict, description="Top-level extensions keyed by name"
    )

    @classmethod
    def from_dict(cls, raw: dict[str, Any] | None) -> KubeConfig:
        """Build a document from the parsed YAML mapping.

        Raises:
            ValueError: If the structure is not a kubeconfig. Pydantic's
                ValidationError is a ValueError subclass and propagates as-is.
        """
        if raw is None:
            return cls()
        if not isinstance(raw, dict):
            raise ValueError("top level is not a mapping")
        preferences = raw.get("preferences") or {}
        if not isinstance(preferences, dict):
            raise ValueError("'preferences' must be a mapping")

        return cls(
            clusters={
                name: Cluster.model_validate(body)
                for name, body in _named_entries(raw, "clusters", "cluster")
            },
            auth_infos={
                name: AuthInfo.model_validate(body)
                for name, body in _named_entries(raw, "users", "user")
            },
            contexts={
                name: Context.model_validate(body)
                for name, body in _named_entries(raw, "contexts", "context")
            },
            current_context=raw.get("current-context") or "",
            preferences=dict(preferences),
            extensions=dict(_named_entries(raw, "extensions", "extension")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the on-disk mapping, ready for YAML serialization."""
        doc: dict[str, Any] = {
            "apiVersion": API_VERSION,
            "kind": KIND,
            "clusters": [
                {"name": name, "cluster": _dump(cluster)}
                for name, cluster in sorted(self.clusters.items())
            ],
            "users": [
                {"name": name, "user": _dump(auth)}
                for name, auth in sorted(self.auth_infos.items())
            ],
            "contexts": [
                {"name": name, "context": _dump(ctx)}
                for name, ctx in sorted(self.contexts.items())
            ],
            "current-context": self.current_context,
            "preferences": dict(self.preferences),
        }
        if self.extensions:
            doc["extensions"] = [
                {"name": name, "extension": ext}
                for name, ext in sorted(self.extensions.items())
            ]
        return doc


def _dump(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def _named_entries(
    raw: dict[str, Any], section: str, body_key: str
) -> list[tuple[str, Any]]:
    """Unpack a ``[{name: ..., <body_key>: {...}}]`` list.

    Later entries with the same name replace earlier ones.
    """
    entries = raw.get(section) or []
    if not isinstance(entries, list):
        raise ValueError(f"{section!r} must be a list")

    result: list[tuple[str, Any]] = []
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ValueError(f"{section}[{i}] is not a mapping")
        name = entry.get("name")
        if not name or not isinstance(name, str):
            raise ValueError(f"{section}[{i}] has no name")
        body = entry.get(body_key)
        if body_key != "extension":
            body = body or {}
            if not isinstance(body, dict):
                raise ValueError(f"{section}[{i}] ({name!r}) has a malformed {body_key!r}")
        result.append((name, body))
    return result
