"""kexplode schema definitions."""

from kexplode.schemas.explode import ExplodeOptions, OutputMode
from kexplode.schemas.kubeconfig import AuthInfo, Cluster, Context, KubeConfig

__all__ = [
    "AuthInfo",
    "Cluster",
    "Context",
    "ExplodeOptions",
    "KubeConfig",
    "OutputMode",
]
