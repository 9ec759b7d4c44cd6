"""kexplode — split a merged kubeconfig into per-context kubeconfig files."""

__version__ = "0.1.0"
