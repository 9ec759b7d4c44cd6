"""Shared fixtures: a merged kubeconfig with three clusters, users and contexts."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from kexplode.schemas.kubeconfig import KubeConfig


def make_raw_kubeconfig() -> dict:
    return {
        "apiVersion": "v1",
        "kind": "Config",
        "clusters": [
            {"name": "prod-cluster", "cluster": {
                "server": "https://prod.example.com:6443",
                "certificate-authority-data": "UFJPRC1DQQ==",
            }},
            {"name": "dev-cluster", "cluster": {
                "server": "https://dev.example.com:6443",
                "insecure-skip-tls-verify": True,
            }},
            {"name": "team-cluster", "cluster": {
                "server": "https://team.example.com",
                "certificate-authority": "certs/team-ca.crt",
            }},
        ],
        "users": [
            {"name": "prod-admin", "user": {"token": "prod-secret-token"}},
            {"name": "dev-user", "user": {
                "client-certificate-data": "REVWLUNFUlQ=",
                "client-key-data": "REVWLUtFWQ==",
            }},
            {"name": "team-user", "user": {
                "exec": {
                    "apiVersion": "client.authentication.k8s.io/v1beta1",
                    "command": "team-login",
                    "args": ["--cluster", "team"],
                },
            }},
        ],
        "contexts": [
            {"name": "prod", "context": {
                "cluster": "prod-cluster", "user": "prod-admin", "namespace": "default",
            }},
            {"name": "dev", "context": {"cluster": "dev-cluster", "user": "dev-user"}},
            {"name": "team/cluster-1", "context": {
                "cluster": "team-cluster", "user": "team-user", "namespace": "team",
            }},
        ],
        "current-context": "dev",
        "preferences": {"colors": True},
        "extensions": [
            {"name": "audit", "extension": {"owner": "platform"}},
        ],
    }


@pytest.fixture
def raw_kubeconfig() -> dict:
    return make_raw_kubeconfig()


@pytest.fixture
def kubeconfig(raw_kubeconfig) -> KubeConfig:
    return KubeConfig.from_dict(raw_kubeconfig)


@pytest.fixture
def kubeconfig_file(tmp_path, raw_kubeconfig) -> Path:
    """Write the sample kubeconfig to a temp file and return its path."""
    path = tmp_path / "source" / "config"
    path.parent.mkdir()
    path.write_text(yaml.safe_dump(raw_kubeconfig), encoding="utf-8")
    return path


@pytest.fixture
def output_dir(tmp_path) -> Path:
    return tmp_path / "out"
