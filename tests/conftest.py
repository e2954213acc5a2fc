"""Shared fixtures: a small manifest template tree and config files."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

DEPLOYMENT = textwrap.dedent(
    """\
    apiVersion: apps/v1
    kind: Deployment
    metadata:
      name: proxy
      namespace: __NAMESPACE__
    spec:
      template:
        spec:
          __MAYBE_PULL_SECRETS__
          containers:
            - name: proxy
              image: __IMAGE_PREFIX__proxy__IMAGE_SUFFIX__
              env:
                - name: TIKV_PD
                  value: "__TIKV_CLUSTER__-pd:2379"
                - name: NET
                  value: "__NET_PREFIX__.0.0/16"
    """
)

SERVICE = textwrap.dedent(
    """\
    apiVersion: v1
    kind: Service
    metadata:
      name: proxy
      namespace: __NAMESPACE__
    spec:
      externalIPs:
        - __EXTERNAL_IPS__
    """
)

NOTES = "Not a manifest: __NAMESPACE__ stays as-is.\n"

BASIC_CONFIG = textwrap.dedent(
    """\
    NET_PREFIX=10.0
    EXTERNAL_IPS=1.2.3.4
    IMAGE_PREFIX=registry/
    NAMESPACE=prod
    TIKV_CLUSTER=main
    """
)

ALL_TOKENS_IN_TEMPLATE = (
    "__NET_PREFIX__",
    "__EXTERNAL_IPS__",
    "__IMAGE_PREFIX__",
    "__IMAGE_SUFFIX__",
    "__NAMESPACE__",
    "__TIKV_CLUSTER__",
    "__MAYBE_PULL_SECRETS__",
)


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """``<tmp>/templates/k8s`` with two manifests and one non-manifest."""
    root = tmp_path / "templates" / "k8s"
    (root / "proxy").mkdir(parents=True)
    (root / "proxy" / "deployment.yaml").write_text(DEPLOYMENT, encoding="utf-8")
    (root / "service.yaml").write_text(SERVICE, encoding="utf-8")
    (root / "NOTES.txt").write_text(NOTES, encoding="utf-8")
    return root


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    """Empty directory used as the output root."""
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def write_config(tmp_path: Path):
    """Factory: write *text* to a config file and return its path."""

    def _write(text: str = BASIC_CONFIG, name: str = "deploy.conf") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
