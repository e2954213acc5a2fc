"""k8s-rewrite - Kubernetes manifest templating.

Copies a directory of parameterized manifests into ``k8s.<suffix>``,
replaces the ``__TOKEN__`` placeholders with values from a config file and
writes an ``apply.sh`` that applies every manifest in the generated tree.
"""

try:
    from importlib.metadata import version

    __version__ = version("k8s-rewrite")
except Exception:
    __version__ = "0.0.0.dev0"

__all__ = ["__version__"]
