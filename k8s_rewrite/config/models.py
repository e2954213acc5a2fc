"""Pydantic model for the rewrite configuration.

The config file uses upper-case shell-style keys (``NET_PREFIX=10.0``);
the model exposes them as lower-case attributes through aliases so the
record can be passed between pipeline stages explicitly instead of via
the process environment.
"""

from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RewriteConfig(BaseModel):
    """Resolved values for the manifest placeholders.

    Attributes:
        net_prefix: ``NET_PREFIX`` - network prefix for service addresses.
        external_ips: ``EXTERNAL_IPS`` - externally reachable addresses.
        image_prefix: ``IMAGE_PREFIX`` - registry/repository prefix.
        image_suffix: ``IMAGE_SUFFIX`` - image tag suffix, may be empty.
        namespace: ``NAMESPACE`` - target Kubernetes namespace.
        tikv_cluster: ``TIKV_CLUSTER`` - TiKV cluster identifier.
        image_pull_secret: ``IMAGE_PULL_SECRET`` - optional pull secret name.
        extra: Any other keys found in the file; never substituted.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    net_prefix: str = Field(alias="NET_PREFIX")
    external_ips: str = Field(alias="EXTERNAL_IPS")
    image_prefix: str = Field(alias="IMAGE_PREFIX")
    image_suffix: str = Field(default="", alias="IMAGE_SUFFIX")
    namespace: str = Field(alias="NAMESPACE")
    tikv_cluster: str = Field(alias="TIKV_CLUSTER")
    image_pull_secret: str = Field(default="", alias="IMAGE_PULL_SECRET")
    extra: Dict[str, str] = Field(default_factory=dict)

    @field_validator("image_suffix", "image_pull_secret", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        """Optional keys read as empty string when absent or null."""
        return "" if value is None else value

    @property
    def has_pull_secret(self) -> bool:
        return bool(self.image_pull_secret)


# ---------------------------------------------------------------------------
# Key sets - order matters: the first missing key is the one reported.
# ---------------------------------------------------------------------------

REQUIRED_KEYS: list[str] = [
    "NET_PREFIX",
    "EXTERNAL_IPS",
    "IMAGE_PREFIX",
    "NAMESPACE",
    "TIKV_CLUSTER",
]

OPTIONAL_KEYS: list[str] = [
    "IMAGE_SUFFIX",
    "IMAGE_PULL_SECRET",
]

KNOWN_KEYS: frozenset[str] = frozenset(REQUIRED_KEYS + OPTIONAL_KEYS)
