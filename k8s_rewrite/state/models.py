"""Run summary model.

Serialised with sorted keys for ``--json`` output::

    {
      "apply_script": "/work/k8s.v1/apply.sh",
      "manifests": ["./deploy/app.yaml", "./svc.yaml"],
      "output_dir": "/work/k8s.v1",
      "replacements": {"__NAMESPACE__": 4, ...},
      "suffix": "v1",
      "template_dir": "/opt/k8s-rewrite/k8s",
      "unresolved": {}
    }
"""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field


class RewriteResult(BaseModel):
    """Outcome of one successful rewrite run."""

    suffix: str
    template_dir: str
    output_dir: str
    apply_script: str = ""
    manifests: List[str] = Field(default_factory=list)
    replacements: Dict[str, int] = Field(default_factory=dict)
    unresolved: Dict[str, List[str]] = Field(default_factory=dict)

    @property
    def total_replacements(self) -> int:
        return sum(self.replacements.values())

    def to_sorted_json(self, indent: int = 2) -> str:
        """Serialise with sorted keys for deterministic output."""
        import json

        return json.dumps(
            self.model_dump(mode="json"),
            indent=indent,
            sort_keys=True,
        )
