"""Run summary records."""

from k8s_rewrite.state.models import RewriteResult

__all__ = ["RewriteResult"]
