"""Rewrite pipeline orchestration."""

from k8s_rewrite.workflow.rewrite import (
    EXIT_FAILURE,
    EXIT_SUCCESS,
    rewrite,
    run_rewrite,
    validate_inputs,
)

__all__ = [
    "EXIT_FAILURE",
    "EXIT_SUCCESS",
    "rewrite",
    "run_rewrite",
    "validate_inputs",
]
