"""Output tree handling: template copy and apply-script generation."""

from k8s_rewrite.tree.apply_script import (
    APPLY_SCRIPT_NAME,
    DEFAULT_APPLY_COMMAND,
    find_apply_targets,
    render_apply_script,
    write_apply_script,
)
from k8s_rewrite.tree.copier import (
    TEMPLATE_DIR_ENV,
    copy_template_tree,
    default_template_dir,
    output_dir_for,
    output_dir_name,
    remove_output_tree,
    validate_suffix,
)

__all__ = [
    "APPLY_SCRIPT_NAME",
    "DEFAULT_APPLY_COMMAND",
    "TEMPLATE_DIR_ENV",
    "copy_template_tree",
    "default_template_dir",
    "find_apply_targets",
    "output_dir_for",
    "output_dir_name",
    "remove_output_tree",
    "render_apply_script",
    "validate_suffix",
    "write_apply_script",
]
