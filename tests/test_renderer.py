"""Tests for k8s_rewrite.render.renderer."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from k8s_rewrite.config.loader import build_config
from k8s_rewrite.errors import CopyError
from k8s_rewrite.render.renderer import (
    ALL_TOKENS,
    PLACEHOLDER_KEYS,
    PULL_SECRETS_TOKEN,
    build_substitutions,
    find_manifests,
    find_unresolved,
    pull_secret_fragment,
    render_text,
    substitute_tree,
)

from conftest import NOTES

VALUES = {
    "NET_PREFIX": "10.0",
    "EXTERNAL_IPS": "1.2.3.4",
    "IMAGE_PREFIX": "registry/",
    "NAMESPACE": "prod",
    "TIKV_CLUSTER": "main",
}


def _subs(**overrides: str):
    return build_substitutions(build_config({**VALUES, **overrides}))


# ── Constants ────────────────────────────────────────────────────────────


class TestConstants:
    def test_seven_tokens(self):
        assert len(ALL_TOKENS) == 7
        assert PULL_SECRETS_TOKEN in ALL_TOKENS

    def test_token_form(self):
        for token in ALL_TOKENS:
            assert token.startswith("__") and token.endswith("__")

    def test_placeholder_order(self):
        assert [t for t, _ in PLACEHOLDER_KEYS] == [
            "__NET_PREFIX__",
            "__EXTERNAL_IPS__",
            "__IMAGE_PREFIX__",
            "__IMAGE_SUFFIX__",
            "__NAMESPACE__",
            "__TIKV_CLUSTER__",
        ]


# ── Pull secret fragment ─────────────────────────────────────────────────


class TestPullSecretFragment:
    def test_empty_secret(self):
        assert pull_secret_fragment("") == ""

    def test_named_secret(self):
        assert pull_secret_fragment("my-secret") == (
            'imagePullSecrets:\n      - name: "my-secret"'
        )

    def test_two_lines(self):
        assert len(pull_secret_fragment("s").splitlines()) == 2


# ── build_substitutions ──────────────────────────────────────────────────


class TestBuildSubstitutions:
    def test_order_and_values(self):
        subs = _subs(IMAGE_SUFFIX="-dbg")
        assert subs == [
            ("__NET_PREFIX__", "10.0"),
            ("__EXTERNAL_IPS__", "1.2.3.4"),
            ("__IMAGE_PREFIX__", "registry/"),
            ("__IMAGE_SUFFIX__", "-dbg"),
            ("__NAMESPACE__", "prod"),
            ("__TIKV_CLUSTER__", "main"),
            ("__MAYBE_PULL_SECRETS__", ""),
        ]

    def test_pull_secret_value(self):
        subs = dict(_subs(IMAGE_PULL_SECRET="my-secret"))
        assert 'name: "my-secret"' in subs[PULL_SECRETS_TOKEN]


# ── render_text ──────────────────────────────────────────────────────────


class TestRenderText:
    def test_every_occurrence_replaced(self):
        text = "a: __NAMESPACE__\nb: __NAMESPACE__\n"
        rendered, counts = render_text(text, _subs())
        assert rendered == "a: prod\nb: prod\n"
        assert counts["__NAMESPACE__"] == 2

    def test_counts_zero_for_absent_tokens(self):
        _, counts = render_text("nothing here", _subs())
        assert set(counts) == set(ALL_TOKENS)
        assert sum(counts.values()) == 0

    def test_adjacent_tokens(self):
        rendered, _ = render_text("__IMAGE_PREFIX__proxy__IMAGE_SUFFIX__", _subs(IMAGE_SUFFIX=":v1"))
        assert rendered == "registry/proxy:v1"

    def test_empty_image_suffix(self):
        rendered, _ = render_text("__IMAGE_PREFIX__proxy__IMAGE_SUFFIX__", _subs())
        assert rendered == "registry/proxy"

    def test_pull_secret_removed_when_unset(self):
        rendered, _ = render_text("spec:\n  __MAYBE_PULL_SECRETS__\n", _subs())
        assert rendered == "spec:\n  \n"
        assert PULL_SECRETS_TOKEN not in rendered

    def test_pull_secret_fragment_when_set(self):
        rendered, _ = render_text(
            "      __MAYBE_PULL_SECRETS__\n", _subs(IMAGE_PULL_SECRET="my-secret")
        )
        assert rendered == (
            '      imagePullSecrets:\n      - name: "my-secret"\n'
        )

    def test_special_characters_not_escaped(self):
        rendered, _ = render_text("x: __NET_PREFIX__", _subs(NET_PREFIX="a#b&c\\1"))
        assert rendered == "x: a#b&c\\1"

    def test_value_containing_later_token_is_substituted_again(self):
        rendered, _ = render_text("x: __NET_PREFIX__", _subs(NET_PREFIX="__NAMESPACE__"))
        assert rendered == "x: prod"

    def test_value_containing_earlier_token_is_left(self):
        rendered, _ = render_text("x: __NAMESPACE__", _subs(NAMESPACE="__NET_PREFIX__"))
        assert rendered == "x: __NET_PREFIX__"

    def test_deterministic(self):
        text = "__NET_PREFIX__ __TIKV_CLUSTER__"
        assert render_text(text, _subs()) == render_text(text, _subs())


# ── find_manifests ───────────────────────────────────────────────────────


class TestFindManifests:
    def test_recursive_and_sorted(self, template_dir):
        found = [p.relative_to(template_dir).as_posix() for p in find_manifests(template_dir)]
        assert found == ["proxy/deployment.yaml", "service.yaml"]

    def test_only_yaml_extension(self, tmp_path):
        (tmp_path / "a.yaml").write_text("")
        (tmp_path / "b.yml").write_text("")
        (tmp_path / "c.yaml.bak").write_text("")
        (tmp_path / "d.json").write_text("")
        found = [p.name for p in find_manifests(tmp_path)]
        assert found == ["a.yaml"]

    def test_directories_named_yaml_skipped(self, tmp_path):
        (tmp_path / "dir.yaml").mkdir()
        (tmp_path / "dir.yaml" / "inner.yaml").write_text("")
        found = [p.relative_to(tmp_path).as_posix() for p in find_manifests(tmp_path)]
        assert found == ["dir.yaml/inner.yaml"]

    def test_deep_nesting(self, tmp_path):
        deep = tmp_path / "a" / "b" / "c" / "d"
        deep.mkdir(parents=True)
        (deep / "x.yaml").write_text("")
        assert len(find_manifests(tmp_path)) == 1

    def test_symlinked_manifest_skipped(self, tmp_path):
        target = tmp_path / "outside.yaml"
        target.write_text("__NAMESPACE__")
        root = tmp_path / "root"
        root.mkdir()
        os.symlink(target, root / "link.yaml")
        assert find_manifests(root) == []

    def test_empty_tree(self, tmp_path):
        assert find_manifests(tmp_path) == []


# ── substitute_tree ──────────────────────────────────────────────────────


class TestSubstituteTree:
    def test_no_tokens_remain(self, template_dir):
        substitute_tree(template_dir, _subs())
        for path in find_manifests(template_dir):
            text = path.read_text()
            for token in ALL_TOKENS:
                assert token not in text

    def test_values_written(self, template_dir):
        substitute_tree(template_dir, _subs(IMAGE_SUFFIX=":v1"))
        deployment = (template_dir / "proxy" / "deployment.yaml").read_text()
        assert "namespace: prod" in deployment
        assert "image: registry/proxy:v1" in deployment
        assert '"main-pd:2379"' in deployment
        assert '"10.0.0.0/16"' in deployment
        service = (template_dir / "service.yaml").read_text()
        assert "- 1.2.3.4" in service

    def test_totals(self, template_dir):
        totals = substitute_tree(template_dir, _subs())
        assert totals["__NAMESPACE__"] == 2
        assert totals["__EXTERNAL_IPS__"] == 1
        assert totals[PULL_SECRETS_TOKEN] == 1

    def test_non_manifest_untouched(self, template_dir):
        substitute_tree(template_dir, _subs())
        assert (template_dir / "NOTES.txt").read_text() == NOTES

    def test_pull_secret_in_tree(self, template_dir):
        substitute_tree(template_dir, _subs(IMAGE_PULL_SECRET="my-secret"))
        deployment = (template_dir / "proxy" / "deployment.yaml").read_text()
        assert "imagePullSecrets:" in deployment
        assert 'name: "my-secret"' in deployment

    def test_crlf_line_endings_preserved(self, tmp_path):
        manifest = tmp_path / "ns.yaml"
        manifest.write_bytes(b"ns: __NAMESPACE__\r\nx: 1\r\n")
        substitute_tree(tmp_path, _subs())
        assert manifest.read_bytes() == b"ns: prod\r\nx: 1\r\n"

    def test_mixed_line_endings_preserved(self, tmp_path):
        manifest = tmp_path / "ns.yaml"
        manifest.write_bytes(b"a: __NAMESPACE__\r\nb: 1\nc: 2\r")
        substitute_tree(tmp_path, _subs())
        assert manifest.read_bytes() == b"a: prod\r\nb: 1\nc: 2\r"

    def test_undecodable_manifest_raises(self, tmp_path):
        (tmp_path / "bad.yaml").write_bytes(b"\xff\xfe\x00bad")
        with pytest.raises(CopyError, match="bad.yaml"):
            substitute_tree(tmp_path, _subs())


# ── find_unresolved ──────────────────────────────────────────────────────


class TestFindUnresolved:
    def test_clean_tree(self, template_dir):
        substitute_tree(template_dir, _subs())
        assert find_unresolved(template_dir) == {}

    def test_reports_leftovers(self, template_dir):
        substitute_tree(template_dir, _subs(NAMESPACE="__NET_PREFIX__"))
        leftovers = find_unresolved(template_dir)
        assert leftovers["service.yaml"] == ["__NET_PREFIX__"]
        assert "proxy/deployment.yaml" in leftovers

    def test_unrendered_template(self, template_dir: Path):
        leftovers = find_unresolved(template_dir)
        assert set(leftovers) == {"proxy/deployment.yaml", "service.yaml"}
