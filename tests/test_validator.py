# =============================================================================
# DOCKGEN VALIDATOR TESTS
# =============================================================================
# Tests for COPY source validation against a workspace.
# =============================================================================

import json

import pytest

from dockgen.core.generator import DockerfileGenerator
from dockgen.core.validator import copy_sources, iter_instructions, validate
from dockgen.domain.models import StackVariant


class TestInstructionParsing:
    """Tests for Dockerfile tokenizing."""

    def test_continuations_joined(self):
        dockerfile = "FROM node\nCOPY a \\\n  b \\\n  ./dest/\n"
        assert list(iter_instructions(dockerfile))[1] == ("COPY", "a  b  ./dest/")

    def test_comments_skipped(self):
        dockerfile = "# syntax=docker/dockerfile:1\nFROM node\n# COPY ghost .\n"
        assert [k for k, _ in iter_instructions(dockerfile)] == ["FROM"]

    def test_lowercase_keyword(self):
        assert list(iter_instructions("copy a b")) == [("COPY", "a b")]

    def test_sources_exclude_destination(self):
        assert copy_sources("package.json yarn.lock ./") == ["package.json", "yarn.lock"]

    def test_flags_ignored(self):
        assert copy_sources("--chown=node:node --chmod=644 app.js /app/") == ["app.js"]

    def test_stage_copy(self):
        assert copy_sources("--from=builder /app/dist .") is None

    def test_json_form(self):
        assert copy_sources('["package.json", "tsconfig.json", "./"]') == ["package.json", "tsconfig.json"]

    def test_heredoc_source(self):
        assert copy_sources("<<EOF /app/config") == []


class TestValidate:
    """Tests for validate()."""

    def test_missing_plain_path_reported(self, workspace):
        result = validate("FROM node\nCOPY does-not-exist.txt /app/\n", workspace)
        assert result.valid is False
        assert result.missing_paths == ["does-not-exist.txt"]

    def test_all_missing_paths_reported_in_order(self, workspace):
        dockerfile = "FROM node\nCOPY src ./src\nCOPY public tsconfig.json ./\n"
        result = validate(dockerfile, workspace)
        assert result.missing_paths == ["src", "public", "tsconfig.json"]

    def test_existing_paths_pass(self, workspace):
        (workspace.path / "src").mkdir()
        (workspace.path / "package.json").write_text("{}")
        result = validate("FROM node\nCOPY package.json ./\nCOPY src ./src\nCOPY . .\n", workspace)
        assert result.valid
        assert result.missing_paths == []

    def test_from_copies_never_flagged(self, workspace):
        dockerfile = "FROM node AS b\nFROM nginx\nCOPY --from=b /app/nowhere .\n"
        assert validate(dockerfile, workspace).valid

    @pytest.mark.parametrize("source", ["*.json", "src/**/*.ts", "file?.txt", "[ab].js"])
    def test_wildcards_never_flagged(self, workspace, source):
        assert validate(f"FROM node\nCOPY {source} ./\n", workspace).valid

    def test_nginx_conf_trusted(self, workspace):
        dockerfile = "FROM nginx\nCOPY nginx.conf /etc/nginx/conf.d/default.conf\n"
        assert validate(dockerfile, workspace).valid

    def test_other_managers_lock_file_ignored(self, workspace):
        (workspace.path / "yarn.lock").write_text("")
        dockerfile = "FROM node\nCOPY pnpm-lock.yaml package-lock.json yarn.lock ./\n"
        assert validate(dockerfile, workspace).valid

    def test_inferred_lock_file_missing(self, workspace):
        # No lock file at all: npm is inferred and its lock is absent
        result = validate("FROM node\nCOPY package-lock.json ./\n", workspace)
        assert result.missing_paths == ["package-lock.json"]

    def test_inferred_lock_file_with_dot_prefix(self, workspace):
        (workspace.path / "pnpm-lock.yaml").write_text("")
        assert validate("FROM node\nCOPY ./pnpm-lock.yaml ./\n", workspace).valid

    def test_path_escaping_workspace_is_missing(self, workspace):
        (workspace.path.parent / "secret.txt").write_text("x")
        result = validate("FROM node\nCOPY ../secret.txt ./\n", workspace)
        assert result.missing_paths == ["../secret.txt"]

    def test_chown_copy_checked(self, workspace):
        result = validate("FROM node\nCOPY --chown=node:node server.js ./\n", workspace)
        assert result.missing_paths == ["server.js"]

    def test_non_copy_instructions_ignored(self, workspace):
        dockerfile = "FROM node\nADD https://example.com/x.tgz /tmp/\nRUN cp missing elsewhere\n"
        assert validate(dockerfile, workspace).valid


class TestRoundTrip:
    """Generated Dockerfiles validate against the workspace they came from."""

    def test_vite_react_with_dist_only(self, workspace, vite_manifest):
        (workspace.path / "package.json").write_text(json.dumps(vite_manifest))
        (workspace.path / "package-lock.json").write_text("{}")
        (workspace.path / "dist").mkdir()

        dockerfile = DockerfileGenerator().generate(StackVariant.REACT, workspace)

        assert not (workspace.path / "build").exists()
        assert validate(dockerfile, workspace).valid

    def test_pnpm_nextjs(self, workspace, nextjs_manifest):
        (workspace.path / "package.json").write_text(json.dumps(nextjs_manifest))
        (workspace.path / "pnpm-lock.yaml").write_text("lockfileVersion: '6.0'")

        assert workspace.package_manager.lock_file == "pnpm-lock.yaml"
        dockerfile = DockerfileGenerator().generate(StackVariant.NEXTJS, workspace)

        assert "pnpm install --frozen-lockfile" in dockerfile
        assert validate(dockerfile, workspace).valid

    def test_npm_without_lock_file_is_reported(self, workspace, nextjs_manifest):
        (workspace.path / "package.json").write_text(json.dumps(nextjs_manifest))
        dockerfile = DockerfileGenerator().generate(StackVariant.NEXTJS, workspace)
        assert validate(dockerfile, workspace).missing_paths == ["package-lock.json"]
