# =============================================================================
# DOCKGEN GIT CLIENT TESTS
# =============================================================================
# Tests for the repository stager and credential URL handling.
# =============================================================================

from unittest.mock import patch

import pytest

from conftest import FakeRunner, clone_into
from dockgen.domain.errors import CredentialMissingError, StagingFailedError
from dockgen.infra.git_client import (
    RepositoryStager,
    embed_credential,
    normalize_location,
    public_location,
    redact_location,
    sanitize,
    split_userinfo,
)
from dockgen.infra.process import CommandResult


class TestUrlHelpers:
    """Test URL normalization and credential embedding."""

    def test_bare_location_gets_https(self):
        assert normalize_location("github.com/org/app") == "https://github.com/org/app"

    def test_full_url_unchanged(self):
        assert normalize_location("http://git.local/org/app.git") == "http://git.local/org/app.git"

    def test_whitespace_trimmed(self):
        assert normalize_location("  github.com/org/app\n") == "https://github.com/org/app"

    def test_embed_credential(self):
        url = embed_credential("github.com/org/app", "ghp_abc123")
        assert url == "https://ghp_abc123@github.com/org/app"

    def test_embed_credential_percent_encodes(self):
        url = embed_credential("https://github.com/org/app.git", "to/ken@:#")
        assert url == "https://to%2Fken%40%3A%23@github.com/org/app.git"

    def test_embed_credential_replaces_existing_userinfo(self):
        url = embed_credential("https://old:pw@git.local:8443/org/app", "new")
        assert url == "https://new@git.local:8443/org/app"

    def test_redact_location(self):
        assert redact_location("https://ghp_abc@github.com/org/app") == "https://[REDACTED]@github.com/org/app"
        assert redact_location("github.com/org/app") == "https://github.com/org/app"

    def test_sanitize_raw_and_encoded(self):
        text = "fatal: https://a%2Fb@host and a/b"
        assert sanitize(text, "a/b") == "fatal: https://[REDACTED]@host and [REDACTED]"

    def test_sanitize_without_credential(self):
        assert sanitize("fatal: nope", None) == "fatal: nope"

    def test_token_with_slash_is_userinfo(self):
        assert split_userinfo("https://ghp_a/b:c@github.com/o/r") == ("https", "github.com/o/r", "ghp_a/b:c")

    def test_redact_token_with_slash(self):
        assert redact_location("https://ghp_Leaky/Token@github.com/o/r") == "https://[REDACTED]@github.com/o/r"

    def test_embed_replaces_token_with_slash(self):
        url = embed_credential("https://ghp_Old/Token@GitHub.com/o/r", "new")
        assert url == "https://new@github.com/o/r"

    def test_public_location(self):
        assert public_location("https://tok@github.com/o/r") == "https://github.com/o/r"

    @pytest.mark.parametrize(
        "location",
        ["git@github.com:org/repo.git", "https://github.com:99999/o/r", "http://[github.com/o/r", "https:///o/r"],
    )
    def test_embed_rejects_malformed_location(self, location):
        with pytest.raises(ValueError):
            embed_credential(location, "tok")


class TestRepositoryStager:
    """Test RepositoryStager.stage()."""

    def test_clones_into_workspace(self, workspace):
        runner = FakeRunner({"git clone": clone_into({"package.json": "{}"})})
        stager = RepositoryStager(runner=runner)

        result = stager.stage("github.com/org/app", workspace, "tok")

        assert result is workspace
        assert (workspace.path / "package.json").exists()
        args = runner.calls[0]["args"]
        assert args == ["git", "clone", "https://tok@github.com/org/app", str(workspace.path)]
        assert runner.calls[0]["env"]["GIT_TERMINAL_PROMPT"] == "0"

    def test_default_credential(self, workspace):
        runner = FakeRunner()
        RepositoryStager(runner=runner, default_credential="fallback").stage("github.com/o/r", workspace)
        assert "https://fallback@github.com/o/r" in runner.calls[0]["args"]

    def test_default_credential_from_env(self, workspace):
        runner = FakeRunner()
        with patch.dict("os.environ", {"GITHUB_PAT": "from-env"}):
            stager = RepositoryStager(runner=runner)
        stager.stage("github.com/o/r", workspace)
        assert "https://from-env@github.com/o/r" in runner.calls[0]["args"]

    def test_request_credential_wins(self, workspace):
        runner = FakeRunner()
        RepositoryStager(runner=runner, default_credential="fallback").stage("github.com/o/r", workspace, "mine")
        assert "https://mine@github.com/o/r" in runner.calls[0]["args"]

    def test_credential_missing(self, workspace):
        runner = FakeRunner()
        with pytest.raises(CredentialMissingError):
            RepositoryStager(runner=runner).stage("github.com/o/r", workspace)
        assert runner.calls == []

    def test_clone_failure_surfaces_stderr(self, workspace):
        runner = FakeRunner(
            {"git clone": CommandResult(128, "", "fatal: repository 'https://github.com/o/r/' not found")}
        )
        with pytest.raises(StagingFailedError) as exc_info:
            RepositoryStager(runner=runner).stage("github.com/o/r", workspace, "tok")
        assert "repository 'https://github.com/o/r/' not found" in exc_info.value.diagnostic

    def test_credential_never_logged_or_returned(self, workspace, capsys):
        secret = "ghp_SuperSecret/42"
        runner = FakeRunner(
            {"git clone": CommandResult(128, "", f"fatal: could not read from https://{secret}@github.com")}
        )

        with pytest.raises(StagingFailedError) as exc_info:
            RepositoryStager(runner=runner).stage("github.com/o/r", workspace, secret)

        captured = capsys.readouterr()
        assert secret not in captured.out + captured.err
        assert "ghp_SuperSecret%2F42" not in captured.out + captured.err
        assert secret not in str(exc_info.value)
        assert "[REDACTED]" in str(exc_info.value)

    def test_malformed_location_is_staging_failure(self, workspace):
        runner = FakeRunner()
        with pytest.raises(StagingFailedError, match="Invalid repository location"):
            RepositoryStager(runner=runner).stage("git@github.com:org/repo.git", workspace, "tok")
        assert runner.calls == []

    def test_remote_scrubbed_after_clone(self, workspace):
        runner = FakeRunner()

        RepositoryStager(runner=runner).stage("https://old@github.com/o/r", workspace, "ghp_tok")

        scrub = runner.calls[1]
        assert scrub["args"] == ["git", "remote", "set-url", "origin", "https://github.com/o/r"]
        assert scrub["cwd"] == workspace.path

    def test_remote_scrub_failure(self, workspace):
        runner = FakeRunner({"git remote": CommandResult(2, "", "error: No such remote 'origin'")})
        with pytest.raises(StagingFailedError, match="set-url"):
            RepositoryStager(runner=runner).stage("github.com/o/r", workspace, "tok")
