"""Tests for the acid-storage CLI project commands."""
import pytest
import yaml

from acid_storage.cli import main as cli
from acid_storage.projects.domains.decoder import DEFAULT_VCS_SIDECAR
from acid_storage.projects.domains.identifiers import project_id, short_sha
from acid_storage.projects.workflows.project_operations import Loader


@pytest.fixture
def seeded_store(store, make_record, monkeypatch):
    """Route the CLI's loader to an in-memory store holding 'myproj'."""
    store.add("default", make_record(
        project_id("myproj"),
        {"projectName": "my-repo"},
        sshKey="a$b",
        githubToken="ghp_token",
        secrets='{"API_KEY":"abc"}',
    ))
    monkeypatch.setattr(cli, "new", lambda: Loader(store))
    return store


class TestProjectsGet:
    """Test `acid-storage projects get`."""

    def test_prints_masked_yaml(self, seeded_store, capsys):
        cli.main(["projects", "get", "myproj", "--namespace", "default"])

        output = yaml.safe_load(capsys.readouterr().out)
        assert output["name"] == project_id("myproj")
        assert output["kubernetes_namespace"] == "default"
        assert output["vcs_sidecar_image"] == DEFAULT_VCS_SIDECAR
        assert output["github_token"] == cli.MASK
        assert output["shared_secret"] == ""
        assert output["repo"]["ssh_key"] == cli.MASK
        assert output["secrets"] == {"API_KEY": cli.MASK}

    def test_reveal(self, seeded_store, capsys):
        cli.main(["projects", "get", "myproj", "-n", "default", "--reveal"])

        output = yaml.safe_load(capsys.readouterr().out)
        assert output["repo"]["ssh_key"] == "a\nb"
        assert output["secrets"] == {"API_KEY": "abc"}

    def test_quiet(self, seeded_store, capsys):
        cli.main(["projects", "get", "myproj", "-n", "default", "-q"])
        assert capsys.readouterr().out == project_id("myproj") + "\n"

    def test_timeout_forwarded(self, seeded_store):
        cli.main(["projects", "get", "myproj", "-n", "default", "-q", "--timeout", "3"])
        assert seeded_store.reads == [("default", project_id("myproj"), 3.0)]

    def test_namespace_from_env(self, seeded_store, monkeypatch, capsys):
        monkeypatch.setenv("GCP_PROJECT", "default")
        cli.main(["projects", "get", "myproj", "-q"])
        assert capsys.readouterr().out.strip() == project_id("myproj")

    def test_not_found_exits_1(self, seeded_store, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["projects", "get", "missing", "-n", "default"])

        assert exc_info.value.code == 1
        assert "not found" in capsys.readouterr().err

    def test_connectivity_error_exits_1(self, seeded_store, capsys):
        seeded_store.offline = True

        with pytest.raises(SystemExit) as exc_info:
            cli.main(["projects", "get", "myproj", "-n", "default"])

        assert exc_info.value.code == 1
        assert "connection refused" in capsys.readouterr().err

    def test_invalid_namespace_exits_2(self, seeded_store):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["projects", "get", "myproj", "-n", "Not_Valid"])

        assert exc_info.value.code == 2
        assert seeded_store.reads == []

    def test_missing_namespace_exits_2(self, seeded_store, temp_home):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["projects", "get", "myproj"])

        assert exc_info.value.code == 2


class TestProjectsKeys:
    """Test the key derivation commands."""

    def test_key(self, capsys):
        cli.main(["projects", "key", "myproj"])
        assert capsys.readouterr().out.strip() == "acid-" + short_sha("myproj")

    def test_key_passthrough(self, capsys):
        cli.main(["projects", "key", "acid-abc"])
        assert capsys.readouterr().out.strip() == "acid-abc"

    def test_key_rejects_whitespace(self):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["projects", "key", "my proj"])

        assert exc_info.value.code == 2

    def test_short_sha(self, capsys):
        cli.main(["projects", "short-sha", "hello"])
        assert capsys.readouterr().out.strip() == "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e730433"


class TestUsage:
    """Test usage errors and version output."""

    def test_no_command_exits_2(self):
        with pytest.raises(SystemExit) as exc_info:
            cli.main([])

        assert exc_info.value.code == 2

    def test_projects_without_subcommand_exits_2(self):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["projects"])

        assert exc_info.value.code == 2

    def test_version(self, capsys):
        cli.main(["version"])
        assert capsys.readouterr().out.strip() == f"acid-storage {cli.VERSION}"
