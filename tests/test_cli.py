from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from wikit import __version__
from wikit.api.client import GraphQLClient
from wikit.cli import app
from wikit.config import read_config_file

runner = CliRunner()

CONFIG = """
default_instance = "prod"

[instances.prod]
url = "https://prod.test/graphql"
key = "prod-secret-key"
label = "Production"

[instances.staging]
url = "https://staging.test/graphql"
key = "staging-secret-key"
"""


@pytest.fixture
def wiki(fake_wiki, monkeypatch):
    """Route every client built from config to the fake server."""
    original = GraphQLClient.from_config.__func__

    def from_config(cls, config, instance=None, transport=None):
        return original(cls, config, instance, fake_wiki.transport())

    monkeypatch.setattr(GraphQLClient, "from_config", classmethod(from_config))
    return fake_wiki


def test_version() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_config_add_list_use_remove() -> None:
    """Config commands write the user config file."""
    result = runner.invoke(
        app, ["config", "add", "prod", "https://prod.test/graphql", "prod-secret-key"]
    )
    assert result.exit_code == 0
    assert "Added instance 'prod'" in result.stdout

    result = runner.invoke(
        app,
        ["config", "add", "staging", "https://staging.test/graphql", "k2", "--label", "Staging"],
    )
    assert result.exit_code == 0

    result = runner.invoke(app, ["config", "list"])
    assert result.exit_code == 0
    assert "prod" in result.stdout
    assert "****-key" in result.stdout
    assert "prod-secret-key" not in result.stdout

    result = runner.invoke(app, ["config", "use", "staging"])
    assert result.exit_code == 0
    assert read_config_file().default_instance == "staging"

    result = runner.invoke(app, ["config", "use", "missing"])
    assert result.exit_code == 1
    assert "Unknown instance" in result.output

    result = runner.invoke(app, ["config", "remove", "staging"])
    assert result.exit_code == 0
    saved = read_config_file()
    assert saved.instance_ids() == ["prod"]
    assert saved.default_instance == "prod"


def test_config_commands_work_with_broken_config(write_config) -> None:
    write_config("not = = toml")

    result = runner.invoke(app, ["config", "add", "prod", "https://prod.test/graphql", "k"])

    assert result.exit_code == 0


def test_explicit_config_path_is_written(tmp_path: Path) -> None:
    path = tmp_path / "team.toml"
    path.write_text("")

    result = runner.invoke(
        app, ["--config", str(path), "config", "add", "team", "https://team.test/graphql", "k"]
    )

    assert result.exit_code == 0
    assert read_config_file(path).instances["team"].url == "https://team.test/graphql"


def test_unknown_instance_fails(write_config) -> None:
    write_config(CONFIG)

    result = runner.invoke(app, ["-i", "missing", "pages", "list"])

    assert result.exit_code == 1
    assert "Unknown instance 'missing'" in result.output


def test_pages_list(write_config, wiki) -> None:
    write_config(CONFIG)

    result = runner.invoke(app, ["pages", "list", "/en/docs", "--recursive"])

    assert result.exit_code == 0
    assert "/en/docs/setup/linux" in result.stdout
    assert "/de/docs/faq" not in result.stdout
    assert "3 page(s)" in result.stdout
    assert wiki.requests[0]["headers"]["authorization"] == "Bearer prod-secret-key"


def test_pages_list_uses_selected_instance(write_config, wiki) -> None:
    write_config(CONFIG)

    result = runner.invoke(app, ["--instance", "staging", "pages", "list", "--search", "faq"])

    assert result.exit_code == 0
    assert "/de/docs/faq" in result.stdout
    assert wiki.requests[0]["headers"]["authorization"] == "Bearer staging-secret-key"


def test_pages_delete_asks_for_confirmation(write_config, wiki) -> None:
    write_config(CONFIG)

    result = runner.invoke(app, ["pages", "delete", "/en/docs/setup"], input="n\n")

    assert result.exit_code == 0
    assert "About to delete 2 page(s)" in result.stdout
    assert "Aborted." in result.stdout
    assert len(wiki.pages) == 5


def test_pages_delete_partial_failure(write_config, wiki) -> None:
    write_config(CONFIG)
    wiki.failing_deletes = {4}

    result = runner.invoke(app, ["pages", "delete", "/en/docs/setup"], input="y\n")

    assert result.exit_code == 0
    assert "Deleted 1 page(s), 1 failed" in result.stdout
    assert [page["id"] for page in wiki.pages] == [1, 2, 4, 5]


def test_pages_delete_all_failed(write_config, wiki) -> None:
    write_config(CONFIG)
    wiki.failing_deletes = {3, 4}

    result = runner.invoke(app, ["pages", "delete", "/en/docs/setup", "--force"])

    assert result.exit_code == 1
    assert "Failed to delete all 2 page(s)" in result.stdout


def test_pages_delete_nothing_matches(write_config, wiki) -> None:
    write_config(CONFIG)

    result = runner.invoke(app, ["pages", "delete", "/en/nowhere", "--force"])

    assert result.exit_code == 0
    assert "No pages found" in result.stdout


def test_pages_export(write_config, wiki) -> None:
    write_config(CONFIG)

    result = runner.invoke(app, ["pages", "export", "out/pages.json"])

    assert result.exit_code == 0
    document = json.loads(Path("out/pages.json").read_text())
    assert document["instanceId"] == "prod"
    assert document["summary"]["totalPages"] == 5


def test_pages_move_and_render(write_config, wiki) -> None:
    write_config(CONFIG)

    result = runner.invoke(app, ["pages", "move", "3", "guides/setup", "--locale", "de"])
    assert result.exit_code == 0
    assert "Page 3 moved to de/guides/setup" in result.stdout

    result = runner.invoke(app, ["pages", "render", "3"])
    assert result.exit_code == 0
    assert "Page 3 rendered" in result.stdout


def test_status_healthy(write_config, wiki) -> None:
    write_config(CONFIG)

    result = runner.invoke(app, ["status"])

    assert result.exit_code == 0
    assert "Production" in result.stdout
    assert "HEALTHY" in result.stdout
    assert "Team Wiki" in result.stdout
    assert "4/5 published" in result.stdout
    assert "de, en" in result.stdout


def test_status_all_unreachable(write_config, wiki) -> None:
    write_config(CONFIG)
    wiki.unreachable = True

    result = runner.invoke(app, ["status", "--all"])

    assert result.exit_code == 1
    assert "Checking all instance health" in result.stdout
    assert result.stdout.count("UNHEALTHY") == 2
    assert "Cannot reach" in result.stdout


def test_commands_without_instances_fail() -> None:
    result = runner.invoke(app, ["status"])

    assert result.exit_code == 1
    assert "No instances configured" in result.output


def test_pages_list_with_html_response(write_config, wiki) -> None:
    write_config(CONFIG)
    wiki.raw_body = "<html>login</html>"

    result = runner.invoke(app, ["pages", "list"])

    assert result.exit_code == 1
    assert "GraphQL error 200" in result.output
