"""Tests for configuration loading and saving."""

from __future__ import annotations

import stat
import tomllib
from pathlib import Path

import pytest

from wikit.config import (
    WikitConfig,
    add_instance,
    instances_from_env,
    load_config,
    read_config_file,
    remove_instance,
    save_config,
    user_config_path,
)
from wikit.config.loader import label_from_prefix
from wikit.errors import ConfigError


def test_instances_from_env_pairs_url_and_key() -> None:
    env = {
        "MY_WIKI_API_URL": "https://wiki.test/graphql",
        "MY_WIKI_API_KEY": "secret",
        "ORPHAN_API_URL": "https://orphan.test/graphql",
        "PATH": "/usr/bin",
    }

    instances = instances_from_env(env)

    assert instances == {
        "my_wiki": {
            "url": "https://wiki.test/graphql",
            "key": "secret",
            "label": "My Wiki",
        }
    }


def test_label_from_prefix() -> None:
    assert label_from_prefix("PROD") == "Prod"
    assert label_from_prefix("TEAM__DOCS") == "Team Docs"


def test_load_config_defaults() -> None:
    config = load_config(environ={})

    assert config.instances == {}
    assert config.default_instance is None
    assert config.tui.success_duration_ms == 3000
    assert config.http.timeout == 30.0


def test_local_file_overrides_user_file(write_config) -> None:
    user_path = user_config_path()
    user_path.parent.mkdir(parents=True)
    user_path.write_text(
        'default_instance = "prod"\n'
        "[instances.prod]\n"
        'url = "https://prod.test/graphql"\n'
        'key = "user-key"\n'
        "[tui]\n"
        "items_limit = 8\n"
    )
    write_config(
        "[instances.prod]\n"
        'url = "https://prod.test/graphql"\n'
        'key = "local-key"\n'
    )

    config = load_config(environ={})

    assert config.instances["prod"].key == "local-key"
    assert config.tui.items_limit == 8
    assert config.default_instance == "prod"


def test_explicit_path_wins(write_config, tmp_path: Path) -> None:
    write_config('default_instance = "local"\n')
    explicit = tmp_path / "explicit.toml"
    explicit.write_text('default_instance = "explicit"\n')

    config = load_config(explicit, environ={})

    assert config.default_instance == "explicit"


def test_missing_explicit_path_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "missing.toml", environ={})


def test_config_path_from_environment(tmp_path: Path) -> None:
    path = tmp_path / "env.toml"
    path.write_text("[http]\ntimeout = 5.0\n")

    config = load_config(environ={"WIKIT_CONFIG_PATH": str(path)})

    assert config.http.timeout == 5.0


def test_invalid_toml_raises_config_error(write_config) -> None:
    write_config("this is not = = toml")

    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(environ={})


def test_file_instances_beat_environment(write_config) -> None:
    write_config(
        "[instances.prod]\n"
        'url = "https://file.test/graphql"\n'
        'key = "file-key"\n'
    )
    env = {
        "PROD_API_URL": "https://env.test/graphql",
        "PROD_API_KEY": "env-key",
        "STAGING_API_URL": "https://staging.test/graphql",
        "STAGING_API_KEY": "staging-key",
    }

    config = load_config(environ=env)

    assert config.instances["prod"].url == "https://file.test/graphql"
    assert config.instances["staging"].label == "Staging"


def test_default_instance_from_environment() -> None:
    env = {
        "PROD_API_URL": "https://prod.test/graphql",
        "PROD_API_KEY": "k1",
        "STAGING_API_URL": "https://staging.test/graphql",
        "STAGING_API_KEY": "k2",
        "WIKIT_DEFAULT_INSTANCE": "STAGING",
    }

    config = load_config(environ=env)

    assert config.resolve_instance() == "staging"


def test_resolve_instance_order() -> None:
    config = add_instance(WikitConfig(), "prod", "https://prod.test/graphql", "k1")
    config = add_instance(config, "staging", "https://staging.test/graphql", "k2")

    assert config.resolve_instance() == "prod"
    assert config.resolve_instance("staging") == "staging"

    with pytest.raises(ConfigError, match="available: prod, staging"):
        config.resolve_instance("missing")


def test_resolve_instance_without_instances() -> None:
    with pytest.raises(ConfigError, match="No instances configured"):
        WikitConfig().resolve_instance()


def test_add_and_remove_instance() -> None:
    config = add_instance(WikitConfig(), "prod", "https://prod.test/graphql", "k1", label="Production")
    config = add_instance(config, "staging", "https://staging.test/graphql", "k2", make_default=True)

    assert config.default_instance == "staging"
    assert config.instances["prod"].display_name("prod") == "Production"
    assert config.instances["staging"].display_name("staging") == "staging"

    config = remove_instance(config, "staging")
    assert config.instance_ids() == ["prod"]
    assert config.default_instance == "prod"

    config = remove_instance(config, "prod")
    assert config.default_instance is None

    with pytest.raises(ConfigError, match="Unknown instance"):
        remove_instance(config, "prod")


def test_save_config_roundtrip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.toml"
    config = add_instance(WikitConfig(), "prod", "https://prod.test/graphql", "secret")

    assert save_config(config, path) == path

    mode = stat.S_IMODE(path.stat().st_mode)
    assert mode == 0o600
    with open(path, "rb") as f:
        raw = tomllib.load(f)
    assert raw["instances"]["prod"] == {"url": "https://prod.test/graphql", "key": "secret"}
    assert isinstance(raw["logging"]["file"], str)

    loaded = read_config_file(path)
    assert loaded.default_instance == "prod"
    assert loaded.instances["prod"].key == "secret"


def test_read_config_file_ignores_environment(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("PROD_API_URL", "https://env.test/graphql")
    monkeypatch.setenv("PROD_API_KEY", "env-key")

    config = read_config_file(tmp_path / "missing.toml")

    assert config.instances == {}
