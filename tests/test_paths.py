"""Tests for path management."""

from pathlib import Path

from fgwork.config.paths import (
    ENV_VAR,
    get_all_paths,
    get_config_path,
    get_fgwork_home,
    get_logs_path,
    get_store_path,
)


class TestGetFgworkHome:
    def test_default_is_home_dot_fgwork(self, monkeypatch):
        monkeypatch.delenv(ENV_VAR, raising=False)
        get_fgwork_home.cache_clear()

        assert get_fgwork_home() == Path.home() / ".fgwork"

    def test_respects_env_var(self, monkeypatch, tmp_path):
        custom_path = tmp_path / "custom"
        monkeypatch.setenv(ENV_VAR, str(custom_path))
        get_fgwork_home.cache_clear()

        assert get_fgwork_home() == custom_path.resolve()

    def test_expands_tilde_in_env_var(self, monkeypatch):
        monkeypatch.setenv(ENV_VAR, "~/my-fgwork")
        get_fgwork_home.cache_clear()

        assert get_fgwork_home() == (Path.home() / "my-fgwork").resolve()


class TestDerivedPaths:
    def test_derived_paths(self, monkeypatch, tmp_path):
        monkeypatch.setenv(ENV_VAR, str(tmp_path))
        get_fgwork_home.cache_clear()
        home = tmp_path.resolve()

        assert get_config_path() == home / "config.toml"
        assert get_store_path() == home / "store.json"
        assert get_logs_path() == home / "logs"

    def test_all_paths(self, monkeypatch, tmp_path):
        monkeypatch.setenv(ENV_VAR, str(tmp_path))
        get_fgwork_home.cache_clear()

        paths = get_all_paths()

        assert set(paths) == {"home", "config", "store", "logs"}
        assert paths["store"] == get_store_path()
