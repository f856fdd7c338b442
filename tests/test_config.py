"""Tests for src/config.py — PostmetaConfig, TOML loading, CLI overrides."""

from pathlib import Path

import pytest
from postmeta import config as config_module
from postmeta.config import PostmetaConfig, load_config, merge_cli_overrides


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    """Remove env vars and the global config so tests see TOML values only."""
    for key in ("POSTMETA_CONTENT_DIR", "POSTMETA_PATTERN", "POSTMETA_INCLUDE_DRAFTS"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(config_module, "GLOBAL_CONFIG_PATH", tmp_path / "no-global.toml")


class TestDefaults:
    def test_default_content(self):
        cfg = PostmetaConfig()
        assert cfg.content.directory == "src/content/blog"
        assert cfg.content.pattern == "**/*.md"
        assert cfg.content_dir == Path("src/content/blog")

    def test_default_listing(self):
        assert PostmetaConfig().listing.include_drafts is False


class TestLoadConfig:
    def test_load_from_explicit_path(self, tmp_path):
        toml_path = tmp_path / ".postmeta.toml"
        toml_path.write_text(
            '[content]\ndirectory = "posts"\npattern = "*.mdx"\n\n[listing]\ninclude_drafts = true\n'
        )
        cfg = load_config(toml_path)
        assert cfg.content.directory == "posts"
        assert cfg.content.pattern == "*.mdx"
        assert cfg.listing.include_drafts is True

    def test_load_missing_path_returns_defaults(self, tmp_path):
        cfg = load_config(tmp_path / "nonexistent.toml")
        assert cfg.content.directory == "src/content/blog"

    def test_load_searches_cwd(self, tmp_path, monkeypatch):
        (tmp_path / ".postmeta.toml").write_text('[content]\ndirectory = "blog"\n')
        monkeypatch.chdir(tmp_path)
        cfg = load_config()
        assert cfg.content.directory == "blog"

    def test_load_global_fallback(self, tmp_path, monkeypatch):
        global_path = tmp_path / "global.toml"
        global_path.write_text('[content]\ndirectory = "global-posts"\n')
        monkeypatch.setattr(config_module, "GLOBAL_CONFIG_PATH", global_path)
        empty_cwd = tmp_path / "cwd"
        empty_cwd.mkdir()
        monkeypatch.chdir(empty_cwd)
        assert load_config().content.directory == "global-posts"

    def test_invalid_toml_returns_defaults(self, tmp_path):
        toml_path = tmp_path / ".postmeta.toml"
        toml_path.write_text("[content\ndirectory = ")
        cfg = load_config(toml_path)
        assert cfg.content.directory == "src/content/blog"

    def test_partial_section_keeps_defaults(self, tmp_path):
        toml_path = tmp_path / ".postmeta.toml"
        toml_path.write_text('[content]\npattern = "*.md"\n')
        cfg = load_config(toml_path)
        assert cfg.content.pattern == "*.md"
        assert cfg.content.directory == "src/content/blog"


class TestEnvVars:
    def test_env_overrides_toml(self, tmp_path, monkeypatch):
        toml_path = tmp_path / ".postmeta.toml"
        toml_path.write_text('[content]\ndirectory = "from-toml"\n')
        monkeypatch.setenv("POSTMETA_CONTENT_DIR", "from-env")
        monkeypatch.setenv("POSTMETA_PATTERN", "*.markdown")
        cfg = load_config(toml_path)
        assert cfg.content.directory == "from-env"
        assert cfg.content.pattern == "*.markdown"

    @pytest.mark.parametrize(("raw", "expected"), [("true", True), ("1", True), ("YES", True), ("no", False)])
    def test_include_drafts_env(self, tmp_path, monkeypatch, raw, expected):
        monkeypatch.setenv("POSTMETA_INCLUDE_DRAFTS", raw)
        cfg = load_config(tmp_path / "nonexistent.toml")
        assert cfg.listing.include_drafts is expected


class TestMergeCliOverrides:
    def test_overrides_set_values(self):
        cfg = merge_cli_overrides(
            PostmetaConfig(),
            content_dir=Path("content/posts"),
            pattern="*.md",
            include_drafts=True,
        )
        assert cfg.content.directory == "content/posts"
        assert cfg.content.pattern == "*.md"
        assert cfg.listing.include_drafts is True

    def test_none_values_ignored(self):
        base = PostmetaConfig.model_validate({"content": {"directory": "keep"}})
        cfg = merge_cli_overrides(base, content_dir=None, pattern=None, include_drafts=None)
        assert cfg.content.directory == "keep"
        assert cfg.listing.include_drafts is False

    def test_unknown_keys_ignored(self):
        cfg = merge_cli_overrides(PostmetaConfig(), colour="blue")
        assert cfg == PostmetaConfig()
