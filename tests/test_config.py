"""Tests for wikibridge.config: models and YAML loader."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from wikibridge.config.loader import (
    DEFAULT_CONFIG_TEMPLATE,
    _expand_env_vars,
    load_config,
    resolve_token,
)
from wikibridge.config.models import ConversionConfig, UploadConfig, WikiBridgeConfig, WikiConfig


# ── WikiBridgeConfig defaults ──────────────────────────────────────


class TestWikiBridgeConfigDefaults:
    def test_default_log_level(self, sample_config):
        assert sample_config.log_level == "info"

    def test_default_wiki(self, sample_config):
        assert sample_config.wiki.url == ""
        assert sample_config.wiki.token_env == "WIKIJS_API_TOKEN"
        assert sample_config.wiki.locale == "en"
        assert sample_config.wiki.editor == "markdown"

    def test_default_conversion(self, sample_config):
        assert sample_config.conversion.auto_convert_links is True
        assert sample_config.conversion.preserve_native_syntax is False

    def test_default_upload(self, sample_config):
        assert sample_config.upload.default_tags == []
        assert sample_config.upload.behavior == "ask"


# ── Individual config model validations ─────────────────────────────


class TestWikiConfig:
    def test_custom_values(self):
        cfg = WikiConfig(url="https://wiki.example.com", locale="zh", timeout=5)
        assert cfg.locale == "zh"
        assert cfg.timeout == 5.0


class TestUploadConfig:
    def test_invalid_behavior_rejected(self):
        with pytest.raises(ValidationError):
            UploadConfig(behavior="overwrite")

    def test_create_new(self):
        assert UploadConfig(behavior="create-new").behavior == "create-new"


class TestConversionConfig:
    def test_flags(self):
        cfg = ConversionConfig(auto_convert_links=False)
        assert cfg.auto_convert_links is False


def test_invalid_log_level_rejected():
    with pytest.raises(ValidationError):
        WikiBridgeConfig(log_level="verbose")


# ── _expand_env_vars ────────────────────────────────────────────────


class TestExpandEnvVars:
    def test_expands_string_variable(self):
        with patch.dict(os.environ, {"MY_KEY": "secret123"}):
            assert _expand_env_vars("${MY_KEY}") == "secret123"

    def test_missing_var_becomes_empty(self):
        with patch.dict(os.environ, {}, clear=True):
            assert _expand_env_vars("${NOT_SET_ANYWHERE}") == ""

    def test_expands_nested_structures(self):
        with patch.dict(os.environ, {"A": "alpha", "B": "beta"}):
            result = _expand_env_vars({"outer": {"inner": "${A}"}, "list": ["${B}", "literal"]})
            assert result == {"outer": {"inner": "alpha"}, "list": ["beta", "literal"]}

    def test_non_string_passthrough(self):
        assert _expand_env_vars(42) == 42
        assert _expand_env_vars(True) is True
        assert _expand_env_vars(None) is None

    def test_mixed_text_and_var(self):
        with patch.dict(os.environ, {"HOST": "wiki.local"}):
            assert _expand_env_vars("https://${HOST}:3000") == "https://wiki.local:3000"


# ── load_config ─────────────────────────────────────────────────────


class TestLoadConfig:
    @pytest.fixture(autouse=True)
    def isolated(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")

    def test_returns_defaults_when_no_file_exists(self):
        config = load_config()
        assert config == WikiBridgeConfig()

    def test_loads_valid_yaml(self, tmp_path):
        (tmp_path / "wikibridge.yaml").write_text(
            "wiki:\n  url: https://wiki.example.com\n  locale: de\n"
            "upload:\n  behavior: update\n  default_tags: [imported]\n"
            "log_level: debug\n"
        )
        config = load_config()
        assert config.wiki.url == "https://wiki.example.com"
        assert config.wiki.locale == "de"
        assert config.upload.behavior == "update"
        assert config.upload.default_tags == ["imported"]
        assert config.log_level == "debug"

    def test_env_vars_expanded(self, tmp_path, monkeypatch):
        monkeypatch.setenv("WIKI_HOST", "wiki.internal")
        (tmp_path / "wikibridge.yaml").write_text("wiki:\n  url: https://${WIKI_HOST}\n")
        assert load_config().wiki.url == "https://wiki.internal"

    def test_raises_on_invalid_yaml(self, tmp_path):
        (tmp_path / "wikibridge.yaml").write_text("  bad:\nyaml: [unterminated")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_config()

    def test_raises_on_invalid_config_values(self, tmp_path):
        (tmp_path / "wikibridge.yaml").write_text("upload:\n  behavior: sometimes\n")
        with pytest.raises(ValueError, match="Invalid config"):
            load_config()

    def test_cli_path_takes_priority(self, tmp_path):
        (tmp_path / "wikibridge.yaml").write_text("wiki:\n  locale: de\n")
        cli_file = tmp_path / "custom.yaml"
        cli_file.write_text("wiki:\n  locale: fr\n")
        assert load_config(str(cli_file)).wiki.locale == "fr"

    def test_home_config_used_last(self, tmp_path):
        home_dir = tmp_path / "fakehome" / ".wikibridge"
        home_dir.mkdir(parents=True)
        (home_dir / "config.yaml").write_text("log_level: error\n")
        assert load_config().log_level == "error"

    def test_empty_file_skipped(self, tmp_path):
        (tmp_path / "wikibridge.yaml").write_text("")
        assert load_config() == WikiBridgeConfig()

    def test_template_is_valid_config(self, tmp_path):
        (tmp_path / "wikibridge.yaml").write_text(DEFAULT_CONFIG_TEMPLATE)
        config = load_config()
        assert config.wiki.url == "https://wiki.example.com"
        assert config.upload.behavior == "ask"


# ── resolve_token ───────────────────────────────────────────────────


class TestResolveToken:
    def test_reads_named_env_var(self, monkeypatch):
        monkeypatch.setenv("CUSTOM_TOKEN", "abc")
        config = WikiBridgeConfig(wiki={"token_env": "CUSTOM_TOKEN"})
        assert resolve_token(config) == "abc"

    def test_missing_raises(self, monkeypatch, sample_config):
        monkeypatch.delenv("WIKIJS_API_TOKEN", raising=False)
        with pytest.raises(ValueError, match="WIKIJS_API_TOKEN"):
            resolve_token(sample_config)
