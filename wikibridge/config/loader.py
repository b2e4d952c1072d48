"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import WikiBridgeConfig


def load_config(cli_path: str | None = None) -> WikiBridgeConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults."""
    config_paths = [
        Path(cli_path) if cli_path else None,
        Path("./wikibridge.yaml"),
        Path.home() / ".wikibridge" / "config.yaml",
    ]

    for path in config_paths:
        if path and path.exists():
            try:
                with open(path) as f:
                    raw = yaml.safe_load(f)
                if raw is None:
                    continue
                raw = _expand_env_vars(raw)
                return WikiBridgeConfig(**raw)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
            except ValidationError as e:
                raise ValueError(f"Invalid config in {path}: {e}") from e

    return WikiBridgeConfig()


def resolve_token(config: WikiBridgeConfig) -> str:
    """Read the API token from the env var named in config.wiki.token_env."""
    token = os.environ.get(config.wiki.token_env, "")
    if not token:
        raise ValueError(
            f"Wiki.js API token not found. Set the {config.wiki.token_env} environment variable."
        )
    return token


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `wikibridge config init`
DEFAULT_CONFIG_TEMPLATE = """\
# wikibridge.yaml

# Wiki.js instance
wiki:
  url: "https://wiki.example.com"
  token_env: "WIKIJS_API_TOKEN"
  locale: "en"
  editor: "markdown"
  timeout: 30

# Markdown conversion
conversion:
  auto_convert_links: true       # prefix relative link targets with /
  preserve_native_syntax: false  # keep [[links]], callouts and #tags as-is

# Publishing
upload:
  default_tags: []
  behavior: "ask"                # ask | update | create-new

# Logging
log_level: "info"                # debug | info | warn | error
"""
