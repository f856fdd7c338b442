"""Unified configuration loaded from .postmeta.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field

from postmeta.posts.services import DEFAULT_PATTERN

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".postmeta.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
]
GLOBAL_CONFIG_PATH = Path.home() / ".config" / "postmeta" / "config.toml"

# CLI keyword -> (section, field)
_CLI_FIELDS: dict[str, tuple[str, str]] = {
    "content_dir": ("content", "directory"),
    "pattern": ("content", "pattern"),
    "include_drafts": ("listing", "include_drafts"),
}
_ENV_FIELDS: dict[str, tuple[str, str]] = {
    "POSTMETA_CONTENT_DIR": ("content", "directory"),
    "POSTMETA_PATTERN": ("content", "pattern"),
}


class ContentConfig(BaseModel):
    """[content] section."""

    directory: str = "src/content/blog"
    pattern: str = DEFAULT_PATTERN


class ListingConfig(BaseModel):
    """[listing] section."""

    include_drafts: bool = False


class PostmetaConfig(BaseModel):
    """Top-level configuration model."""

    content: ContentConfig = Field(default_factory=ContentConfig)
    listing: ListingConfig = Field(default_factory=ListingConfig)

    @property
    def content_dir(self) -> Path:
        return Path(self.content.directory)


def load_config(path: str | Path | None = None) -> PostmetaConfig:
    """Build the config from the first TOML file found, then POSTMETA_* env vars.

    An explicit ``path`` wins; otherwise ``.postmeta.toml`` in the working
    directory is tried before the per-user file. A missing explicit file
    only logs a warning and falls back to defaults.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for search_dir in CONFIG_SEARCH_PATHS:
            candidate = search_dir / CONFIG_FILENAME
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break
        if not data and GLOBAL_CONFIG_PATH.exists():
            data = _load_toml(GLOBAL_CONFIG_PATH)
            logger.info("Loaded config from %s", GLOBAL_CONFIG_PATH)

    config = PostmetaConfig.model_validate(data) if data else PostmetaConfig()

    return _apply_env_vars(config)


def merge_cli_overrides(config: PostmetaConfig, **cli_kwargs: object) -> PostmetaConfig:
    """Apply ``--dir``, ``--pattern`` and ``--drafts`` on top of ``config``.

    Flags left unset arrive as None and keep the loaded value. Paths are
    stored as strings.
    """
    data = config.model_dump()
    for key, value in cli_kwargs.items():
        target = _CLI_FIELDS.get(key)
        if target is None or value is None:
            continue
        section, name = target
        data[section][name] = str(value) if isinstance(value, Path) else value

    return PostmetaConfig.model_validate(data)


def _load_toml(path: Path) -> dict[str, object]:
    """Read a TOML file, logging and returning {} if it is unreadable."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: PostmetaConfig) -> PostmetaConfig:
    """Overlay POSTMETA_CONTENT_DIR, POSTMETA_PATTERN and POSTMETA_INCLUDE_DRAFTS."""
    data = config.model_dump()
    for env_var, (section, name) in _ENV_FIELDS.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][name] = value

    drafts_raw = os.environ.get("POSTMETA_INCLUDE_DRAFTS")
    if drafts_raw is not None:
        data["listing"]["include_drafts"] = drafts_raw.lower() in ("true", "1", "yes")

    return PostmetaConfig.model_validate(data)
