"""Settings and asset-map loading.

Uses python-decouple for settings management. Configuration is read from:
1. Environment variables (highest priority)
2. .env file in current directory
3. Default values

Settings:
    ASSETREWRITE_PREPEND: base URL applied to rewritten references (default: none)
    ASSETREWRITE_EXTENSIONS: comma-separated extensions to rewrite (default: "html,css")
    ASSETREWRITE_IGNORE: comma-separated project paths to leave untouched
    ASSETREWRITE_WORKERS: worker threads for tree rewrites (default: 0 = one per CPU)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from decouple import Csv, UndefinedValueError, config

from .errors import AssetMapError, ConfigError
from .index import validate_asset_map
from .rewriter import DEFAULT_EXTENSIONS

if TYPE_CHECKING:
    from pathlib import Path


@dataclass(frozen=True)
class Settings:
    """Resolved settings for a rewrite run."""

    prepend: str = ""
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    ignore: tuple[str, ...] = ()
    workers: int = 0

    def with_overrides(self, **overrides: object) -> Settings:
        """Return a copy with every non-None override applied."""
        applied = {name: value for name, value in overrides.items() if value is not None}
        return replace(self, **applied).validated()

    def validated(self) -> Settings:
        """Return self, or raise ConfigError if a field is unusable."""
        if self.workers < 0:
            msg = f"Worker count must be zero or positive, got {self.workers}"
            raise ConfigError(msg)
        if not self.extensions:
            msg = "At least one replace extension is required"
            raise ConfigError(msg)
        return self


def get_settings() -> Settings:
    """Read settings from the environment and .env file."""
    try:
        settings = Settings(
            prepend=config("ASSETREWRITE_PREPEND", default=""),
            extensions=tuple(config("ASSETREWRITE_EXTENSIONS", default=",".join(DEFAULT_EXTENSIONS), cast=Csv())),
            ignore=tuple(config("ASSETREWRITE_IGNORE", default="", cast=Csv())),
            workers=config("ASSETREWRITE_WORKERS", default=0, cast=int),
        )
    except (ValueError, UndefinedValueError) as e:
        msg = f"Invalid assetrewrite setting: {e}"
        raise ConfigError(msg) from e
    return settings.validated()


def load_asset_map(path: Path) -> tuple[dict[str, str], str | None]:
    """Load an asset map from a JSON file.

    Accepts either a flat ``{"original": "replacement"}`` object or a
    manifest of the form ``{"assets": {...}, "prepend": "..."}``.

    Returns:
        Tuple of (asset_map, prepend from the manifest or None).
    """
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        msg = f"Cannot read asset map {path}: {e}"
        raise ConfigError(msg) from e
    except json.JSONDecodeError as e:
        msg = f"Asset map {path} is not valid JSON: {e}"
        raise ConfigError(msg) from e

    if not isinstance(data, dict):
        msg = f"Asset map {path} must contain a JSON object"
        raise ConfigError(msg)

    prepend = None
    if isinstance(data.get("assets"), dict):
        prepend = data.get("prepend")
        if prepend is not None and not isinstance(prepend, str):
            msg = f"Asset map {path} has a non-string prepend: {prepend!r}"
            raise ConfigError(msg)
        data = data["assets"]

    try:
        asset_map = validate_asset_map(data)
    except AssetMapError as e:
        msg = f"Asset map {path}: {e}"
        raise ConfigError(msg) from e

    return asset_map, prepend or None
