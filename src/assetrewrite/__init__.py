"""assetrewrite.

Rewrite asset references in HTML, CSS and JavaScript so they point at
fingerprinted file names.
"""

from __future__ import annotations

from importlib.metadata import version

from .errors import AssetMapError, AssetRewriteError, ConfigError
from .rewriter import AssetRewriter

__all__: list[str] = ["AssetMapError", "AssetRewriteError", "AssetRewriter", "ConfigError"]

__version__ = version("assetrewrite")
