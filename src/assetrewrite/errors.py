"""Exceptions raised by assetrewrite."""


class AssetRewriteError(Exception):
    """Base class for all assetrewrite errors."""


class AssetMapError(AssetRewriteError, ValueError):
    """Raised when an asset map is malformed."""


class ConfigError(AssetRewriteError):
    """Raised when settings or an asset-map file cannot be used."""
