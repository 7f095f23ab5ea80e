"""Per-file rewrite of asset references.

An ``AssetRewriter`` is built once per run from the asset map and settings,
then ``process_file`` / ``rewrite_file`` are called for each file. Nothing is
mutated after construction, so one instance can be shared across threads.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .composer import rewrite_asset_path
from .errors import ConfigError
from .index import AssetIndex
from .paths import relative_path, strip_dot_slash
from .sourcemap import rewrite_source_map

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = ("html", "css")


def _normalize_extensions(extensions: Iterable[str]) -> frozenset[str]:
    normalized = set()
    for ext in extensions:
        if not isinstance(ext, str) or not ext.strip("."):
            msg = f"Invalid replace extension: {ext!r}"
            raise ConfigError(msg)
        normalized.add(ext.lstrip("."))
    return frozenset(normalized)


class AssetRewriter:
    """Rewrites asset references in file contents using an asset map."""

    def __init__(
        self,
        asset_map: object,
        prepend: str | None = "",
        ignore: Iterable[str] = (),
        replace_extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    ) -> None:
        if prepend is not None and not isinstance(prepend, str):
            msg = f"Prepend must be a string, got {prepend!r}"
            raise ConfigError(msg)
        if isinstance(ignore, str):
            ignore = [ignore]

        self.index = AssetIndex.build(asset_map)
        self.prepend = prepend or ""
        self.ignore = frozenset(ignore)
        self.replace_extensions = _normalize_extensions(replace_extensions)

    @property
    def asset_map(self):
        return self.index.assets

    def is_ignored(self, relative_path: str) -> bool:
        """Return True if ``relative_path`` or its pre-fingerprint name is ignored."""
        if relative_path in self.ignore:
            return True
        original = self.index.original_name(relative_path)
        return original is not None and original in self.ignore

    def can_process_file(self, relative_path: str) -> bool:
        """Return True if ``relative_path`` should go through the rewriter."""
        if self.is_ignored(relative_path):
            return False
        return any(relative_path.endswith(f".{ext}") for ext in self.replace_extensions)

    def process_file(self, text: str, relative_path: str) -> str:
        """Rewrite ``text`` if the file is admitted, else return it unchanged."""
        if not self.can_process_file(relative_path):
            return text
        return self.rewrite_file(text, relative_path)

    def rewrite_file(self, text: str, file_path: str) -> str:
        """Return ``text`` with every asset reference rewritten.

        Keys are tried longest first. Each key is rewritten in its absolute
        form and then in its form relative to ``file_path``; source map
        directives are handled last.
        """
        result = text
        source_map_forms: list[tuple[str, str]] = []

        for key in self.index.keys_by_priority:
            replacement = self.index.assets[key]
            result = rewrite_asset_path(result, key, replacement, self.prepend)

            path_diff, replacement_diff = self._relative_forms(file_path, key, replacement)
            if path_diff:
                result = rewrite_asset_path(result, path_diff, replacement_diff, self.prepend)

            source_map_forms.append((key, replacement))
            if path_diff and path_diff != key:
                source_map_forms.append((path_diff, replacement_diff))

        for asset_path, replacement_path in source_map_forms:
            result = rewrite_source_map(result, asset_path, replacement_path, self.prepend)

        if result != text:
            logger.debug("Rewrote references in %s", file_path)
        return result

    def _relative_forms(self, file_path: str, key: str, replacement: str) -> tuple[str, str]:
        path_diff = strip_dot_slash(relative_path(file_path, key))
        if path_diff == ".":
            return "", ""

        # A prepend means another origin, so a relative replacement makes no sense.
        if self.prepend:
            return path_diff, replacement
        return path_diff, strip_dot_slash(relative_path(file_path, replacement))
