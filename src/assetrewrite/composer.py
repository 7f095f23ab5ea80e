"""Compose replacement text for matched references."""

from __future__ import annotations

import logging
import re

from .matcher import is_encoded_reference, matcher_for
from .paths import strip_leading_relative

logger = logging.getLogger(__name__)


def already_has_prepend(text: str, prepend: str, offset: int, submatch: str = "") -> bool:
    """Return True if ``prepend`` already ends right where the asset path starts.

    ``offset`` is where the match begins in ``text`` and ``submatch`` is the
    relative marker (``/``, ``./``, ``../``) consumed at the start of it.
    """
    start = offset + len(submatch) - len(prepend)
    if start < 0:
        return False
    return text.startswith(prepend, start)


def _prepending_replacer(replacement: str, prepend: str):
    def replace(match: re.Match[str]) -> str:
        submatch = match.group(1) or ""
        if already_has_prepend(match.string, prepend, match.start(), submatch):
            return submatch + replacement
        # The leading relative marker is part of the match, so it is dropped here.
        return prepend + strip_leading_relative(replacement)

    return replace


def compose(captured: str, asset_path: str, replacement_path: str, prepend: str = "") -> str:
    """Return ``captured`` with every occurrence of ``asset_path`` replaced.

    Without a prepend this is a plain substitution. With one, any leading
    relative markers are folded into the match and the replacement becomes
    ``prepend + replacement_path``, unless the prepend is already there.
    """
    if not prepend:
        return captured.replace(asset_path, replacement_path)

    pattern = re.compile(r"(\.*/)*" + re.escape(asset_path))
    return pattern.sub(_prepending_replacer(replacement_path, prepend), captured)


def rewrite_asset_path(text: str, asset_path: str, replacement_path: str, prepend: str = "") -> str:
    """Rewrite every live reference to ``asset_path`` in ``text``."""
    if not asset_path or asset_path not in text:
        return text

    matcher = matcher_for(asset_path)
    pos = 0
    while (reference := matcher.search(text, pos)) is not None:
        pos = reference.end
        if is_encoded_reference(reference.captured, asset_path):
            logger.debug("Skipping encoded reference to %s at offset %d", asset_path, reference.offset)
            continue

        composed = compose(reference.captured, asset_path, replacement_path, prepend)
        text = text.replace(reference.captured, composed)

    return text
