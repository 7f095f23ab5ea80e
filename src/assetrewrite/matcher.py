"""Locate asset references inside arbitrary text.

The grammar is loose: an opening delimiter (``"``, ``'``, ``(``
or ``=``), a run of characters containing the asset path, an optional query
string, optional whitespace/backslashes left over from template escaping, and
a closing delimiter (``"``, ``'``, ``)``, ``>`` or a space). That covers HTML
attributes, CSS ``url()``, inline ``style=`` values and precompiled template
strings without a parser per content type.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache

_REFERENCE_TEMPLATE = (
    r"""["'(=]\s*"""
    r"""([^"'()=]*{asset}[^"'()\\>=]*)"""
    r"""(\?[^"')> ]*)?"""
    r"""\s*\\*\s*["')> ]"""
)

# Only these six codes are recognised; other escapes such as %2F are left alone.
_ENCODED_TEMPLATE = r"""%(?:22|27|5C|28|29|3D)[^"'()=]*{asset}"""


@dataclass(frozen=True)
class Reference:
    """A candidate reference found by the matcher."""

    captured: str
    offset: int
    end: int


class ReferenceMatcher:
    """Finds references to one asset path."""

    def __init__(self, asset_path: str) -> None:
        self.asset_path = asset_path
        escaped = re.escape(asset_path)
        self._pattern = re.compile(_REFERENCE_TEMPLATE.format(asset=escaped))
        self._encoded = re.compile(_ENCODED_TEMPLATE.format(asset=escaped))

    def search(self, text: str, pos: int = 0) -> Reference | None:
        """Return the first reference at or after ``pos``, or None."""
        match = self._pattern.search(text, pos)
        if match is None:
            return None
        return Reference(
            captured=match.group(1),
            offset=match.start(1),
            end=match.end(),
        )

    def is_encoded(self, captured: str) -> bool:
        """Return True when ``captured`` holds a percent-encoded copy of the path."""
        return self._encoded.search(captured) is not None


@lru_cache(maxsize=1024)
def matcher_for(asset_path: str) -> ReferenceMatcher:
    """Return a (cached) matcher for ``asset_path``."""
    return ReferenceMatcher(asset_path)


def is_encoded_reference(captured: str, asset_path: str) -> bool:
    """Return True when the match is embedded, escaped library code.

    A percent-encoded delimiter (``%22``, ``%27``, ``%5C``, ``%28``, ``%29``,
    ``%3D``) before the asset path means the path sits inside another encoded
    string and is not a live reference.
    """
    return matcher_for(asset_path).is_encoded(captured)
