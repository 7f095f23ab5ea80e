"""Rewrite ``sourceMappingURL=`` directives.

These comments carry an unquoted path, so the delimiter grammar used for
ordinary references never sees them.
"""

import re

_DIRECTIVE = "sourceMappingURL="
_ABSOLUTE_RE = re.compile(r"^(?:https?:|//)")


def is_absolute_url(path: str) -> bool:
    """Return True for ``http:``, ``https:`` and protocol-relative URLs."""
    return _ABSOLUTE_RE.match(path) is not None


def rewrite_source_map(text: str, asset_path: str, replacement_path: str, prepend: str = "") -> str:
    """Rewrite the first ``sourceMappingURL=<asset_path>`` in ``text``.

    The prepend is applied unless the directive already points at an
    absolute URL.
    """
    if not asset_path:
        return text

    directive = _DIRECTIVE + asset_path
    start = text.find(directive)
    if start < 0:
        return text

    replacement = replacement_path
    if prepend and not is_absolute_url(asset_path):
        replacement = prepend + replacement_path

    return text[:start] + _DIRECTIVE + replacement + text[start + len(directive) :]
