"""Path helpers for asset references.

All paths handled here are URL-style project paths, so everything is done
with ``posixpath`` and never touches the real filesystem or the process
working directory.
"""

import posixpath
import re

_SEPARATOR_RUN_RE = re.compile(r"[\\/]+")
_LEADING_RELATIVE_RE = re.compile(r"^(?:\.*/)*")

_ROOT = "/"


def normalize_separators(path: str) -> str:
    """Collapse runs of ``/`` or ``\\`` into a single ``/``."""
    return _SEPARATOR_RUN_RE.sub("/", path)


def _anchor(path: str) -> str:
    # Root both sides at a virtual project root so relpath stays lexical.
    return posixpath.join(_ROOT, normalize_separators(path))


def relative_path(from_file: str, to_asset: str) -> str:
    """Return the path of ``to_asset`` as seen from ``from_file``.

    When the last segment of ``from_file`` contains a dot it is treated as a
    file and the path is computed from its directory. The result always
    starts with ``.`` (``./`` is added when needed).
    """
    base = from_file
    if "." in posixpath.basename(normalize_separators(from_file)):
        base = posixpath.dirname(normalize_separators(from_file))

    relative = normalize_separators(posixpath.relpath(_anchor(to_asset), _anchor(base)))
    return relative if relative.startswith(".") else f"./{relative}"


def strip_leading_relative(path: str) -> str:
    """Drop leading ``/``, ``./`` and ``../`` tokens from ``path``."""
    return _LEADING_RELATIVE_RE.sub("", path, count=1)


def strip_dot_slash(path: str) -> str:
    """Drop a single leading ``./``."""
    return path[2:] if path.startswith("./") else path
