"""Shared pytest fixtures for assetrewrite tests."""

import json
import logging

import pytest


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep ASSETREWRITE_* settings from leaking in from the environment."""
    for name in ("ASSETREWRITE_PREPEND", "ASSETREWRITE_EXTENSIONS", "ASSETREWRITE_IGNORE", "ASSETREWRITE_WORKERS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _restore_logging():
    """Undo root logger changes made by configure_logging."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def basic_asset_map():
    """Asset map used by most scenario tests."""
    return {
        "foo/bar/widget.js": "blahzorz-1.js",
        "images/sample.png": "images/fingerprinted-sample.png",
    }


@pytest.fixture
def asset_map_file(tmp_path, basic_asset_map):
    """Write the basic asset map to a JSON file."""
    file_path = tmp_path / "assetMap.json"
    file_path.write_text(json.dumps(basic_asset_map), encoding="utf-8")
    return file_path


@pytest.fixture
def write_tree():
    """Return a helper that writes {relative path: content} below a root."""

    def _write(root, files):
        for name, content in files.items():
            path = root / name
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_bytes(content.encode("utf-8"))
        return root

    return _write


@pytest.fixture
def site_tree(tmp_path, write_tree):
    """A small site with HTML, CSS, JavaScript and a binary image."""
    return write_tree(
        tmp_path / "site",
        {
            "index.html": '<script src="foo/bar/widget.js"></script>\n<img src="images/sample.png">\n',
            "about.html": "<p>No assets here</p>\n",
            "css/app.css": "body { background: url(../images/sample.png); }\n",
            "ignore-this-file.html": '<img src="images/sample.png">\n',
            "js/app.js": 'var img = "images/sample.png";\n',
            "images/sample.png": b"\x89PNG\r\n\x1a\n\x00\x00",
        },
    )
