"""Tests for assetrewrite.pipeline."""

import pytest

from assetrewrite.errors import ConfigError
from assetrewrite.pipeline import FileAction, default_workers, iter_files, rewrite_tree
from assetrewrite.rewriter import AssetRewriter


@pytest.fixture
def rewriter(basic_asset_map):
    """Rewriter for the site_tree fixture."""
    return AssetRewriter(basic_asset_map, ignore=["ignore-this-file.html"])


class TestRewriteTree:
    """Tests for rewrite_tree."""

    def test_rewrites_eligible_files(self, site_tree, tmp_path, rewriter):
        """HTML and CSS files should be rewritten in the output tree."""
        out = tmp_path / "out"
        rewrite_tree(site_tree, out, rewriter, workers=2)

        assert (out / "index.html").read_text(encoding="utf-8") == (
            '<script src="blahzorz-1.js"></script>\n<img src="images/fingerprinted-sample.png">\n'
        )
        assert (out / "css/app.css").read_text(encoding="utf-8") == (
            "body { background: url(../images/fingerprinted-sample.png); }\n"
        )

    def test_copies_everything_else(self, site_tree, tmp_path, rewriter):
        """Ignored, ineligible and binary files should be byte-identical."""
        out = tmp_path / "out"
        rewrite_tree(site_tree, out, rewriter, workers=2)

        for name in ("ignore-this-file.html", "js/app.js", "images/sample.png", "about.html"):
            assert (out / name).read_bytes() == (site_tree / name).read_bytes()

    def test_summary(self, site_tree, tmp_path, rewriter):
        """The summary should record one result per file, sorted by path."""
        summary = rewrite_tree(site_tree, tmp_path / "out", rewriter, workers=2)

        actions = {result.path: result.action for result in summary.files}
        assert actions == {
            "about.html": FileAction.UNCHANGED,
            "css/app.css": FileAction.REWRITTEN,
            "ignore-this-file.html": FileAction.COPIED,
            "images/sample.png": FileAction.COPIED,
            "index.html": FileAction.REWRITTEN,
            "js/app.js": FileAction.COPIED,
        }
        assert [result.path for result in summary.files] == sorted(actions)
        assert summary.total == 6
        assert summary.count(FileAction.REWRITTEN) == 2
        assert [result.path for result in summary.rewritten] == ["css/app.css", "index.html"]

    def test_preserves_line_endings(self, tmp_path, write_tree, rewriter):
        """CRLF line endings should survive a rewrite."""
        site = write_tree(tmp_path / "site", {"index.html": '<p>\r\n<img src="images/sample.png">\r\n'})
        out = tmp_path / "out"
        rewrite_tree(site, out, rewriter, workers=1)
        assert (out / "index.html").read_bytes() == b'<p>\r\n<img src="images/fingerprinted-sample.png">\r\n'

    def test_undecodable_file_skipped(self, tmp_path, write_tree, rewriter, caplog):
        """An eligible file that is not UTF-8 should be copied and reported."""
        raw = b'<img src="images/sample.png">\xff\xfe'
        site = write_tree(tmp_path / "site", {"legacy.html": raw})
        out = tmp_path / "out"

        with caplog.at_level("WARNING", logger="assetrewrite.pipeline"):
            summary = rewrite_tree(site, out, rewriter, workers=1)

        assert (out / "legacy.html").read_bytes() == raw
        assert summary.files[0].action is FileAction.SKIPPED
        assert "legacy.html" in caplog.text

    def test_missing_input(self, tmp_path, rewriter):
        """A missing input directory should raise ConfigError."""
        with pytest.raises(ConfigError, match="not found"):
            rewrite_tree(tmp_path / "missing", tmp_path / "out", rewriter)

    def test_output_inside_input(self, site_tree, rewriter):
        """Writing into the input tree would feed outputs back in."""
        with pytest.raises(ConfigError, match="outside"):
            rewrite_tree(site_tree, site_tree / "dist", rewriter)

    def test_output_same_as_input(self, site_tree, rewriter):
        """In-place rewrites are not supported."""
        with pytest.raises(ConfigError):
            rewrite_tree(site_tree, site_tree, rewriter)

    def test_uses_default_workers(self, site_tree, tmp_path, rewriter, mocker):
        """Without an explicit count the CPU count should be used."""
        mock_workers = mocker.patch("assetrewrite.pipeline.default_workers", return_value=3)
        rewrite_tree(site_tree, tmp_path / "out", rewriter)
        assert mock_workers.called


class TestHelpers:
    """Tests for module helpers."""

    def test_default_workers_from_psutil(self, mocker):
        """Should use the logical CPU count."""
        mocker.patch("assetrewrite.pipeline.psutil.cpu_count", return_value=12)
        assert default_workers() == 12

    def test_default_workers_unknown_cpu_count(self, mocker):
        """psutil may return None; fall back to a single worker."""
        mocker.patch("assetrewrite.pipeline.psutil.cpu_count", return_value=None)
        assert default_workers() == 1

    def test_iter_files_sorted(self, site_tree):
        """Should list files only, sorted."""
        files = iter_files(site_tree)
        assert files == sorted(files)
        assert all(path.is_file() for path in files)
        assert len(files) == 6
