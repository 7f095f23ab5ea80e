"""Rewrite a whole directory tree.

Every file under the input directory is mirrored into the output directory.
Admitted text files go through the rewriter, everything else is copied as is.
Files are independent of each other, so they are processed in a thread pool
sharing one read-only ``AssetRewriter``.
"""

from __future__ import annotations

import logging
import shutil
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

import psutil

from .errors import ConfigError

if TYPE_CHECKING:
    from .rewriter import AssetRewriter

logger = logging.getLogger(__name__)


class FileAction(Enum):
    """What happened to a file during a run."""

    REWRITTEN = "rewritten"
    UNCHANGED = "unchanged"
    COPIED = "copied"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class FileResult:
    """Outcome for a single file."""

    path: str
    action: FileAction
    detail: str = ""


@dataclass
class RewriteSummary:
    """Outcome of a tree rewrite."""

    input_dir: Path
    output_dir: Path
    files: list[FileResult] = field(default_factory=list)

    def count(self, action: FileAction) -> int:
        return sum(1 for f in self.files if f.action is action)

    @property
    def total(self) -> int:
        return len(self.files)

    @property
    def rewritten(self) -> list[FileResult]:
        return [f for f in self.files if f.action is FileAction.REWRITTEN]


def default_workers() -> int:
    """Default thread count: one per logical CPU."""
    return psutil.cpu_count(logical=True) or 1


def iter_files(root: Path) -> list[Path]:
    """Return every regular file below ``root``, sorted."""
    return sorted(p for p in root.rglob("*") if p.is_file())


def _relative_name(path: Path, root: Path) -> str:
    return path.relative_to(root).as_posix()


def process_path(source: Path, destination: Path, relative_name: str, rewriter: AssetRewriter) -> FileResult:
    """Rewrite or copy one file from ``source`` to ``destination``."""
    destination.parent.mkdir(parents=True, exist_ok=True)

    if not rewriter.can_process_file(relative_name):
        shutil.copy2(source, destination)
        return FileResult(relative_name, FileAction.COPIED)

    try:
        text = source.read_bytes().decode("utf-8")
    except UnicodeDecodeError as e:
        logger.warning("Not valid UTF-8, copying unchanged: %s (%s)", relative_name, e.reason)
        shutil.copy2(source, destination)
        return FileResult(relative_name, FileAction.SKIPPED, "not valid UTF-8")

    rewritten = rewriter.rewrite_file(text, relative_name)
    destination.write_bytes(rewritten.encode("utf-8"))
    shutil.copystat(source, destination)

    action = FileAction.REWRITTEN if rewritten != text else FileAction.UNCHANGED
    return FileResult(relative_name, action)


def rewrite_tree(input_dir: Path, output_dir: Path, rewriter: AssetRewriter, workers: int | None = None) -> RewriteSummary:
    """Mirror ``input_dir`` into ``output_dir`` with asset references rewritten."""
    input_dir = input_dir.resolve()
    output_dir = output_dir.resolve()

    if not input_dir.is_dir():
        msg = f"Input directory not found: {input_dir}"
        raise ConfigError(msg)
    if input_dir == output_dir or input_dir in output_dir.parents:
        msg = f"Output directory must be outside the input directory: {output_dir}"
        raise ConfigError(msg)

    files = iter_files(input_dir)
    max_workers = workers or default_workers()
    logger.info("Rewriting %d file(s) from %s with %d worker(s)", len(files), input_dir, max_workers)

    output_dir.mkdir(parents=True, exist_ok=True)
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            executor.submit(
                process_path,
                path,
                output_dir / path.relative_to(input_dir),
                _relative_name(path, input_dir),
                rewriter,
            )
            for path in files
        ]
        results = [future.result() for future in futures]

    summary = RewriteSummary(
        input_dir=input_dir,
        output_dir=output_dir,
        files=sorted(results, key=lambda r: r.path),
    )
    logger.info(
        "Done: %d rewritten, %d unchanged, %d copied, %d skipped",
        summary.count(FileAction.REWRITTEN),
        summary.count(FileAction.UNCHANGED),
        summary.count(FileAction.COPIED),
        summary.count(FileAction.SKIPPED),
    )
    return summary
