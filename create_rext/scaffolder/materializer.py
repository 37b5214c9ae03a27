"""Bulk copy of the template tree into the new project directory."""

from __future__ import annotations

import asyncio
import shutil
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import MaterializeError

CopyTree = Callable[[Path, Path], Any]


@dataclass
class MaterializeResult:
    """Outcome of a successful template copy."""

    source: Path
    destination: Path
    files_copied: int
    duration_seconds: float


def _count_files(root: Path) -> int:
    if not root.is_dir():
        return 0
    return sum(1 for p in root.rglob("*") if p.is_file())


class TemplateMaterializer:
    """Copies every file and directory of a template into a fresh destination.

    The copy primitive is injectable: anything with the signature
    ``copy_tree(source, destination)`` that creates *destination* and raises
    ``OSError`` on failure will do.  It defaults to ``shutil.copytree``.
    """

    def __init__(self, copy_tree: CopyTree | None = None) -> None:
        self.copy_tree: CopyTree = copy_tree or shutil.copytree

    async def materialize(self, source: str | Path, destination: str | Path) -> MaterializeResult:
        """Copy *source* recursively to *destination*.

        A failure part-way leaves whatever was already copied on disk.

        Raises:
            MaterializeError: Wrapping the underlying ``OSError`` when the
                template is missing or unreadable, the destination cannot be
                created, or the copy is interrupted.
        """
        src = Path(source)
        dst = Path(destination)
        start = time.monotonic()
        try:
            await asyncio.to_thread(self.copy_tree, src, dst)
        except OSError as exc:
            raise MaterializeError(
                f"Failed to copy template {src} to {dst}: {exc}",
                source=src,
                destination=dst,
            ) from exc

        files_copied = await asyncio.to_thread(_count_files, dst)
        return MaterializeResult(
            source=src,
            destination=dst,
            files_copied=files_copied,
            duration_seconds=time.monotonic() - start,
        )
