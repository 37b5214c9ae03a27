"""Rewrites the ``name`` field of the copied ``package.json``.

This is the only change made to template content.  Every other field keeps
its value; the file is replaced in one rename so it is never observed
half-written.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from create_rext.utils import load_json, print_warning, write_json_atomic

from .errors import MetadataError, MetadataNotFoundError, MetadataParseError

IDENTITY_FIELD = "name"


class MetadataPatcher:
    """Loads, patches and persists the project metadata descriptor.

    Args:
        filename: Descriptor path relative to the project root.
        indent: Indentation used when the document is written back.
    """

    def __init__(self, filename: str = "package.json", indent: int = 2) -> None:
        self.filename = filename
        self.indent = indent

    def descriptor_path(self, project_path: str | Path) -> Path:
        return Path(project_path) / self.filename

    async def patch(self, project_path: str | Path, project_name: str) -> dict[str, Any]:
        """Set the descriptor's ``name`` to *project_name* and save it.

        A trailing newline is kept only if the original file had one.

        Returns:
            The document as written.

        Raises:
            MetadataNotFoundError: If the descriptor is missing.
            MetadataParseError: If it is unreadable, not JSON, or not a JSON
                object.
        """
        path = self.descriptor_path(project_path)
        if not path.is_file():
            raise MetadataNotFoundError(
                f"{self.filename} not found in template. Exiting...", path
            )

        try:
            data = await asyncio.to_thread(load_json, path)
            trailing_newline = path.read_bytes().endswith(b"\n")
        except (OSError, ValueError) as exc:
            # JSONDecodeError, UnicodeDecodeError and a non-object root are all ValueErrors
            raise MetadataParseError(f"Could not parse {path}: {exc}", path) from exc

        if IDENTITY_FIELD not in data:
            print_warning(f"  {self.filename} has no '{IDENTITY_FIELD}' field; adding it.")
        data[IDENTITY_FIELD] = project_name

        try:
            await asyncio.to_thread(
                write_json_atomic,
                data,
                path,
                self.indent,
                trailing_newline,
            )
        except OSError as exc:
            raise MetadataError(f"Could not write {path}: {exc}", path) from exc
        return data
