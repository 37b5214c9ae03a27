"""Refuses to scaffold over anything that already exists."""

from __future__ import annotations

from pathlib import Path

from .errors import DestinationExistsError


class DirectoryGuard:
    """Checks that a destination path is free before anything is written.

    The check and the following copy are not atomic: another process may
    create the path in between.  Single-user CLI usage is assumed.
    """

    def ensure_absent(self, path: str | Path) -> Path:
        """Return *path* if nothing exists there.

        Raises:
            DestinationExistsError: If a file, directory or symlink (even a
                dangling one) occupies *path*.
        """
        target = Path(path)
        if target.exists() or target.is_symlink():
            raise DestinationExistsError(target)
        return target
