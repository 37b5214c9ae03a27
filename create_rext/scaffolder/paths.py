"""Path arithmetic for the template source and the project destination.

Nothing here touches the filesystem.  The working directory and the tool's
own location are passed in explicitly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .errors import ProjectNameError

# Template tree shipped inside the package, next to this subpackage.
PACKAGE_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_TEMPLATE_OFFSET = "template"

_SEPARATORS = ("/", "\\")


@dataclass(frozen=True)
class ProjectPaths:
    """Resolved locations for a single scaffolding run."""

    project_name: str
    project_path: Path
    template_path: Path


def validate_project_name(name: str) -> str:
    """Return *name* unchanged if it is usable as a single directory name.

    Raises:
        ProjectNameError: For empty or whitespace-only names, ``.``/``..``,
            and names containing a path separator or a NUL byte.
    """
    if not name or not name.strip():
        raise ProjectNameError(name, "name must not be empty")
    if name in (".", ".."):
        raise ProjectNameError(name, "name must not be a relative directory reference")
    if any(sep in name for sep in _SEPARATORS):
        raise ProjectNameError(name, "name must not contain a path separator")
    if "\x00" in name:
        raise ProjectNameError(name, "name must not contain a NUL byte")
    return name


class PathResolver:
    """Derives absolute template and destination paths.

    Args:
        cwd: Directory the project is created in.
        tool_root: Installation directory of the tool; the template lives at
            ``tool_root / template_offset``.
        template_offset: Relative location of the template under *tool_root*.
    """

    def __init__(
        self,
        cwd: str | Path,
        tool_root: str | Path = PACKAGE_ROOT,
        template_offset: str | Path = DEFAULT_TEMPLATE_OFFSET,
    ) -> None:
        self.cwd = Path(cwd)
        self.tool_root = Path(tool_root)
        self.template_offset = Path(template_offset)

    @property
    def template_path(self) -> Path:
        return Path(os.path.abspath(self.tool_root / self.template_offset))

    def project_path(self, project_name: str) -> Path:
        return Path(os.path.abspath(self.cwd / project_name))

    def resolve(self, project_name: str) -> ProjectPaths:
        """Resolve both paths for *project_name*."""
        return ProjectPaths(
            project_name=project_name,
            project_path=self.project_path(project_name),
            template_path=self.template_path,
        )
