"""Exceptions raised by the scaffolding stages."""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for every scaffolding failure."""


class ProjectNameError(ScaffoldError):
    """Raised when a project name cannot be used as a directory name."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid project name {name!r}: {reason}")


class DestinationExistsError(ScaffoldError):
    """Raised when the destination directory (or a file) is already there."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f'Directory "{path.name}" already exists.')


class MaterializeError(ScaffoldError):
    """Raised when the template tree cannot be copied."""

    def __init__(self, message: str, source: Path, destination: Path) -> None:
        self.source = source
        self.destination = destination
        super().__init__(message)


class MetadataError(ScaffoldError):
    """Raised when the project metadata file is unusable."""

    def __init__(self, message: str, path: Path) -> None:
        self.path = path
        super().__init__(message)


class MetadataNotFoundError(MetadataError):
    """The template did not provide a metadata file."""


class MetadataParseError(MetadataError):
    """The metadata file is not a well-formed JSON object."""
