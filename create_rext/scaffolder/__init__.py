"""create-rext scaffolder -- turns the shipped template into a named project.

The four filesystem stages of the pipeline live here, leaf-first:

- ``PathResolver``: template and destination paths from explicit inputs
- ``DirectoryGuard``: refuses to overwrite an existing path
- ``TemplateMaterializer``: recursive copy of the template tree
- ``MetadataPatcher``: sets the ``name`` field of ``package.json``

Quick usage::

    from create_rext.scaffolder import PathResolver, TemplateMaterializer

    paths = PathResolver(cwd=Path.cwd()).resolve("my-app")
    await TemplateMaterializer().materialize(paths.template_path, paths.project_path)
"""

from create_rext.scaffolder.errors import (
    DestinationExistsError,
    MaterializeError,
    MetadataError,
    MetadataNotFoundError,
    MetadataParseError,
    ProjectNameError,
    ScaffoldError,
)
from create_rext.scaffolder.guard import DirectoryGuard
from create_rext.scaffolder.materializer import MaterializeResult, TemplateMaterializer
from create_rext.scaffolder.metadata import MetadataPatcher
from create_rext.scaffolder.paths import PathResolver, ProjectPaths, validate_project_name

__all__ = [
    "DestinationExistsError",
    "DirectoryGuard",
    "MaterializeError",
    "MaterializeResult",
    "MetadataError",
    "MetadataNotFoundError",
    "MetadataParseError",
    "MetadataPatcher",
    "PathResolver",
    "ProjectNameError",
    "ProjectPaths",
    "ScaffoldError",
    "TemplateMaterializer",
    "validate_project_name",
]
