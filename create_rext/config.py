"""create-rext configuration.

Typed configuration for the scaffolding pipeline.  All settings use Pydantic
v2 models so they are validated at construction time and can be built from
environment variables without boiler-plate.
"""

from __future__ import annotations

import os
import shlex
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

_TRUTHY = {"1", "true", "yes", "on"}


class InstallConfig(BaseModel):
    """How dependencies are installed into a freshly scaffolded project."""

    command: list[str] = Field(
        default_factory=lambda: ["npm", "install"],
        min_length=1,
        description="Install command, run with the project directory as cwd",
    )
    enabled: bool = Field(default=True, description="Skip the install step when False")


class Config(BaseModel):
    """Global create-rext configuration.

    Created once by the CLI entry point (or by a test) and handed to
    ``Pipeline``.  The working directory is an explicit field so that path
    resolution never depends on hidden process state.
    """

    project_name: str = Field(default="")
    cwd: Path = Field(default_factory=Path.cwd)
    template_dir: Path | None = Field(
        default=None,
        description="Use this template tree instead of the one shipped with the package",
    )
    metadata_file: str = Field(default="package.json")
    indent: int = Field(default=2, ge=0, description="Indentation of the rewritten metadata file")
    install: InstallConfig = Field(default_factory=InstallConfig)

    @property
    def project_path(self) -> Path:
        """Absolute destination directory for ``project_name``."""
        return Path(os.path.abspath(self.cwd / self.project_name))

    @classmethod
    def from_env(cls, **overrides: Any) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            CREATE_REXT_TEMPLATE_DIR, CREATE_REXT_INSTALL_COMMAND,
            CREATE_REXT_SKIP_INSTALL, CREATE_REXT_INDENT.

        Keyword *overrides* take precedence over the environment.

        Raises:
            ValueError: If a variable cannot be parsed.  Pydantic's
                ``ValidationError`` is a ``ValueError`` too.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("CREATE_REXT_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["CREATE_REXT_TEMPLATE_DIR"])
        raw_indent = os.environ.get("CREATE_REXT_INDENT", "").strip()
        if raw_indent:
            try:
                kwargs["indent"] = int(raw_indent)
            except ValueError:
                raise ValueError(
                    f"CREATE_REXT_INDENT must be an integer, got {raw_indent!r}"
                ) from None

        install_kwargs: dict[str, Any] = {}
        if os.environ.get("CREATE_REXT_INSTALL_COMMAND"):
            install_kwargs["command"] = shlex.split(os.environ["CREATE_REXT_INSTALL_COMMAND"])
        skip = os.environ.get("CREATE_REXT_SKIP_INSTALL", "").strip().lower()
        if skip in _TRUTHY:
            install_kwargs["enabled"] = False

        kwargs["install"] = InstallConfig(**install_kwargs)
        kwargs.update(overrides)
        return cls(**kwargs)
