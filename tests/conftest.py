"""Shared pytest fixtures for the create-rext test suite.

Provides reusable fixtures for:
- A small template tree and an empty working directory
- A recording double for the install runner
- Pipeline construction wired to the fixtures above
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from create_rext.config import Config, InstallConfig
from create_rext.pipeline import Pipeline


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

TEMPLATE_PACKAGE_JSON: dict[str, Any] = {
    "name": "template-default",
    "version": "1.0.0",
    "private": True,
    "scripts": {"dev": "rext dev"},
    "dependencies": {"rext": "^0.1.0"},
}


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """Template tree with ``package.json``, ``README.md`` and a nested source file."""
    root = tmp_path / "template"
    (root / "src" / "components").mkdir(parents=True)
    (root / "package.json").write_text(
        json.dumps(TEMPLATE_PACKAGE_JSON, indent=2) + "\n", encoding="utf-8"
    )
    (root / "README.md").write_text("# rext project\n", encoding="utf-8")
    (root / "src" / "index.ts").write_text("export {};\n", encoding="utf-8")
    (root / "src" / "components" / "App.tsx").write_text(
        "export const App = () => null;\n", encoding="utf-8"
    )
    yield root


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Empty directory that plays the role of the user's working directory."""
    cwd = tmp_path / "workspace"
    cwd.mkdir()
    yield cwd


# ---------------------------------------------------------------------------
# Install runner double
# ---------------------------------------------------------------------------


class RecordingInstaller:
    """Async stand-in for the install runner.

    Records every ``(command, directory)`` it is called with and returns the
    scripted exit code, or raises the scripted exception.
    """

    def __init__(self, exit_code: int = 0, error: BaseException | None = None) -> None:
        self.exit_code = exit_code
        self.error = error
        self.calls: list[tuple[list[str], Path]] = []

    async def __call__(self, command: list[str], directory: Path) -> int:
        self.calls.append((list(command), Path(directory)))
        if self.error is not None:
            raise self.error
        return self.exit_code


@pytest.fixture
def recording_installer() -> RecordingInstaller:
    return RecordingInstaller()


# ---------------------------------------------------------------------------
# Pipeline factory
# ---------------------------------------------------------------------------


@pytest.fixture
def make_pipeline(
    template_dir: Path, workspace: Path, recording_installer: RecordingInstaller
) -> Callable[..., Pipeline]:
    """Build a ``Pipeline`` rooted at ``workspace`` using ``template_dir``.

    Keyword arguments override ``Config`` fields; ``installer_runner`` and
    ``copy_tree`` are passed to the pipeline.
    """

    def _factory(
        installer_runner: Any = None,
        copy_tree: Any = None,
        **config_overrides: Any,
    ) -> Pipeline:
        config_kwargs: dict[str, Any] = {
            "cwd": workspace,
            "template_dir": template_dir,
            "install": InstallConfig(command=["npm", "install"]),
        }
        config_kwargs.update(config_overrides)
        return Pipeline(
            Config(**config_kwargs),
            copy_tree=copy_tree,
            installer_runner=installer_runner or recording_installer,
        )

    return _factory


@pytest.fixture
def make_installer() -> type[RecordingInstaller]:
    """The ``RecordingInstaller`` class, for tests that script their own status."""
    return RecordingInstaller
