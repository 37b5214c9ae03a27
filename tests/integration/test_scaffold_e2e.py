"""Integration tests for the full scaffolding pipeline.

These tests run every step for real: the template is copied with
``shutil.copytree`` and the install step spawns an actual child process (a
Python one-liner standing in for the package manager).

No network access or Node.js toolchain is required.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

from create_rext.config import Config, InstallConfig
from create_rext.pipeline import Pipeline
from create_rext.scaffolder.paths import PACKAGE_ROOT

# Writes the directory it ran in, so the test can check where install happened.
_FAKE_INSTALL = [
    sys.executable,
    "-c",
    "import os; open('install-cwd.txt', 'w').write(os.getcwd())",
]


def _files(root: Path) -> set[str]:
    return {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file()}


@pytest.mark.integration
class TestScaffoldEndToEnd:
    """Run the whole pipeline against real directories."""

    async def test_readme_and_package_json_scenario(self, tmp_path: Path) -> None:
        template = tmp_path / "template"
        template.mkdir()
        (template / "package.json").write_text(
            json.dumps({"name": "template-default", "version": "1.0.0"}), encoding="utf-8"
        )
        (template / "README.md").write_text("# Hello\n", encoding="utf-8")
        cwd = tmp_path / "cwd"
        cwd.mkdir()

        config = Config(
            cwd=cwd,
            template_dir=template,
            install=InstallConfig(command=_FAKE_INSTALL),
        )
        state = await Pipeline(config).run("my-app")

        project = cwd / "my-app"
        assert state["success"] is True
        assert (project / "README.md").read_text(encoding="utf-8") == "# Hello\n"
        assert json.loads((project / "package.json").read_text(encoding="utf-8")) == {
            "name": "my-app",
            "version": "1.0.0",
        }
        install_cwd = Path((project / "install-cwd.txt").read_text(encoding="utf-8"))
        assert install_cwd.resolve() == project.resolve()

    async def test_shipped_template(self, tmp_path: Path) -> None:
        shipped = PACKAGE_ROOT / "template"
        config = Config(cwd=tmp_path, install=InstallConfig(command=_FAKE_INSTALL))

        state = await Pipeline(config).run("shop-front")

        project = tmp_path / "shop-front"
        assert state["success"] is True
        assert _files(shipped) <= _files(project)
        patched = json.loads((project / "package.json").read_text(encoding="utf-8"))
        original = json.loads((shipped / "package.json").read_text(encoding="utf-8"))
        assert patched == {**original, "name": "shop-front"}
        # The shipped template itself is never modified.
        assert original["name"] == "rext-template"

    async def test_second_run_refuses_existing_project(self, tmp_path: Path) -> None:
        config = Config(cwd=tmp_path, install=InstallConfig(command=_FAKE_INSTALL))
        first = await Pipeline(config).run("twice")
        assert first["success"] is True
        before = {
            rel: (tmp_path / "twice" / rel).read_bytes() for rel in _files(tmp_path / "twice")
        }

        second = await Pipeline(config).run("twice")

        assert second["success"] is False
        assert second["stages_failed"] == [2]
        after = {
            rel: (tmp_path / "twice" / rel).read_bytes() for rel in _files(tmp_path / "twice")
        }
        assert before == after

    async def test_failing_install_leaves_patched_project(self, tmp_path: Path) -> None:
        config = Config(
            cwd=tmp_path,
            install=InstallConfig(command=[sys.executable, "-c", "import sys; sys.exit(1)"]),
        )

        state = await Pipeline(config).run("broken-install")

        project = tmp_path / "broken-install"
        assert state["success"] is False
        assert state["stages_failed"] == [5]
        assert json.loads((project / "package.json").read_text(encoding="utf-8"))["name"] == (
            "broken-install"
        )
