"""create-rext Pipeline Orchestrator.

Implements the five-step scaffolding pipeline:

Step 1: RESOLVE     -- Validate the project name, derive template and project paths.
Step 2: GUARD       -- Refuse to continue if the project path already exists.
Step 3: MATERIALIZE -- Copy the template tree into the project path.
Step 4: PATCH       -- Set the ``name`` field of the copied ``package.json``.
Step 5: INSTALL     -- Run the package manager inside the new project.

Every step is a hard gate: the first failure stops the run and nothing
created by earlier steps is rolled back.

Usage::

    create-rext my-app
    python -m create_rext my-app
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rich.markup import escape
from rich.panel import Panel

from create_rext.config import Config
from create_rext.installer import DependencyInstaller, InstallerError, InstallerRunner
from create_rext.scaffolder import (
    DestinationExistsError,
    DirectoryGuard,
    MaterializeError,
    MetadataError,
    MetadataPatcher,
    PathResolver,
    ProjectNameError,
    ProjectPaths,
    TemplateMaterializer,
    validate_project_name,
)
from create_rext.scaffolder.materializer import CopyTree
from create_rext.scaffolder.paths import DEFAULT_TEMPLATE_OFFSET, PACKAGE_ROOT
from create_rext.utils import (
    STAGE_NAMES,
    console,
    err_console,
    format_duration,
    print_banner,
    print_error,
    print_stage_header,
    print_success,
    print_summary_table,
    print_warning,
)

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class PipelineError(Exception):
    """Raised when a pipeline step fails irrecoverably."""

    def __init__(self, stage: int, message: str) -> None:
        self.stage = stage
        self.message = message
        super().__init__(f"Step {stage} ({STAGE_NAMES.get(stage, '?')}): {message}")


# ---------------------------------------------------------------------------
# Pipeline Orchestrator
# ---------------------------------------------------------------------------


class Pipeline:
    """create-rext Pipeline Orchestrator.

    Drives the five scaffolding steps in order and records what each one did
    in an in-memory ``state`` dictionary.  Nothing is persisted between runs;
    a failed run has to be cleaned up by hand before it can be retried.

    The copy primitive and the install runner are injectable so the
    orchestration can be exercised without touching a real package manager.

    Attributes:
        config: Run configuration.
        state: Mutable dictionary that accumulates results from each step.
        paths: Resolved paths, available once step 1 has run.
    """

    def __init__(
        self,
        config: Config,
        *,
        tool_root: str | Path = PACKAGE_ROOT,
        copy_tree: CopyTree | None = None,
        installer_runner: InstallerRunner | None = None,
    ) -> None:
        self.config = config
        if config.template_dir is not None:
            self.resolver = PathResolver(
                config.cwd, tool_root=config.cwd, template_offset=config.template_dir
            )
        else:
            self.resolver = PathResolver(
                config.cwd, tool_root=tool_root, template_offset=DEFAULT_TEMPLATE_OFFSET
            )
        self.guard = DirectoryGuard()
        self.materializer = TemplateMaterializer(copy_tree)
        self.patcher = MetadataPatcher(config.metadata_file, indent=config.indent)
        self.installer = DependencyInstaller(config.install.command, runner=installer_runner)
        self.paths: ProjectPaths | None = None
        self.state: dict[str, Any] = {
            "started_at": datetime.now(timezone.utc).isoformat(),
            "stages_completed": [],
            "stages_failed": [],
            "success": False,
        }

    # ------------------------------------------------------------------
    # Step dispatch
    # ------------------------------------------------------------------

    _STAGE_METHODS: dict[int, str] = {
        1: "stage1_resolve",
        2: "stage2_guard",
        3: "stage3_materialize",
        4: "stage4_patch",
        5: "stage5_install",
    }

    async def run(self, project_name: str) -> dict[str, Any]:
        """Scaffold *project_name* under the configured working directory.

        Returns:
            The final state dictionary, including a top-level ``success``
            boolean.
        """
        pipeline_start = time.monotonic()
        self.state["project_name"] = project_name

        print_banner(
            "create-rext",
            {
                "Project": project_name,
                "Directory": str(self.config.cwd),
            },
        )

        all_success = True

        for stage_num in sorted(self._STAGE_METHODS):
            stage_name = STAGE_NAMES.get(stage_num, "UNKNOWN")
            print_stage_header(stage_num, stage_name)

            stage_start = time.monotonic()
            try:
                method = getattr(self, self._STAGE_METHODS[stage_num])
                if stage_num == 1:
                    result = await method(project_name)
                else:
                    result = await method()

                self.state[f"stage{stage_num}"] = result
                self.state["stages_completed"].append(stage_num)

            except PipelineError as exc:
                elapsed = time.monotonic() - stage_start
                all_success = False
                self.state["stages_failed"].append(stage_num)
                self.state[f"stage{stage_num}_error"] = exc.message
                print_error(
                    f"Step {stage_num} ({stage_name}) FAILED after "
                    f"{format_duration(elapsed)}: {exc.message}"
                )
                # Later steps depend on earlier ones.
                break

            except Exception as exc:
                elapsed = time.monotonic() - stage_start
                all_success = False
                self.state["stages_failed"].append(stage_num)
                tb = traceback.format_exc()
                self.state[f"stage{stage_num}_error"] = tb
                print_error(
                    f"Step {stage_num} ({stage_name}) FAILED after "
                    f"{format_duration(elapsed)}: {exc}"
                )
                err_console.print(f"[dim]{escape(tb)}[/dim]")
                break

        total_elapsed = time.monotonic() - pipeline_start
        self.state["success"] = all_success
        self.state["total_duration"] = format_duration(total_elapsed)
        self.state["finished_at"] = datetime.now(timezone.utc).isoformat()

        self._print_final_summary(total_elapsed)
        return self.state

    # ------------------------------------------------------------------
    # Step 1: RESOLVE
    # ------------------------------------------------------------------

    async def stage1_resolve(self, project_name: str) -> dict[str, Any]:
        """Validate the name and compute the template and project paths."""
        try:
            validate_project_name(project_name)
        except ProjectNameError as exc:
            raise PipelineError(1, str(exc)) from exc

        self.paths = self.resolver.resolve(project_name)
        console.print(f"  Template : [bold]{escape(str(self.paths.template_path))}[/bold]")
        console.print(f"  Project  : [bold]{escape(str(self.paths.project_path))}[/bold]")
        return {
            "project_path": str(self.paths.project_path),
            "template_path": str(self.paths.template_path),
        }

    # ------------------------------------------------------------------
    # Step 2: GUARD
    # ------------------------------------------------------------------

    async def stage2_guard(self) -> dict[str, Any]:
        """Stop before any write if the project path is taken."""
        paths = self._require_paths(2)
        try:
            self.guard.ensure_absent(paths.project_path)
        except DestinationExistsError as exc:
            raise PipelineError(2, str(exc)) from exc
        console.print("  [green]+[/green] Destination is free")
        return {"destination_free": True}

    # ------------------------------------------------------------------
    # Step 3: MATERIALIZE
    # ------------------------------------------------------------------

    async def stage3_materialize(self) -> dict[str, Any]:
        """Copy the template tree into the project path.

        A failed copy may leave a partially populated directory behind.
        """
        paths = self._require_paths(3)
        try:
            result = await self.materializer.materialize(
                paths.template_path, paths.project_path
            )
        except MaterializeError as exc:
            raise PipelineError(3, str(exc)) from exc
        console.print(
            f"  [green]+[/green] Copied {result.files_copied} file(s) in "
            f"{format_duration(result.duration_seconds)}"
        )
        return {"files_copied": result.files_copied}

    # ------------------------------------------------------------------
    # Step 4: PATCH
    # ------------------------------------------------------------------

    async def stage4_patch(self) -> dict[str, Any]:
        """Write the project name into the copied metadata file."""
        paths = self._require_paths(4)
        try:
            await self.patcher.patch(paths.project_path, paths.project_name)
        except MetadataError as exc:
            raise PipelineError(4, str(exc)) from exc
        console.print(
            f"  [green]+[/green] Set name in {escape(self.patcher.filename)} "
            f"to [bold]{escape(paths.project_name)}[/bold]"
        )
        return {
            "metadata_file": str(self.patcher.descriptor_path(paths.project_path)),
            "name": paths.project_name,
        }

    # ------------------------------------------------------------------
    # Step 5: INSTALL
    # ------------------------------------------------------------------

    async def stage5_install(self) -> dict[str, Any]:
        """Run the install command in the project and wait for it to finish."""
        paths = self._require_paths(5)
        if not self.config.install.enabled:
            print_warning("  Dependency installation disabled -- skipping.")
            return {"skipped": True}

        console.print("Installing dependencies. This may take a while...")
        try:
            result = await self.installer.install(paths.project_path)
        except InstallerError as exc:
            raise PipelineError(5, str(exc)) from exc
        print_success("Dependencies installed successfully.")
        return {
            "skipped": False,
            "command": result.command,
            "exit_code": result.exit_code,
            "duration": format_duration(result.duration_seconds),
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_paths(self, stage: int) -> ProjectPaths:
        if self.paths is None:
            raise PipelineError(stage, "Paths have not been resolved; run step 1 first")
        return self.paths

    def _print_final_summary(self, total_elapsed: float) -> None:
        """Print the final pipeline summary panel."""
        stages_ok = self.state.get("stages_completed", [])
        stages_fail = self.state.get("stages_failed", [])

        if self.state.get("success"):
            border_style = "bold green"
            status_text = "[bold green]PROJECT CREATED[/bold green]"
        else:
            border_style = "bold red"
            status_text = "[bold red]SCAFFOLDING FAILED[/bold red]"

        detail_lines = [
            status_text,
            "",
            f"Duration  : {format_duration(total_elapsed)}",
            f"Completed : {', '.join(str(s) for s in stages_ok) or 'none'}",
        ]

        if stages_fail:
            detail_lines.append(
                f"Failed    : {', '.join(str(s) for s in stages_fail)}"
            )

        if self.paths is not None:
            detail_lines.extend([
                "",
                f"Project   : {escape(str(self.paths.project_path))}",
            ])

        console.print()
        console.print(
            Panel(
                "\n".join(detail_lines),
                title="[bold]create-rext[/bold]",
                border_style=border_style,
            )
        )


def print_next_steps(project_name: str) -> None:
    """Tell the user how to start working in the new project."""
    print_success(f'\nProject "{project_name}" has been created successfully!')
    console.print(f"Navigate to the project directory with:\n  cd {escape(project_name)}")
    console.print("Then start using the rext CLI tool.")


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-rext",
        description="Create a new rext project from the bundled template",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  create-rext my-app\n"
            "  CREATE_REXT_SKIP_INSTALL=1 create-rext my-app\n"
        ),
    )
    parser.add_argument(
        "project_name",
        metavar="project-name",
        help="Name of the directory to create and of the package",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``create-rext`` and ``python -m create_rext``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        project_name = validate_project_name(args.project_name)
    except ProjectNameError as exc:
        parser.error(str(exc))

    try:
        config = Config.from_env(project_name=project_name)
    except ValueError as exc:
        parser.error(f"invalid configuration: {exc}")
    pipeline = Pipeline(config)
    state = asyncio.run(pipeline.run(project_name))

    if not state.get("success"):
        sys.exit(1)

    print_summary_table(
        {
            "Project": project_name,
            "Location": str(config.project_path),
            "Duration": state.get("total_duration", ""),
        },
        title="Summary",
    )
    print_next_steps(project_name)


if __name__ == "__main__":
    main()
