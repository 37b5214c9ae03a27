"""Dependency installation for a freshly scaffolded project.

Runs the package manager (``npm install`` by default) inside the project
directory with the parent's stdin/stdout/stderr, so the user sees its
progress live.  The exit code is the only signal inspected.
"""

from __future__ import annotations

import shutil
import time
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from create_rext.utils import run_command

DEFAULT_INSTALL_COMMAND: tuple[str, ...] = ("npm", "install")

InstallerRunner = Callable[[list[str], Path], Awaitable[int]]


@dataclass
class InstallResult:
    """Structured result of one install invocation."""

    success: bool
    exit_code: int
    directory: Path
    command: list[str] = field(default_factory=list)
    duration_seconds: float = 0.0
    error: str = ""

    def summary(self) -> str:
        """Return a human-readable one-line summary."""
        status = "SUCCESS" if self.success else "FAILED"
        line = f"{status}: `{' '.join(self.command)}` exited {self.exit_code} after {self.duration_seconds:.1f}s"
        if self.error:
            line += f" ({self.error})"
        return line


class InstallerError(Exception):
    """Raised when the install command cannot be run or exits non-zero."""

    def __init__(self, message: str, result: InstallResult | None = None):
        self.result = result
        super().__init__(message)


async def run_inherited(command: list[str], directory: Path) -> int:
    """Spawn *command* in *directory* with inherited streams and wait for it.

    No timeout is applied.  Raises ``OSError`` if the process cannot start.
    """
    executable = shutil.which(command[0]) or command[0]
    return await run_command([executable, *command[1:]], cwd=directory)


class DependencyInstaller:
    """Installs a project's dependencies by delegating to an external tool.

    Args:
        command: Argument vector of the install command.
        runner: Async callable ``(command, directory) -> exit_code``.  Tests
            substitute a double that records calls and returns a scripted
            status.
    """

    def __init__(
        self,
        command: Sequence[str] | None = None,
        runner: InstallerRunner | None = None,
    ) -> None:
        self.command: list[str] = list(DEFAULT_INSTALL_COMMAND if command is None else command)
        if not self.command:
            raise ValueError("Install command must not be empty")
        self.runner: InstallerRunner = runner or run_inherited

    async def install(self, project_path: str | Path) -> InstallResult:
        """Run the install command in *project_path* and wait for it.

        Returns:
            The ``InstallResult`` of a zero exit.

        Raises:
            InstallerError: On spawn failure or a non-zero exit.  No retry.
        """
        directory = Path(project_path)
        start = time.monotonic()
        try:
            exit_code = await self.runner(list(self.command), directory)
        except OSError as exc:
            result = InstallResult(
                success=False,
                exit_code=-1,
                directory=directory,
                command=list(self.command),
                duration_seconds=time.monotonic() - start,
                error=str(exc),
            )
            raise InstallerError(
                f"Failed to install dependencies: could not run "
                f"`{' '.join(self.command)}`: {exc}",
                result=result,
            ) from exc

        result = InstallResult(
            success=exit_code == 0,
            exit_code=exit_code,
            directory=directory,
            command=list(self.command),
            duration_seconds=time.monotonic() - start,
        )
        if not result.success:
            result.error = f"exit status {exit_code}"
            raise InstallerError(
                f"Failed to install dependencies: `{' '.join(self.command)}` "
                f"exited with status {exit_code}",
                result=result,
            )
        return result
