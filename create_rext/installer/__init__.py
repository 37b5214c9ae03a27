"""create-rext installer -- runs the package manager in the new project."""

from create_rext.installer.runner import (
    DEFAULT_INSTALL_COMMAND,
    DependencyInstaller,
    InstallerError,
    InstallerRunner,
    InstallResult,
    run_inherited,
)

__all__ = [
    "DEFAULT_INSTALL_COMMAND",
    "DependencyInstaller",
    "InstallResult",
    "InstallerError",
    "InstallerRunner",
    "run_inherited",
]
