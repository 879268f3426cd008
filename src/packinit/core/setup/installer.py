"""Dependency installation for generated configurations."""
from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from packinit.core.exceptions import InstallError

logger = logging.getLogger(__name__)

PACKAGE_MANAGERS = ("npm", "yarn")


@dataclass
class InstallResult:
    """Outcome of an install invocation."""

    package_manager: str
    command: List[str]
    dependencies: List[str] = field(default_factory=list)
    production: bool = False
    dry_run: bool = False
    returncode: Optional[int] = None

    @property
    def executed(self) -> bool:
        return not self.dry_run and self.returncode is not None


def detect_package_manager(
    which_func: Callable[[str], Optional[str]] = shutil.which,
) -> str:
    """Return ``yarn`` when it is on PATH, otherwise ``npm``."""
    return "yarn" if which_func("yarn") else "npm"


def build_command(package_manager: str, dependencies: Sequence[str]) -> List[str]:
    """Build the install command saving ``dependencies`` as dev dependencies.

    Raises:
        InstallError: For an unknown package manager
    """
    if package_manager == "yarn":
        return ["yarn", "add", "--dev", *dependencies]
    if package_manager == "npm":
        return ["npm", "install", "--save-dev", *dependencies]
    raise InstallError(
        f"Unsupported package manager: {package_manager}",
        context={"package_manager": package_manager, "supported": list(PACKAGE_MANAGERS)},
    )


class DependencyInstaller:
    """Install npm packages into a project directory.

    ``which_func`` and ``run_func`` default to ``shutil.which`` and
    ``subprocess.run``; tests pass fakes.
    """

    def __init__(
        self,
        project_root: Path,
        *,
        package_manager: str = "auto",
        which_func: Callable[[str], Optional[str]] = shutil.which,
        run_func: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ) -> None:
        self.project_root = Path(project_root)
        self.requested_manager = package_manager
        self._which = which_func
        self._run = run_func

    def resolve_package_manager(self) -> str:
        if self.requested_manager in (None, "", "auto"):
            return detect_package_manager(self._which)
        return self.requested_manager

    def install(
        self,
        dependencies: Sequence[str],
        *,
        production: bool = False,
        dry_run: bool = False,
    ) -> InstallResult:
        """Install ``dependencies`` with the resolved package manager.

        Packages are always saved as dev dependencies; ``production`` is the
        install mode of the configuration and is recorded on the result.

        Args:
            dependencies: Package names, in order
            production: Whether the configuration targets production
            dry_run: Only build the command

        Returns:
            InstallResult

        Raises:
            InstallError: If the command cannot be started or exits non-zero
        """
        manager = self.resolve_package_manager()
        command = build_command(manager, dependencies)
        result = InstallResult(
            package_manager=manager,
            command=command,
            dependencies=list(dependencies),
            production=production,
            dry_run=dry_run,
        )
        if dry_run or not dependencies:
            logger.info("Skipping install (dry_run=%s): %s", dry_run, " ".join(command))
            return result

        logger.info("Installing %d packages with %s (production=%s)", len(dependencies), manager, production)
        try:
            completed = self._run(command, cwd=str(self.project_root), check=False)
        except (OSError, subprocess.SubprocessError) as e:
            raise InstallError(
                f"Failed to run {manager}: {e}",
                command=command,
                context={"project_root": str(self.project_root)},
            ) from e

        result.returncode = completed.returncode
        if completed.returncode != 0:
            raise InstallError(
                f"{manager} exited with status {completed.returncode}",
                command=command,
                returncode=completed.returncode,
            )
        return result


__all__ = [
    "DependencyInstaller",
    "InstallResult",
    "build_command",
    "detect_package_manager",
    "PACKAGE_MANAGERS",
]
