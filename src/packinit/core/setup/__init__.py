"""Setup package for packinit.

This module provides the init flow:
- InitQuestionnaire: ordered questions building a ConfigurationDocument
- ConfigWriter: stores the document and renders the webpack config
- DependencyInstaller: installs the collected npm packages
- initialize_project: high-level function running all three

These are pure library classes with no CLI dependencies.
"""

from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

from packinit.core.exceptions import PackInitError

from .document import ConfigurationDocument
from .installer import DependencyInstaller, InstallResult
from .questionnaire import InitQuestionnaire, InitResult
from .questionnaire.entry import EntryResolver
from .questionnaire.prompts import AnswerSource
from .writer import ConfigWriter, WriteMode, WriteResult


def initialize_project(
    project_root: Path,
    source: AnswerSource,
    settings: Optional[Mapping[str, Any]] = None,
    entry_resolver: Optional[EntryResolver] = None,
    write_files: bool = True,
    write_mode: WriteMode = WriteMode.CREATE,
    install: Optional[bool] = None,
    dry_run: bool = False,
    installer: Optional[DependencyInstaller] = None,
    on_done: Optional[Callable[[InitResult], None]] = None,
) -> Dict[str, Any]:
    """Run the init questionnaire, then write and install its result.

    Args:
        project_root: Directory receiving the generated files
        source: Answer source for the questionnaire
        settings: Merged settings (see SettingsManager)
        entry_resolver: Replacement for the entry point sub-flow
        write_files: If True, write the stored document and webpack config
        write_mode: How to handle existing files (CREATE/OVERWRITE)
        install: Install dependencies; defaults to ``install.enabled``
        dry_run: Build the install command without running it
        installer: Installer to use instead of one built from settings
        on_done: Called once with the finalized InitResult

    Returns:
        Dict with 'success' boolean and either 'result' (plus
        'write_result'/'install_result') or 'error' key
    """
    settings = dict(settings or {})
    install_settings = settings.get("install") or {}
    output_settings = settings.get("output") or {}
    if install is None:
        install = bool(install_settings.get("enabled", True))

    write_result: Optional[WriteResult] = None
    try:
        questionnaire = InitQuestionnaire(
            source,
            settings=settings,
            entry_resolver=entry_resolver,
            on_done=on_done,
        )
        init_result = questionnaire.run()
        document = init_result.document

        result: Dict[str, Any] = {
            "success": True,
            "result": init_result,
            "configName": document.config_name,
            "dependencies": list(document.dependencies),
        }

        if write_files:
            writer = ConfigWriter(project_root, state_dir=str(output_settings.get("state_dir") or ".packinit"))
            write_result = writer.write(document, mode=write_mode)
            result["write_result"] = write_result
            if not write_result.success:
                result["success"] = False
                result["errors"] = write_result.errors
                return result

        if install:
            installer = installer or DependencyInstaller(
                project_root,
                package_manager=str(install_settings.get("package_manager") or "auto"),
            )
            result["install_result"] = installer.install(
                document.dependencies,
                production=init_result.is_prod,
                dry_run=dry_run,
            )

        return result
    except PackInitError as e:
        failure: Dict[str, Any] = {
            "success": False,
            "error": str(e),
            "details": e.to_json_error(),
            "exception": e,
        }
        if write_result is not None:
            failure["write_result"] = write_result
        return failure


__all__ = [
    "ConfigurationDocument",
    "InitQuestionnaire",
    "InitResult",
    "ConfigWriter",
    "WriteMode",
    "WriteResult",
    "DependencyInstaller",
    "InstallResult",
    "initialize_project",
]
