"""Editor config discovery.

Knows where each supported editor keeps the JSON file that registers MCP
servers, per operating system, and which of those files exist right now.
Desktop apps live under per-user application directories; VS Code and
JetBrains IDEs read a workspace-scoped file from the project directory.
"""

from __future__ import annotations

import logging
import os
import platform
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional

from .errors import EditorPathUnavailableError

logger = logging.getLogger(__name__)


class EditorType(str, Enum):
    CLAUDE_DESKTOP = "claude-desktop"
    CLAUDE_CODE = "claude-code"
    ZED = "zed"
    VSCODE = "vscode"
    JETBRAINS = "jetbrains"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def config_filename(self) -> str:
        return _CONFIG_FILENAMES[self]

    def __str__(self) -> str:
        return self.display_name


_DISPLAY_NAMES = {
    EditorType.CLAUDE_DESKTOP: "Claude Desktop",
    EditorType.CLAUDE_CODE: "Claude Code",
    EditorType.ZED: "Zed",
    EditorType.VSCODE: "VS Code",
    EditorType.JETBRAINS: "JetBrains IDEs",
}

_CONFIG_FILENAMES = {
    EditorType.CLAUDE_DESKTOP: "claude_desktop_config.json",
    EditorType.CLAUDE_CODE: "claude_code_config.json",
    EditorType.ZED: "settings.json",
    EditorType.VSCODE: "mcp.json",
    EditorType.JETBRAINS: "mcp.json",
}


@dataclass(frozen=True)
class EditorConfig:
    """One editor's config location, stamped with whether the file exists."""
    editor_type: EditorType
    config_path: Path
    exists: bool


def _home(editor_type: EditorType) -> Path:
    try:
        return Path.home()
    except RuntimeError as e:
        raise EditorPathUnavailableError(editor_type.display_name, str(e)) from e


def _appdata(editor_type: EditorType) -> Path:
    appdata = os.environ.get("APPDATA")
    if not appdata:
        raise EditorPathUnavailableError(editor_type.display_name, "APPDATA is not set")
    return Path(appdata)


def _xdg_config_home(editor_type: EditorType) -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    return _home(editor_type) / ".config"


def get_editor_config_path(
    editor_type: EditorType,
    *,
    system: Optional[str] = None,
    workspace: Optional[Path] = None,
) -> Path:
    """Return the canonical config file path for ``editor_type``.

    Args:
        editor_type: Editor to resolve.
        system: ``platform.system()`` style name; defaults to the running OS.
        workspace: Project directory for workspace-scoped editors; defaults to cwd.

    Raises:
        EditorPathUnavailableError: when the platform directory it depends on
            cannot be determined.
    """
    system = system or platform.system()
    filename = editor_type.config_filename

    if editor_type == EditorType.CLAUDE_DESKTOP:
        if system == "Darwin":
            base = _home(editor_type) / "Library" / "Application Support" / "Claude"
        elif system == "Windows":
            base = _appdata(editor_type) / "Claude"
        else:
            base = _xdg_config_home(editor_type) / "Claude"
        return base / filename

    if editor_type == EditorType.CLAUDE_CODE:
        return _home(editor_type) / ".claude" / filename

    if editor_type == EditorType.ZED:
        if system == "Windows":
            base = _appdata(editor_type) / "Zed"
        elif system == "Darwin":
            base = _home(editor_type) / ".config" / "zed"
        else:
            base = _xdg_config_home(editor_type) / "zed"
        return base / filename

    root = workspace if workspace is not None else Path.cwd()
    if editor_type == EditorType.VSCODE:
        return root / ".vscode" / filename
    return root / ".idea" / filename


def detect_available_editors(
    *,
    system: Optional[str] = None,
    workspace: Optional[Path] = None,
) -> List[EditorConfig]:
    """Resolve every editor in declaration order and record which files exist.

    An editor whose location cannot be computed is logged and left out;
    discovery as a whole never fails.
    """
    editors: List[EditorConfig] = []
    for editor_type in EditorType:
        try:
            path = get_editor_config_path(editor_type, system=system, workspace=workspace)
        except EditorPathUnavailableError as e:
            logger.warning("Skipping %s: %s", editor_type.display_name, e.message)
            continue
        editors.append(EditorConfig(editor_type=editor_type, config_path=path, exists=path.exists()))
    logger.debug("Discovered %d editor config locations", len(editors))
    return editors


def existing_editors(
    *,
    system: Optional[str] = None,
    workspace: Optional[Path] = None,
) -> List[EditorConfig]:
    return [e for e in detect_available_editors(system=system, workspace=workspace) if e.exists]


__all__ = [
    "EditorType",
    "EditorConfig",
    "get_editor_config_path",
    "detect_available_editors",
    "existing_editors",
]
