"""Merge a credential into an editor's MCP config file.

The merge reads the whole document, adds or updates exactly one key under
``<container>.<server>.env`` and writes the whole document back. Sibling
keys at every level are left as they were.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .editors import EditorType
from .errors import FilesystemError, UnknownDialectError, UnreadableConfigError
from .providers import mask_key
from .settings import ServerDefaults

logger = logging.getLogger(__name__)

_CONTAINER_KEYS = {
    EditorType.CLAUDE_DESKTOP: "mcpServers",
    EditorType.CLAUDE_CODE: "mcpServers",
    EditorType.ZED: "context_servers",
    EditorType.VSCODE: "servers",
    EditorType.JETBRAINS: "servers",
}


@dataclass(frozen=True)
class MergeResult:
    path: Path
    editor_type: EditorType
    container_key: str
    created_file: bool
    created_server: bool
    replaced_value: bool


def get_config_key_for_editor(editor_type: EditorType) -> str:
    return _CONTAINER_KEYS[editor_type]


def detect_editor_type(config_path: Path) -> EditorType:
    """Infer the editor dialect from a config path.

    Exact filenames win, then ``mcp.json`` by its parent convention, then
    substring hints anywhere in the path. Generic ``settings.json`` is taken
    to be Zed and generic ``mcp.json`` to be VS Code.
    """
    path_str = str(config_path)
    filename = config_path.name

    if filename == EditorType.CLAUDE_DESKTOP.config_filename:
        return EditorType.CLAUDE_DESKTOP
    if filename == EditorType.CLAUDE_CODE.config_filename:
        return EditorType.CLAUDE_CODE
    if filename == "settings.json":
        return EditorType.ZED
    if filename == "mcp.json":
        if ".vscode" in path_str:
            return EditorType.VSCODE
        if ".idea" in path_str:
            return EditorType.JETBRAINS
        return EditorType.VSCODE
    if "zed" in path_str:
        return EditorType.ZED
    if ".vscode" in path_str:
        return EditorType.VSCODE
    if ".idea" in path_str:
        return EditorType.JETBRAINS
    raise UnknownDialectError(config_path)


def _ensure_object(parent: Dict[str, Any], key: str, path: Path, where: str) -> tuple[Dict[str, Any], bool]:
    """Get-or-insert an object at ``parent[key]``; returns (object, created)."""
    value = parent.get(key)
    if value is None:
        value = {}
        parent[key] = value
        return value, True
    if not isinstance(value, dict):
        raise UnreadableConfigError(path, f"'{where}' is a {type(value).__name__}, expected an object")
    return value, False


def _read_document(config_path: Path) -> Optional[Dict[str, Any]]:
    if not config_path.exists():
        return None
    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise FilesystemError(config_path, f"failed to read config file: {e}") from e
    try:
        document = json.loads(content)
    except json.JSONDecodeError as e:
        raise UnreadableConfigError(config_path, f"failed to parse existing config as JSON ({e})") from e
    if not isinstance(document, dict):
        raise UnreadableConfigError(config_path, "top-level JSON value is not an object")
    return document


def _serialize(document: Dict[str, Any]) -> bytes:
    pretty = json.dumps(document, indent=2, ensure_ascii=False) + "\n"
    try:
        return pretty.encode("utf-8")
    except UnicodeEncodeError:
        # Lone surrogates survive json.loads but not UTF-8; keep them as \u escapes
        return (json.dumps(document, indent=2) + "\n").encode("ascii")


def _write_document(config_path: Path, document: Dict[str, Any]) -> None:
    """Replace the file that ``config_path`` points at, following symlinks."""
    data = _serialize(document)
    target = config_path.resolve()
    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent)
        )
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        if target.exists():
            shutil.copymode(target, tmp_name)
        os.replace(tmp_name, target)  # atomic move
        tmp_name = None
    except OSError as e:
        raise FilesystemError(config_path, f"failed to write config file: {e}") from e
    finally:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)


def add_to_editor_config(
    config_path: Path,
    env_var_name: str,
    api_key: str,
    server: Optional[ServerDefaults] = None,
) -> MergeResult:
    """Store ``api_key`` as ``env[env_var_name]`` of the server entry in ``config_path``.

    The file and its parent directories are created when missing. An
    existing server entry keeps all of its fields; only the one env key is
    set. Nothing is written if the existing file cannot be parsed or its
    dialect cannot be determined.

    Raises:
        UnreadableConfigError: existing content is not JSON or has the wrong shape.
        UnknownDialectError: the path matches no supported editor.
        FilesystemError: the directory or file cannot be created/written.
    """
    config_path = Path(config_path)
    server = server or ServerDefaults()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(config_path.parent, f"failed to create directory: {e}") from e

    document = _read_document(config_path)
    created_file = document is None
    if document is None:
        document = {}

    editor_type = detect_editor_type(config_path)
    server_key = get_config_key_for_editor(editor_type)

    servers, _ = _ensure_object(document, server_key, config_path, server_key)
    entry = servers.get(server.name)
    created_server = entry is None
    if created_server:
        entry = server.entry()
        servers[server.name] = entry
    elif not isinstance(entry, dict):
        raise UnreadableConfigError(
            config_path, f"'{server_key}.{server.name}' is a {type(entry).__name__}, expected an object"
        )
    env, _ = _ensure_object(entry, "env", config_path, f"{server_key}.{server.name}.env")

    replaced_value = env_var_name in env
    env[env_var_name] = api_key

    _write_document(config_path, document)
    logger.info(
        "Set %s=%s in %s (%s, %s)",
        env_var_name, mask_key(api_key), config_path, editor_type.display_name, server_key,
    )
    return MergeResult(
        path=config_path,
        editor_type=editor_type,
        container_key=server_key,
        created_file=created_file,
        created_server=created_server,
        replaced_value=replaced_value,
    )


__all__ = [
    "MergeResult",
    "get_config_key_for_editor",
    "detect_editor_type",
    "add_to_editor_config",
]
