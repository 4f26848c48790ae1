"""Error hierarchy for narsil-setup with friendly, actionable messages."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click


class SetupError(click.ClickException):
    """Base class for all CLI-visible errors with enhanced formatting."""

    #: Emoji shown at the beginning of every error line
    emoji: str = "❌"

    #: Short, actionable suggestion shown after the main message.
    hint: Optional[str] = None

    def __init__(self, message: str, hint: Optional[str] = None) -> None:
        super().__init__(message)
        if hint is not None:
            self.hint = hint

    @property
    def formatted_message(self) -> str:
        """
        Returns the final string that Click writes to stderr.
        Includes:
        * emoji + main message (bold)
        * optional hint on a new line (yellow)
        """
        lines = [f"{self.emoji}  {click.style(self.message, fg='red', bold=True)}"]
        if self.hint:
            lines.append(click.style(f"💡 {self.hint}", fg='yellow'))
        return "\n".join(lines)

    def show(self, file=None) -> None:
        click.echo(self.formatted_message, err=True, file=file)


class NoEditorsFoundError(SetupError):
    """Raised when discovery finds no existing editor config file."""
    emoji = "⚠️"

    def __init__(self) -> None:
        hint = (
            "Supported editors: Claude Desktop, Claude Code, Zed, VS Code, JetBrains.\n"
            "Create a config file manually or run this wizard from your project "
            "directory (for VS Code/JetBrains)."
        )
        super().__init__("No supported editor config files found.", hint)


class InvalidSelectionError(SetupError):
    """Raised when a menu choice or a named option does not match anything."""
    emoji = "🚫"

    def __init__(self, what: str, value: str, choices: Optional[str] = None) -> None:
        hint = f"Valid choices: {click.style(choices, fg='cyan')}" if choices else None
        super().__init__(f"Invalid {what} selection {click.style(repr(value), fg='magenta')}.", hint)


class InvalidKeyFormatError(SetupError):
    """Raised when a sanitized key fails the provider's shape rule."""
    emoji = "🔑"

    def __init__(self, provider_name: str) -> None:
        super().__init__(
            f"Invalid API key format for {provider_name}",
            "Check that you pasted the whole key, including its prefix.",
        )


class CredentialVerificationError(SetupError):
    """Raised when the live probe rejects a key and the caller asked to enforce it."""
    emoji = "🔐"

    def __init__(self, provider_name: str, reason: str, details: Optional[str] = None) -> None:
        message = f"API key verification failed for {provider_name}: {reason}"
        if details:
            message += f" ({details})"
        super().__init__(message, "Re-run without --verify to store the key anyway.")


class UnreadableConfigError(SetupError):
    """Raised when an existing config cannot be modified safely."""
    emoji = "🔧"

    def __init__(self, path: Path, details: str) -> None:
        self.path = path
        hint = f"Fix {click.style(str(path), fg='cyan')} by hand; it was left untouched."
        super().__init__(f"Cannot update {path}: {details}", hint)


class UnknownDialectError(SetupError):
    """Raised when a config path matches no known editor convention."""
    emoji = "🔍"

    def __init__(self, path: Path) -> None:
        self.path = path
        hint = (
            "Expected claude_desktop_config.json, claude_code_config.json, "
            "settings.json (Zed) or mcp.json (VS Code/JetBrains)."
        )
        super().__init__(f"Unknown editor config path: {path}", hint)


class FilesystemError(SetupError):
    """Raised when a directory cannot be created or the config cannot be written."""
    emoji = "🛡️"

    def __init__(self, path: Path, details: str) -> None:
        self.path = path
        hint = f"Make sure you have read/write access to {click.style(str(path), fg='cyan')}."
        super().__init__(f"Filesystem error at {path}: {details}", hint)


class EditorPathUnavailableError(SetupError):
    """Raised when an editor's config location cannot be computed on this machine."""
    emoji = "🧭"

    def __init__(self, editor_name: str, details: str) -> None:
        super().__init__(f"Cannot locate {editor_name} config: {details}")


__all__ = [
    "SetupError",
    "NoEditorsFoundError",
    "InvalidSelectionError",
    "InvalidKeyFormatError",
    "CredentialVerificationError",
    "UnreadableConfigError",
    "UnknownDialectError",
    "FilesystemError",
    "EditorPathUnavailableError",
]
