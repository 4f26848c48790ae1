"""Command line interface for narsil-setup."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import click
from rich import box
from rich.console import Console
from rich.table import Table

from . import __version__
from .editors import EditorType, detect_available_editors, get_editor_config_path
from .errors import CredentialVerificationError, InvalidKeyFormatError, InvalidSelectionError, NoEditorsFoundError
from .logging_config import configure_logging
from .merge import add_to_editor_config
from .providers import ApiProvider, mask_key, parse_provider, sanitize_api_key, validate_key_format
from .providers_validate import validate_api_key
from .settings import AppSettings
from .wizard import NeuralWizard

logger = logging.getLogger(__name__)

EDITOR_CHOICES = [e.value for e in EditorType]
PROVIDER_CHOICES = ", ".join(f"{i}/{p.value}" for i, p in enumerate(ApiProvider, 1))


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="narsil-setup")
@click.option("--log-level", default=None, help="Log level (default: NARSIL_SETUP_LOG_LEVEL or WARNING)")
@click.option("--log-format", type=click.Choice(["json", "text"]), default=None, help="Log output format")
@click.option(
    "--workspace",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project directory holding .vscode/ and .idea/ (default: current directory)",
)
@click.pass_context
def main(ctx: click.Context, log_level: Optional[str], log_format: Optional[str], workspace: Optional[Path]) -> None:
    """Configure neural embedding API keys for narsil-mcp in your editor."""
    settings = AppSettings()
    if log_level:
        settings.log_level = log_level
    if log_format:
        settings.log_format = log_format
    if workspace is not None:
        settings.workspace_dir = workspace
    configure_logging(settings.log_level, settings.log_format)
    ctx.obj = settings


@main.command("setup")
@click.option("--no-verify", is_flag=True, help="Skip the live API key check step")
@click.pass_obj
def setup_cmd(settings: AppSettings, no_verify: bool) -> None:
    """Run the interactive setup wizard."""
    wizard = NeuralWizard(settings=settings, verify=not no_verify)
    try:
        wizard.run()
    except NoEditorsFoundError as e:
        # Reported, but not a failure of the tool itself
        e.show()


@main.command("editors")
@click.option("--existing", is_flag=True, help="Only list editors whose config file exists")
@click.option("--json", "as_json", is_flag=True, help="Print machine-readable JSON")
@click.pass_obj
def editors_cmd(settings: AppSettings, existing: bool, as_json: bool) -> None:
    """List supported editors and where their config files live."""
    editors = detect_available_editors(workspace=settings.workspace_dir)
    if existing:
        editors = [e for e in editors if e.exists]

    if as_json:
        click.echo(json.dumps([
            {"editor": e.editor_type.value, "name": e.editor_type.display_name,
             "path": str(e.config_path), "exists": e.exists}
            for e in editors
        ], indent=2))
        return
    if not editors:
        click.echo("No editor config files found.")
        return

    console = Console()
    table = Table(title="Editor configs", box=box.ROUNDED)
    table.add_column("#", style="dim")
    table.add_column("Editor", style="cyan", no_wrap=True)
    table.add_column("Config path", style="blue")
    table.add_column("Exists")
    for i, e in enumerate(editors, 1):
        table.add_row(str(i), e.editor_type.display_name, str(e.config_path), "✅" if e.exists else "—")
    console.print(table)


@main.command("set-key")
@click.option("--editor", type=click.Choice(EDITOR_CHOICES), default=None, help="Editor whose config to update")
@click.option(
    "--config-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Explicit config file path (dialect is inferred from the name)",
)
@click.option("--provider", required=True, help=f"Embedding provider ({PROVIDER_CHOICES})")
@click.option("--key", default=None, help="API key (prefer --key-stdin to keep it out of shell history)")
@click.option("--key-stdin", is_flag=True, help="Read the API key from the first line of stdin")
@click.option("--verify/--no-verify", default=False, help="Check the key against the provider first")
@click.pass_obj
def set_key_cmd(
    settings: AppSettings,
    editor: Optional[str],
    config_path: Optional[Path],
    provider: str,
    key: Optional[str],
    key_stdin: bool,
    verify: bool,
) -> None:
    """Store an API key without prompts."""
    if (editor is None) == (config_path is None):
        raise click.UsageError("Pass exactly one of --editor or --config-path.")
    if (key is None) == (not key_stdin):
        raise click.UsageError("Pass exactly one of --key or --key-stdin.")

    api_provider = parse_provider(provider)
    if api_provider is None:
        raise InvalidSelectionError("provider", provider, PROVIDER_CHOICES)

    if key_stdin:
        key = click.get_text_stream("stdin").readline()
    api_key = sanitize_api_key(key or "")
    if not validate_key_format(api_key, api_provider):
        raise InvalidKeyFormatError(api_provider.display_name)

    if verify:
        check = validate_api_key(api_key, api_provider, settings)
        if not check.ok:
            raise CredentialVerificationError(api_provider.display_name, check.reason, check.details)

    if config_path is None:
        config_path = get_editor_config_path(EditorType(editor), workspace=settings.workspace_dir)

    result = add_to_editor_config(config_path, api_provider.env_var_name, api_key, server=settings.server_defaults())
    action = "Updated" if result.replaced_value else "Added"
    click.echo(
        f"{action} {api_provider.env_var_name}={mask_key(api_key)} in {result.path} "
        f"({result.editor_type.display_name}, '{result.container_key}')"
    )


__all__ = ["main"]
