"""Interactive wizard that stores a neural embedding API key in an editor config."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional

import click

from .editors import EditorConfig, existing_editors
from .errors import InvalidKeyFormatError, NoEditorsFoundError
from .merge import MergeResult, add_to_editor_config
from .providers import ApiProvider, parse_provider, sanitize_api_key, validate_key_format
from .providers_validate import ValidationResult, validate_api_key
from .settings import AppSettings

logger = logging.getLogger(__name__)

Verifier = Callable[[str, ApiProvider], ValidationResult]

PROVIDER_MENU = [
    (ApiProvider.VOYAGE, "recommended for code, voyage-code-2"),
    (ApiProvider.OPENAI, "text-embedding-3-small or ada-002"),
    (ApiProvider.CUSTOM, "self-hosted or other provider"),
]


class NeuralWizard:
    """Interactive neural embedding setup wizard."""

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        verify: bool = True,
        verifier: Optional[Verifier] = None,
    ):
        """
        Args:
            settings: Loaded settings; read from the environment when omitted.
            verify: Offer the live key check step.
            verifier: Replacement for the live probe, called as verifier(key, provider).
        """
        self.settings = settings or AppSettings()
        self.verify = verify
        self._verifier = verifier or (lambda key, provider: validate_api_key(key, provider, self.settings))

    def welcome_screen(self) -> None:
        click.echo()
        click.echo(click.style("🧙 Neural Embedding API Key Setup Wizard", fg='cyan', bold=True))
        click.echo()
        click.echo("This wizard will help you configure neural embedding for narsil-mcp.")
        click.echo("Neural embeddings enable advanced code similarity search.")
        click.echo()

    def step_editor_selection(self, editors: List[EditorConfig]) -> EditorConfig:
        click.echo("Available editors:")
        click.echo()
        for i, editor in enumerate(editors, 1):
            click.echo(f"  {i}. {editor.editor_type.display_name} ({editor.config_path})")
        click.echo()

        choice = click.prompt(
            f"Select editor (1-{len(editors)})",
            type=click.IntRange(1, len(editors)),
        )
        return editors[choice - 1]

    def step_provider_selection(self) -> ApiProvider:
        click.echo()
        click.echo("Select your embedding provider:")
        click.echo()
        for i, (provider, desc) in enumerate(PROVIDER_MENU, 1):
            click.echo(f"  {i}. {provider.display_name} ({desc})")
        click.echo()

        while True:
            answer = click.prompt(f"Select provider (1-{len(PROVIDER_MENU)})", type=str)
            provider = parse_provider(answer)
            if provider is not None:
                return provider
            click.echo(click.style("Please enter 1, 2, or 3", fg='red'))

    def step_api_key(self, provider: ApiProvider) -> str:
        click.echo()
        click.echo(f"Enter your {provider.display_name} API key:")
        click.echo(click.style("(The key will be stored in your editor's config file)", dim=True))
        click.echo()

        key = sanitize_api_key(click.prompt("API key", hide_input=True, type=str))
        if not validate_key_format(key, provider):
            raise InvalidKeyFormatError(provider.display_name)
        return key

    def step_verify(self, key: str, provider: ApiProvider) -> bool:
        """Optionally probe the key; False means the user chose to stop."""
        if not self.verify:
            return True
        click.echo()
        if not click.confirm("Validate API key?", default=True):
            return True

        click.echo("Validating API key... ", nl=False)
        result = self._verifier(key, provider)
        if result.ok:
            click.echo(click.style("✅ Valid!", fg='green'))
            return True

        detail = f" ({result.details})" if result.details else ""
        click.echo(click.style(f"❌ Failed: {result.reason}{detail}", fg='red'))
        return click.confirm("Continue anyway?", default=False)

    def step_write(self, config_path: Path, provider: ApiProvider, key: str) -> MergeResult:
        click.echo()
        click.echo(f"Adding API key to {config_path}...")
        return add_to_editor_config(
            config_path,
            provider.env_var_name,
            key,
            server=self.settings.server_defaults(),
        )

    def show_next_steps(self) -> None:
        click.echo()
        click.echo(click.style("✅ Success! Neural embeddings are now configured.", fg='green', bold=True))
        click.echo()
        click.echo("Next steps:")
        click.echo("  1. Restart your editor to pick up the new config")
        click.echo("  2. Run narsil-mcp with the --neural flag:")
        click.echo(f"     {click.style('narsil-mcp --repos ~/code --neural', fg='cyan')}")
        click.echo()

    def run(self) -> bool:
        """Run the wizard. Returns False when the user stops after a failed check.

        Raises:
            NoEditorsFoundError: no supported editor config exists.
            SetupError: any other selection, key or merge failure.
        """
        self.welcome_screen()

        editors = existing_editors(workspace=self.settings.workspace_dir)
        if not editors:
            raise NoEditorsFoundError()

        editor = self.step_editor_selection(editors)
        provider = self.step_provider_selection()
        key = self.step_api_key(provider)

        if not self.step_verify(key, provider):
            click.echo(click.style("👋 Setup cancelled; nothing was written.", fg='yellow'))
            logger.info("User declined to continue after failed key check")
            return False

        self.step_write(editor.config_path, provider, key)
        self.show_next_steps()
        return True


__all__ = ["NeuralWizard", "PROVIDER_MENU"]
