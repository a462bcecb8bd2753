"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Settings are built lazily so commands that never talk
to POEditor (``tools``, ``--help``) work without an API token.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import click
from pydantic import ValidationError

from poeditor_mcp.config.logging import configure_logging

if TYPE_CHECKING:
    from poeditor_mcp.config.settings import GatewaySettings
    from poeditor_mcp.services.result import OperationResult


def _describe_settings_error(exc: ValidationError) -> str:
    missing = [str(e["loc"][0]) for e in exc.errors() if e["type"] == "missing" and e["loc"]]
    if "api_token" in missing:
        return "POEDITOR_API_TOKEN environment variable is required"
    problems = "; ".join(
        f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors()
    )
    return f"Invalid configuration: {problems}"


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, *, verbose: bool = False, log_json: bool = False) -> None:
        self.verbose = verbose
        self.log_json = log_json
        self._settings: GatewaySettings | None = None

        configure_logging(verbose=verbose, log_json=log_json)

    def load_settings(self, **overrides: Any) -> GatewaySettings:
        """Build (once) and return the gateway settings.

        *overrides* are command-level flags; ``None`` means "not given".
        A missing or invalid configuration is a fatal error for the command.
        """
        if self._settings is None:
            from poeditor_mcp.config.settings import GatewaySettings

            try:
                self._settings = GatewaySettings.from_cli(
                    verbose=self.verbose or None,
                    log_json=self.log_json or None,
                    **overrides,
                )
            except ValidationError as exc:
                raise click.ClickException(_describe_settings_error(exc)) from exc
            configure_logging(verbose=self._settings.verbose, log_json=self._settings.log_json)
        return self._settings

    def emit(self, result: OperationResult, *, failed: bool | None = None) -> None:
        """Print an envelope as JSON with correct exit semantics.

        * Success: writes to stdout, returns normally. Warnings are also
          echoed to stderr so they stand out when output is piped.
        * Failure (``not result.ok``, or *failed* forced): writes to stderr,
          exits with code 1.
        """
        output = json.dumps(result.to_payload(), indent=2, default=str)
        if failed is None:
            failed = not result.ok
        if not failed:
            click.echo(output)
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
