"""Base class shared by the gateway's subcommands.

Each subcommand can carry usage examples, shown by ``--examples`` instead of
crowding ``--help``, and says at the end of its help whether it needs a
POEditor API token.
"""

from __future__ import annotations

from typing import Any

import click

TOKEN_NOTE = "Reads the API token from POEDITOR_API_TOKEN."
NO_TOKEN_NOTE = "Works without an API token."


class PoeCommand(click.Command):
    def __init__(
        self,
        *args: Any,
        examples: str | None = None,
        needs_token: bool = True,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        self.needs_token = needs_token
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._print_examples,
                    help="Show usage examples.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        super().format_epilog(ctx, formatter)
        formatter.write_paragraph()
        formatter.write_text(TOKEN_NOTE if self.needs_token else NO_TOKEN_NOTE)
