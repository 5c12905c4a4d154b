"""The `settings` command group: manage ~/.appendguard/settings.toml."""

from __future__ import annotations

import click

from appendguard.errors import SettingError
from appendguard.policy.relations import parse_relation_list
from appendguard.settings import RELATIONS_SETTING, clear_relations, read_relations, save_relations


@click.group()
def settings() -> None:
    """Manage the protected-relation list (~/.appendguard/settings.toml)."""


@settings.command("show")
def settings_show() -> None:
    """Show the configured protected relations."""
    try:
        value = read_relations()
    except SettingError as e:
        raise click.ClickException(str(e)) from e

    if not value:
        click.echo(f"{RELATIONS_SETTING} is not set (filter is inactive).")
        return
    click.echo(f"{RELATIONS_SETTING} = {value}")
    for name in sorted(parse_relation_list(value)):
        click.echo(f"  {name}")


@settings.command("set")
@click.argument("relations")
def settings_set(relations: str) -> None:
    """Set the protected relations.

    \b
    Example:
      appendguard settings set "public.ledger, public.accounts"
    """
    for name in parse_relation_list(relations):
        if "." not in name:
            raise click.BadParameter(
                f"'{name}' is not schema-qualified (expected schema.table)",
                param_hint="'RELATIONS'",
            )
    path = save_relations(relations)
    click.echo(f"Saved {RELATIONS_SETTING} to {path}")


@settings.command("reset")
def settings_reset() -> None:
    """Unset the protected relations."""
    if clear_relations():
        click.echo(f"Reset {RELATIONS_SETTING}.")
    else:
        click.echo(f"{RELATIONS_SETTING} was not set.")
