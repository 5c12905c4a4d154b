"""Shared helpers for CLI commands."""

from __future__ import annotations

import click

from appendguard.adapters._base import ConnectionConfig, DatabaseType
from appendguard.errors import SettingError
from appendguard.settings import read_relations

AUTO_LABELS = {"tool": "appendguard"}


def resolve_relations(relations: str | None) -> str | None:
    """--relations wins; otherwise the value stored in ~/.appendguard/settings.toml."""
    if relations is not None:
        return relations
    try:
        return read_relations()
    except SettingError as e:
        raise click.ClickException(str(e)) from e


def parse_db(value: str) -> ConnectionConfig:
    """Parse a --db value of the form ``type:key=val,key=val``."""
    if ":" not in value:
        raise click.BadParameter(
            f"Expected 'type:key=val,...', got '{value}'",
            param_hint="'--db'",
        )
    db_type_str, params_str = value.split(":", 1)

    try:
        db_type = DatabaseType(db_type_str)
    except ValueError as e:
        valid = ", ".join(t.value for t in DatabaseType)
        raise click.BadParameter(
            f"Unknown database type '{db_type_str}'. Valid: {valid}",
            param_hint="'--db'",
        ) from e

    params: dict[str, str] = {}
    if params_str:
        for part in params_str.split(","):
            if "=" not in part:
                raise click.BadParameter(
                    f"Expected key=value pair, got '{part}'",
                    param_hint="'--db'",
                )
            k, v = part.split("=", 1)
            params[k.strip()] = v.strip()

    return ConnectionConfig(name=db_type_str, db_type=db_type, params=params)
