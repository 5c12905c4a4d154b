"""CLI entry point."""

from __future__ import annotations

import logging

import click

from appendguard.cli.check import check
from appendguard.cli.exec import exec_cmd
from appendguard.cli.settings import settings


@click.group()
@click.version_option(package_name="appendguard")
@click.option("-v", "--verbose", is_flag=True, help="Log filter decisions to stderr.")
def main(verbose: bool) -> None:
    """appendguard: keep append-only relations append-only."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


main.add_command(check)
main.add_command(exec_cmd)
main.add_command(settings)
