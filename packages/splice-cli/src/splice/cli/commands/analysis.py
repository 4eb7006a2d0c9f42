from typing import List

import typer

from splice.common import catalog
from splice.cli.factories import make_runner


def impact_command(
    symbol: str = typer.Argument(..., help=catalog.get("cli.argument.symbol.help")),
    new_name: str = typer.Argument(..., help=catalog.get("cli.argument.new_name.help")),
):
    if not make_runner().run_impact(symbol, new_name):
        raise typer.Exit(code=1)


def cascade_command(
    symbols: List[str] = typer.Argument(..., help=catalog.get("cli.argument.symbols.help")),
):
    if not make_runner().run_cascade(symbols):
        raise typer.Exit(code=1)


def safety_command(
    symbol: str = typer.Argument(..., help=catalog.get("cli.argument.symbol.help")),
    new_name: str = typer.Argument(..., help=catalog.get("cli.argument.new_name.help")),
):
    if not make_runner().run_safety(symbol, new_name):
        raise typer.Exit(code=1)
