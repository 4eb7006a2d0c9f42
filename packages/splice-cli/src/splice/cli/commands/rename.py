from pathlib import Path

import typer

from splice.common import catalog
from splice.cli.factories import make_confirm_callback, make_runner


def rename_command(
    symbol: str = typer.Argument(..., help=catalog.get("cli.argument.symbol.help")),
    new_name: str = typer.Argument(..., help=catalog.get("cli.argument.new_name.help")),
    dry_run: bool = typer.Option(
        False, "--dry-run", help=catalog.get("cli.option.dry_run.help")
    ),
    yes: bool = typer.Option(False, "-y", "--yes", help=catalog.get("cli.option.yes.help")),
    hot_reload: bool = typer.Option(
        False, "--hot-reload", help=catalog.get("cli.option.hot_reload.help")
    ),
):
    runner = make_runner()
    success = runner.run_rename(
        symbol,
        new_name,
        dry_run=dry_run,
        confirm_callback=make_confirm_callback(yes),
        hot_reload=hot_reload,
    )
    if not success:
        raise typer.Exit(code=1)


def batch_command(
    plan: Path = typer.Argument(
        ...,
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help=catalog.get("cli.argument.plan.help"),
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help=catalog.get("cli.option.dry_run.help")
    ),
    yes: bool = typer.Option(False, "-y", "--yes", help=catalog.get("cli.option.yes.help")),
    hot_reload: bool = typer.Option(
        False, "--hot-reload", help=catalog.get("cli.option.hot_reload.help")
    ),
):
    runner = make_runner()
    success = runner.run_batch(
        plan.resolve(),
        dry_run=dry_run,
        confirm_callback=make_confirm_callback(yes),
        hot_reload=hot_reload,
    )
    if not success:
        raise typer.Exit(code=1)
