import typer

from splice.common import bus, catalog
from .rendering import CliRenderer

from .commands.rename import rename_command, batch_command
from .commands.analysis import impact_command, cascade_command, safety_command

app = typer.Typer(
    name="splice",
    help=catalog.get("cli.app.description"),
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help=catalog.get("cli.option.verbose.help")
    ),
):
    # The renderer is chosen here so the global verbose flag reaches it.
    bus.set_renderer(CliRenderer(verbose=verbose))


app.command(name="rename", help=catalog.get("cli.command.rename.help"))(rename_command)
app.command(name="batch", help=catalog.get("cli.command.batch.help"))(batch_command)
app.command(name="impact", help=catalog.get("cli.command.impact.help"))(impact_command)
app.command(name="cascade", help=catalog.get("cli.command.cascade.help"))(cascade_command)
app.command(name="safety", help=catalog.get("cli.command.safety.help"))(safety_command)


if __name__ == "__main__":
    app()
