"""flowblocks CLI — Typer application."""

import logging

import typer
from rich.console import Console

from flowblocks.version import __version__

app = typer.Typer(
    name="flowblocks",
    help="flowblocks — run and inspect workflow integration blocks.",
    no_args_is_help=True,
    invoke_without_command=True,
)
console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", "-v", is_eager=True, help="Show version"),
):
    """flowblocks CLI."""
    if version:
        console.print(f"flowblocks v{__version__}")
        raise typer.Exit()

    from flowblocks.config import config

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


from flowblocks.cli.commands import run, keygen, config as config_cmd  # noqa: E402

app.command(name="run", help="Execute one block against a session state")(run.run_block)
app.command(name="keygen", help="Generate a credential encryption key")(keygen.keygen)
app.command(name="config", help="Show resolved configuration")(config_cmd.config_show)


if __name__ == "__main__":
    app()
