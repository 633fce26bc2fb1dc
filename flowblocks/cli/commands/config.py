"""flowblocks config — Show resolved configuration."""

from rich.console import Console
from rich.table import Table
from rich import box

console = Console()


def config_show():
    """Show the resolved flowblocks configuration.

    Reads from environment variables and .env file.
    The encryption key is masked.

    Example:
        flowblocks config
    """
    from flowblocks.config import FlowblocksConfig
    cfg = FlowblocksConfig()

    def mask(val: str) -> str:
        s = str(val)
        if len(s) <= 8:
            return "***"
        return s[:4] + "…" + "***"

    sensitive = {"credential_encryption_key"}

    table = Table(
        box=box.ROUNDED,
        header_style="bold dim",
        show_lines=False,
        title="[bold]flowblocks Configuration[/bold]",
    )
    table.add_column("Key", style="cyan", width=30)
    table.add_column("Value", width=45)
    table.add_column("Env Var", style="dim", width=40)

    for attr in FlowblocksConfig.model_fields:
        val = getattr(cfg, attr, None)
        if val is None:
            display = "[dim](not set)[/dim]"
        elif attr in sensitive:
            display = mask(str(val))
        else:
            display = str(val)
        table.add_row(attr, display, f"FLOWBLOCKS_{attr.upper()}")

    console.print()
    console.print(table)
    console.print()
    console.print("[dim]Source: environment variables + .env file (prefix: FLOWBLOCKS_)[/dim]")
