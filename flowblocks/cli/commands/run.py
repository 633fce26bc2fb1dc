"""flowblocks run — Execute one block against a session state from the command line."""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table
from rich import box

console = Console()

_STATUS_COLOR = {
    "success": "green",
    "info": "cyan",
    "error": "red",
}


def _credentials_ref(options: Optional[dict]) -> Optional[str]:
    if not options:
        return None
    return options.get("credentialsId") or options.get("credentials_id")


async def _execute(block, state, token: Optional[str]):
    from flowblocks.config import config
    from flowblocks.callbacks import LoggingCallback
    from flowblocks.credentials import CredentialEncryption, CredentialVault, VaultCredentialResolver
    from flowblocks.integrations import build_registry
    from flowblocks.types import CredentialType

    vault = CredentialVault(CredentialEncryption(config.credential_encryption_key or ""))
    ref = _credentials_ref(block.options)
    if ref and token:
        vault.store(
            workspace_id=state.workspace_id,
            name=f"cli-{block.type.lower()}",
            credential_type=CredentialType.BEARER_TOKEN,
            data={"token": token},
            credential_id=ref,
        )

    registry = build_registry(VaultCredentialResolver(vault), callbacks=[LoggingCallback()])
    return await registry.execute(block, state)


def run_block(
    block_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Block JSON file"),
    state_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Session state JSON file"),
    token: Optional[str] = typer.Option(
        None, "--token", "-t", envvar="FLOWBLOCKS_TOKEN",
        help="Bearer token stored under the block's credential reference",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the raw execution result as JSON"),
):
    """Execute one integration block and show its logs and variable changes.

    The token is kept in a throwaway in-memory vault for this run only.
    Exits with status 1 when the block produced an error log.

    Example:
        flowblocks run block.json state.json --token $HINOVA_TOKEN
    """
    from flowblocks.exceptions import BlockNotSupported
    from flowblocks.types import Block, LogStatus, SessionState

    block = Block.model_validate_json(block_file.read_text(encoding="utf-8"))
    state = SessionState.model_validate_json(state_file.read_text(encoding="utf-8"))

    try:
        result = asyncio.run(_execute(block, state, token))
    except BlockNotSupported as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(2)

    if as_json:
        console.print_json(result.model_dump_json())
    else:
        logs = Table(box=box.ROUNDED, header_style="bold dim", title=f"[bold]{block.type}[/bold] · {block.id}")
        logs.add_column("Status", width=9)
        logs.add_column("Description")
        logs.add_column("Details", style="dim")
        for entry in result.logs:
            color = _STATUS_COLOR.get(entry.status.value, "white")
            logs.add_row(f"[{color}]{entry.status.value}[/{color}]", entry.description, entry.details or "")
        console.print()
        console.print(logs)

        if result.new_set_variable_history:
            names = {v.id: v.name for v in state.variables}
            changes = Table(box=box.ROUNDED, header_style="bold dim", title="[bold]Variables set[/bold]")
            changes.add_column("Variable", style="cyan")
            changes.add_column("Value")
            for item in result.new_set_variable_history:
                changes.add_row(names.get(item.variable_id, item.variable_id), item.value)
            console.print(changes)
        console.print(f"[dim]Next edge: {result.outgoing_edge_id or '(none)'}[/dim]")

    if any(entry.status == LogStatus.ERROR for entry in result.logs):
        raise typer.Exit(1)
