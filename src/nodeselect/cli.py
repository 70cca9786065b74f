"""Typer command line: one sub-command per user command, plus a REPL."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Callable

import typer
from rich.console import Console
from rich.markup import escape

from nodeselect import commands, prompts
from nodeselect.commands import Session
from nodeselect.config import load_config
from nodeselect.errors import NodeSelectError, SelectionAborted

APP_HELP = """
nodeselect: fuzzy, previewing prompts over a markdown note graph.

A vault is a directory of markdown notes.  A note whose front-matter has an
`id` is a node, and so is every heading tagged `{#some-id}`.  Notes link to
each other with `[[id:some-id][Title]]`.

COMMANDS:
- search:        grep the vault (ripgrep by default) and jump to a hit
- backlinks:     pick among the nodes linking to the current note
- forward-links: pick among the nodes the current note links to
- file-find:     pick any file in the vault
- node-find:     pick a node by title; an unknown title creates a note
- ref-find:      pick a node by one of its references
- toggle-mode:   switch the node/ref prompts to the fuzzy selector (lasts
                 for one process: use it inside `repl`, or pass --mode)
- repl:          run the commands above in one session

The current note is given with --file (and --line for heading nodes).
"""

app = typer.Typer(name="nodeselect", help=APP_HELP, no_args_is_help=True)
console = Console()
err_console = Console(stderr=True)


@contextmanager
def reporting():
    """Report nodeselect errors on stderr and exit with status 1."""
    try:
        yield
    except SelectionAborted:
        err_console.print("Quit")
        raise typer.Exit(code=1)
    except NodeSelectError as exc:
        err_console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    vault: Path | None = typer.Option(None, "--vault", "-v", help="Vault directory (default: $NODESELECT_VAULT or .)"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file (default: <vault>/.nodeselect.toml)"),
    file: Path | None = typer.Option(None, "--file", "-f", help="Current note file."),
    line: int = typer.Option(1, "--line", "-l", help="Current line in --file."),
    mode: bool | None = typer.Option(None, "--mode/--no-mode", help="Use the fuzzy selector for node/ref prompts."),
):
    with reporting():
        cfg = load_config(config, vault)
        if mode is not None:
            cfg.mode = mode
        ctx.obj = Session.open(cfg, current_file=file, current_line=line)
        ctx.call_on_close(ctx.obj.close)


@app.command()
def search(ctx: typer.Context, initial: str | None = typer.Argument(None, help="Initial search input.")):
    """Search the vault's text and jump to a match."""
    with reporting():
        commands.search_notes(ctx.obj, initial)


@app.command()
def backlinks(ctx: typer.Context):
    """Pick among the nodes linking to the current node."""
    with reporting():
        node = commands.backlinks(ctx.obj)
        console.print(f"[green]{escape(node.title)}[/green] {node.file}:{node.point}")


@app.command("forward-links")
def forward_links(ctx: typer.Context):
    """Pick among the nodes linked from the current note."""
    with reporting():
        node = commands.forward_links(ctx.obj)
        console.print(f"[green]{escape(node.title)}[/green] {node.file}:{node.point}")


@app.command("file-find")
def file_find(ctx: typer.Context, initial: str | None = typer.Argument(None)):
    """Pick any file in the vault and open it."""
    with reporting():
        path = commands.file_find(ctx.obj, initial)
        console.print(str(path))


@app.command("node-find")
def node_find(ctx: typer.Context, initial: str | None = typer.Argument(None)):
    """Pick a node by title; an unknown title creates a new note."""
    with reporting():
        node = commands.node_find(ctx.obj, initial)
        console.print(f"[green]{escape(node.title)}[/green] {node.file}:{node.point}")


@app.command("ref-find")
def ref_find(ctx: typer.Context, initial: str | None = typer.Argument(None)):
    """Pick a node by one of its references."""
    with reporting():
        node = commands.ref_find(ctx.obj, initial)
        console.print(f"[green]{escape(node.title)}[/green] {node.file}:{node.point}")


@app.command("toggle-mode")
def toggle_mode():
    """Flip the node/ref prompt override for this process only.

    The switch is not saved anywhere; inside `repl` it lasts for the rest of
    the session.  Use --mode (or `mode = true` in the config) to start with
    it enabled.
    """
    state = commands.toggle_mode()
    console.print(f"nodeselect mode {'enabled' if state else 'disabled'}")


# ---------------------------------------------------------------------------
# REPL
# ---------------------------------------------------------------------------

REPL_COMMANDS: dict[str, Callable[[Session, str | None], object]] = {
    "search": commands.search_notes,
    "backlinks": lambda s, _: commands.backlinks(s),
    "forward-links": lambda s, _: commands.forward_links(s),
    "file-find": commands.file_find,
    "node-find": commands.node_find,
    "ref-find": commands.ref_find,
    "toggle-mode": lambda s, _: commands.toggle_mode(),
}


@app.command()
def repl(ctx: typer.Context):
    """Run commands interactively; the mode toggle lasts for the session."""
    session: Session = ctx.obj
    console.print(f"Commands: {', '.join(REPL_COMMANDS)}, quit")
    while True:
        try:
            raw = input("nodeselect> ")
        except (EOFError, KeyboardInterrupt):
            break
        words = raw.split()
        if not words:
            continue
        name, arg = words[0], " ".join(words[1:]) or None
        if name in ("quit", "exit"):
            break
        command = REPL_COMMANDS.get(name)
        if command is None:
            err_console.print(f"[red]Unknown command: {escape(name)}[/red]")
            continue
        try:
            result = command(session, arg)
        except SelectionAborted:
            err_console.print("Quit")
            continue
        except NodeSelectError as exc:
            err_console.print(f"[red]{escape(str(exc))}[/red]")
            continue
        if isinstance(result, bool):
            console.print(f"nodeselect mode {'enabled' if prompts.mode_enabled() else 'disabled'}")
        elif result is not None:
            console.print(escape(str(getattr(result, "title", result))))


if __name__ == "__main__":
    app()
