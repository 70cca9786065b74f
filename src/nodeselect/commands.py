"""User commands: search, backlinks, forward links, file find and friends.

Each command takes a :class:`Session`, the per-process bundle of graph,
link store, configuration and prompt providers, and either visits the
chosen target through :meth:`Session.open_file` or raises a
:class:`~nodeselect.errors.NodeSelectError` explaining why it could not.
"""

from __future__ import annotations

import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from nodeselect import prompts
from nodeselect.config import Config, resolve_callable
from nodeselect.db import GraphDB
from nodeselect.errors import EmptyResultError, NoContextError
from nodeselect.index import NoteGraph
from nodeselect.node import Candidate, Node, NotFound
from nodeselect.parser import parse_typed_links
from nodeselect.provider import PromptProvider, load_provider
from nodeselect.providers import BasicPromptProvider
from nodeselect.selector import SelectOptions, select

Opener = Callable[[Path, int], None]


def launch_editor(editor: str) -> Opener:
    """Return an opener running ``<editor> +<line> <path>``."""

    def _open(path: Path, line: int = 1) -> None:
        subprocess.run([*shlex.split(editor), f"+{line}", str(path)], check=False)

    return _open


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


@dataclass
class Session:
    graph: NoteGraph
    db: GraphDB
    config: Config
    provider: PromptProvider
    basic_provider: PromptProvider
    opener: Opener
    current_file: Path | None = None
    current_line: int = 1

    @classmethod
    def open(
        cls,
        config: Config,
        *,
        provider: PromptProvider | None = None,
        basic_provider: PromptProvider | None = None,
        opener: Opener | None = None,
        current_file: Path | None = None,
        current_line: int = 1,
    ) -> "Session":
        """Index ``config.vault_dir`` and assemble a session around it."""
        graph = NoteGraph(config.vault_dir)
        graph.build()
        if provider is None:
            provider = load_provider(config.provider)
            if hasattr(provider, "preview_lines"):
                provider.preview_lines = config.preview_lines
        if config.mode:
            prompts.enable_mode()
        else:
            prompts.disable_mode()
        return cls(
            graph=graph,
            db=GraphDB(graph),
            config=config,
            provider=provider,
            basic_provider=basic_provider or BasicPromptProvider(),
            opener=opener or launch_editor(config.editor),
            current_file=Path(current_file) if current_file else None,
            current_line=current_line,
        )

    def current_node(self) -> Node | None:
        """The node enclosing the current file position, if any."""
        if self.current_file is None:
            return None
        return self.graph.node_at(self.current_file, self.current_line)

    def buffer_content(self) -> str:
        if self.current_file is None:
            raise NoContextError("No current note: pass --file or visit a note first")
        return Path(self.current_file).read_text(encoding="utf-8")

    def open_file(self, path: Path, line: int = 1) -> None:
        """Visit *path* at *line*; it becomes the current context."""
        self.opener(Path(path), line)
        self.current_file = Path(path)
        self.current_line = line

    def visit(self, node: Node) -> Node:
        self.open_file(node.file, node.point)
        return node

    def close(self) -> None:
        """Release the link store and switch the prompt override back off."""
        prompts.disable_mode()
        self.db.close()


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def search_notes(session: Session, initial_input: str | None = None) -> None:
    """Run the configured search function over the vault directory."""
    search = resolve_callable(session.config.search_function)
    search(session, session.config.vault_dir, initial_input)


def _select_among(session: Session, ids: list[str], prompt: str) -> Node:
    wanted = set(ids)
    selection = prompts.selector_node_read(
        session,
        SelectOptions(filter_fn=lambda node: node.id in wanted, require_match=True, prompt=prompt),
    )
    return session.visit(selection.value)


def backlinks(session: Session) -> Node:
    """Select among the nodes linking to the current node by id, and visit it."""
    node = session.current_node()
    if node is None:
        raise NoContextError("Not in a note: the current position belongs to no node")
    sources = session.db.backlink_sources(node.id, "id")
    if not sources:
        raise EmptyResultError(f"No backlinks found for {node.title!r}")
    return _select_among(session, sources, "Backlinks: ")


def forward_links(session: Session) -> Node:
    """Select among the ``id:`` link targets of the current buffer, and visit it."""
    targets = [
        target
        for target in parse_typed_links(session.buffer_content(), "id")
        if session.graph.node_from_id(target) is not None
    ]
    if not targets:
        raise EmptyResultError("No forward links found")
    return _select_among(session, targets, "Links: ")


def file_find(session: Session, initial_input: str | None = None) -> Path:
    """Select any file of the vault and open it."""
    root = session.config.vault_dir
    candidates = []
    for path in session.graph.list_files():
        try:
            label = str(path.relative_to(root))
        except ValueError:
            label = str(path)
        candidates.append(Candidate(label, path, path, 1))
    selection = select(
        candidates,
        session.provider,
        SelectOptions(initial_input=initial_input, require_match=True, prompt="File: "),
    )
    session.open_file(selection.value, 1)
    return selection.value


def node_find(session: Session, initial_input: str | None = None) -> Node:
    """Visit a node picked through the node prompt; unknown titles create a note."""
    selection = prompts.node_read(session, SelectOptions(initial_input=initial_input))
    if isinstance(selection, NotFound):
        node = session.graph.create_note(selection.text)
        session.db.refresh(session.graph)
        return session.visit(node)
    return session.visit(selection.value)


def ref_find(session: Session, initial_input: str | None = None) -> Node:
    """Visit the node owning a reference picked through the ref prompt."""
    selection = prompts.ref_read(
        session, SelectOptions(initial_input=initial_input, prompt="Ref: ", require_match=True)
    )
    return session.visit(selection.value.node)


def toggle_mode() -> bool:
    return prompts.toggle_mode()
