"""NoteGraph: in-memory index of every node, file, link and reference in a vault."""

from __future__ import annotations

import re
import sys
import uuid
from datetime import datetime
from functools import cmp_to_key
from pathlib import Path
from typing import Any, Callable

from nodeselect.node import Candidate, Link, Node, Reference
from nodeselect.parser import parse_file


def node_label(node: Node, title: str | None = None) -> str:
    """Display label of a node: its title (or alias) followed by its tags."""
    label = title or node.title
    if node.tags:
        label += " " + " ".join(f"#{t}" for t in node.tags)
    return label


class NoteGraph:
    """Scans a vault directory and indexes its nodes, links and references."""

    def __init__(self, vault_dir: Path, extensions: tuple[str, ...] = (".md",)) -> None:
        self.vault_dir = Path(vault_dir)
        self.extensions = extensions
        self.files: list[Path] = []
        self.nodes: dict[str, Node] = {}
        self.links: list[Link] = []
        self.refs: list[Reference] = []
        #: node id -> last line of the node's content
        self.ends: dict[str, int] = {}

    # ------------------------------------------------------------------
    # Build / refresh
    # ------------------------------------------------------------------

    def build(self) -> None:
        """(Re-)scan the vault and rebuild all indexes."""
        self.files = []
        self.nodes = {}
        self.links = []
        self.refs = []
        self.ends = {}
        if not self.vault_dir.exists():
            return
        for path in sorted(self.vault_dir.glob("**/*")):
            if path.is_file() and path.suffix in self.extensions:
                self.add_file(path)

    def add_file(self, path: Path) -> None:
        """Parse *path* and register its nodes, links and references."""
        try:
            parsed = parse_file(path)
        except (OSError, UnicodeDecodeError) as exc:
            print(f"[warn] Failed to read note {path.name}: {exc}", file=sys.stderr)
            return
        self.files.append(path)
        for node in parsed.nodes:
            if node.id in self.nodes:
                other = self.nodes[node.id].file.name
                print(f"[warn] Duplicate node id {node.id!r} in {path.name} (kept {other})", file=sys.stderr)
                continue
            self.nodes[node.id] = node
            self.ends[node.id] = parsed.ends.get(node.id, node.point)
            self.refs.extend(Reference(ref, node) for ref in node.refs)
        self.links.extend(parsed.links)

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------

    def list_files(self) -> list[Path]:
        return list(self.files)

    def node_from_id(self, node_id: str) -> Node | None:
        return self.nodes.get(node_id)

    def node_at(self, file: Path, line: int = 1) -> Node | None:
        """Return the innermost node of *file* whose content encloses *line*."""
        file = Path(file).resolve()
        enclosing = [
            n
            for n in self.nodes.values()
            if n.file.resolve() == file and n.point <= line <= self.ends.get(n.id, n.point)
        ]
        if not enclosing:
            return None
        return max(enclosing, key=lambda n: (n.level, n.point))

    def node_candidates(
        self,
        filter_fn: Callable[[Node], bool] | None = None,
        sort_fn: Callable[[Candidate, Candidate], int] | None = None,
    ) -> list[Candidate]:
        """Return one candidate per node title and alias, filtered and sorted."""
        result: list[Candidate] = []
        for node in self.nodes.values():
            if filter_fn is not None and not filter_fn(node):
                continue
            for title in [node.title, *node.aliases]:
                result.append(Candidate(node_label(node, title), node, node.file, node.point, name=title))
        if sort_fn is not None:
            result.sort(key=cmp_to_key(sort_fn))
        return result

    def ref_candidates(self, filter_fn: Callable[[Reference], bool] | None = None) -> list[Candidate]:
        return [
            Candidate(ref.ref, ref, ref.node.file, ref.node.point)
            for ref in self.refs
            if filter_fn is None or filter_fn(ref)
        ]

    def edges(self) -> list[tuple[str, str, str]]:
        """Return ``(source, dest, type)`` triples for every recorded link."""
        return [(link.source, link.dest, link.type) for link in self.links]

    # ------------------------------------------------------------------
    # Capture
    # ------------------------------------------------------------------

    def create_note(self, title: str, *, now: datetime | None = None) -> Node:
        """Write a new note titled *title* into the vault and register it."""
        stamp = (now or datetime.now()).strftime("%Y%m%d%H%M%S")
        slug = re.sub(r"[^\w]+", "_", title.lower()).strip("_") or "note"
        path = self.vault_dir / f"{stamp}-{slug}.md"
        suffix = 1
        while path.exists():
            suffix += 1
            path = self.vault_dir / f"{stamp}-{slug}-{suffix}.md"
        node_id = str(uuid.uuid4())
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            f"---\nid: {node_id}\ntitle: {_yaml_str(title)}\n---\n\n# {title}\n",
            encoding="utf-8",
        )
        self.add_file(path)
        return self.nodes[node_id]


def _yaml_str(value: Any) -> str:
    text = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{text}"'
