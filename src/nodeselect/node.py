"""Core graph dataclasses: nodes, references, link edges and selections."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Generic, Sequence, TypeVar, Union

T = TypeVar("T")


@dataclass
class Node:
    """An addressable unit of content: a whole file or an identified heading."""

    id: str
    title: str
    file: Path
    #: 1-based line where the node's content begins
    point: int = 1
    #: 0 for a file node, heading depth otherwise
    level: int = 0
    tags: list[str] = field(default_factory=list)
    aliases: list[str] = field(default_factory=list)
    refs: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "file": str(self.file),
            "point": self.point,
            "level": self.level,
            "tags": self.tags,
            "aliases": self.aliases,
            "refs": self.refs,
        }


@dataclass
class Reference:
    """A reference key (citation key or URL) owned by a node."""

    ref: str
    node: Node

    @property
    def type(self) -> str:
        if self.ref.startswith("@"):
            return "cite"
        scheme, sep, _ = self.ref.partition(":")
        return scheme if sep else "ref"


@dataclass(frozen=True)
class Link:
    """A directed link edge ``source -> dest`` of a given link *type*."""

    source: str
    dest: str
    type: str
    #: 1-based line of the link inside the source file
    pos: int = 0


@dataclass
class Candidate:
    """One row of a selection prompt.

    ``file`` and ``point`` locate the content shown by the live preview;
    they are ``None`` for candidates that have nothing to preview.
    ``name`` is the bare title when the label decorates it (with tags).
    """

    label: str
    value: Any
    file: Path | None = None
    point: int = 1
    name: str | None = None


def find_candidate(candidates: Sequence[Candidate], text: str) -> Candidate | None:
    """Return the first candidate labelled *text*, else the first named *text*."""
    for candidate in candidates:
        if candidate.label == text:
            return candidate
    for candidate in candidates:
        if candidate.name == text:
            return candidate
    return None


# ---------------------------------------------------------------------------
# Selection result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Found(Generic[T]):
    """The user confirmed an existing candidate."""

    value: T


@dataclass(frozen=True)
class NotFound:
    """The user submitted text matching no candidate; treat it as a new item."""

    text: str


Selection = Union[Found[Any], NotFound]
