"""Typed-link, heading-node and YAML-frontmatter parser."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from nodeselect.node import Link, Node

# [[type:target]] or [[type:target][description]]
_BRACKET_LINK_RE = re.compile(r"\[\[([A-Za-z][\w+.-]*):([^\]]+)\](?:\[([^\]]*)\])?\]")
# [description](type:target)
_MD_LINK_RE = re.compile(r"(?<!!)\[([^\]]*)\]\(([A-Za-z][\w+.-]*):([^)\s]+)\)")
# Inline #tags (not inside code-spans or URLs)
_TAG_RE = re.compile(r"(?<![`\w/#\[])#([\w/-]+)")
# ATX heading, optionally carrying a {#node-id} attribute
_HEADING_RE = re.compile(r"^(#{1,6})\s+(.*?)\s*(?:\{#([^}\s]+)\})?\s*$")
# YAML front-matter block
_FRONTMATTER_RE = re.compile(r"^---[ \t]*\n(.*?)\n---[ \t]*\n", re.DOTALL)
_FENCE_RE = re.compile(r"^\s*(```|~~~)")


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Split YAML front-matter from body text.

    Returns ``(metadata_dict, body)``; ``metadata_dict`` is empty when there
    is no front-matter block or it is not a YAML mapping.
    """
    match = _FRONTMATTER_RE.match(content)
    if not match:
        return {}, content
    try:
        meta = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as exc:
        print(f"[warn] Unparsable front-matter: {exc}", file=sys.stderr)
        meta = {}
    if not isinstance(meta, dict):
        meta = {}
    return meta, content[match.end() :]


def _as_list(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [v.strip() for v in value.split(",") if v.strip()]
    return [str(v) for v in value]


def _iter_content_lines(text: str, start: int = 1):
    """Yield ``(line_no, line)`` pairs outside fenced code blocks."""
    in_fence = False
    for line_no, line in enumerate(text.splitlines(), start=start):
        if _FENCE_RE.match(line):
            in_fence = not in_fence
            continue
        if not in_fence:
            yield line_no, line


def parse_links(text: str) -> list[tuple[str, str, int]]:
    """Return every link in *text* as ``(type, target, line_no)``."""
    result: list[tuple[str, str, int]] = []
    for line_no, line in _iter_content_lines(text):
        found: list[tuple[int, str, str]] = []
        for m in _BRACKET_LINK_RE.finditer(line):
            found.append((m.start(), m.group(1), m.group(2).strip()))
        for m in _MD_LINK_RE.finditer(line):
            found.append((m.start(), m.group(2), m.group(3).strip()))
        for _, link_type, target in sorted(found):
            result.append((link_type.lower(), target, line_no))
    return result


def parse_typed_links(text: str, link_type: str = "id") -> list[str]:
    """Return the targets of all *link_type* links in *text* (de-duped, ordered)."""
    wanted = link_type.lower()
    seen: set[str] = set()
    result: list[str] = []
    for kind, target, _ in parse_links(text):
        if kind == wanted and target not in seen:
            seen.add(target)
            result.append(target)
    return result


def parse_tags(text: str) -> list[str]:
    """Return all ``#tag`` values found in *text* (de-duped, ordered)."""
    seen: set[str] = set()
    result: list[str] = []
    for _, line in _iter_content_lines(text):
        if _HEADING_RE.match(line):
            continue
        for m in _TAG_RE.finditer(line):
            tag = m.group(1)
            if tag not in seen:
                seen.add(tag)
                result.append(tag)
    return result


@dataclass
class ParsedFile:
    """Everything the graph needs from one markdown file."""

    path: Path
    frontmatter: dict[str, Any] = field(default_factory=dict)
    nodes: list[Node] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    #: node id -> last line of that node's content
    ends: dict[str, int] = field(default_factory=dict)


def parse_file(path: Path) -> ParsedFile:
    """Read a ``.md`` file and return its nodes and outgoing links.

    The file itself is a node when its front-matter carries an ``id``.
    Every heading with a ``{#id}`` attribute is a node scoped until the
    next heading of the same or shallower depth.  A link belongs to the
    innermost enclosing node, a heading's own links included; links
    outside any node are dropped.
    """
    content = path.read_text(encoding="utf-8")
    frontmatter, body = parse_frontmatter(content)
    body_start = content[: len(content) - len(body)].count("\n") + 1

    file_tags = list(dict.fromkeys(_as_list(frontmatter.get("tags")) + parse_tags(body)))
    parsed = ParsedFile(path=path, frontmatter=frontmatter)

    file_node: Node | None = None
    if frontmatter.get("id"):
        file_node = Node(
            id=str(frontmatter["id"]),
            title=str(frontmatter.get("title") or path.stem),
            file=path,
            point=1,
            level=0,
            tags=file_tags,
            aliases=_as_list(frontmatter.get("aliases")),
            refs=_as_list(frontmatter.get("refs")),
        )
        parsed.nodes.append(file_node)

    last_line = content.count("\n") + 1
    if file_node is not None:
        parsed.ends[file_node.id] = last_line

    # (level, node) of the headings currently in scope
    stack: list[tuple[int, Node]] = []
    for line_no, line in _iter_content_lines(body, start=body_start):
        heading = _HEADING_RE.match(line)
        if heading:
            level = len(heading.group(1))
            while stack and stack[-1][0] >= level:
                parsed.ends[stack.pop()[1].id] = line_no - 1
            if heading.group(3):
                node = Node(
                    id=heading.group(3),
                    title=heading.group(2),
                    file=path,
                    point=line_no,
                    level=level,
                    tags=list(file_tags),
                )
                parsed.nodes.append(node)
                stack.append((level, node))

        source = stack[-1][1] if stack else file_node
        if source is None:
            continue
        for link_type, target, _ in parse_links(line):
            parsed.links.append(Link(source=source.id, dest=target, type=link_type, pos=line_no))

    for _, node in stack:
        parsed.ends[node.id] = last_line
    return parsed
