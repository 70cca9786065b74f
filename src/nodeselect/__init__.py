"""nodeselect: fuzzy, previewing prompts over a markdown note graph."""

from nodeselect.db import GraphDB
from nodeselect.index import NoteGraph
from nodeselect.node import Candidate, Found, Link, Node, NotFound, Reference, Selection
from nodeselect.parser import parse_file, parse_links, parse_typed_links
from nodeselect.preview import PreviewAdapter
from nodeselect.prompts import disable_mode, enable_mode, mode_enabled, node_read, ref_read, toggle_mode
from nodeselect.selector import SelectOptions, select

__all__ = [
    "Candidate",
    "Found",
    "GraphDB",
    "Link",
    "Node",
    "NotFound",
    "NoteGraph",
    "PreviewAdapter",
    "Reference",
    "SelectOptions",
    "Selection",
    "disable_mode",
    "enable_mode",
    "mode_enabled",
    "node_read",
    "parse_file",
    "parse_links",
    "parse_typed_links",
    "ref_read",
    "select",
    "toggle_mode",
]
