"""The graph's standard prompt entry points and the override switch.

Every caller that needs "read a node" or "read a reference" goes through
:func:`node_read` / :func:`ref_read`.  Those dispatch to whatever
implementation the process-wide :class:`PromptRegistry` currently holds:

- disabled (initial state): the plain defaults, backed by the session's
  basic provider with no preview;
- enabled: the selector implementations, backed by the session's
  configured provider with live preview.

:func:`enable_mode` / :func:`disable_mode` are idempotent;
:func:`toggle_mode` flips between the two.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Callable

from nodeselect.node import Selection
from nodeselect.selector import SelectOptions, select

if TYPE_CHECKING:
    from nodeselect.commands import Session

ReadFn = Callable[["Session", "SelectOptions | None"], Selection]

NODE = "node"
REF = "ref"


def _node_options(options: SelectOptions | None) -> SelectOptions:
    return options or SelectOptions(prompt="Node: ")


def _ref_options(options: SelectOptions | None) -> SelectOptions:
    return options or SelectOptions(prompt="Ref: ", require_match=True)


# ---------------------------------------------------------------------------
# Implementations
# ---------------------------------------------------------------------------


def default_node_read(session: "Session", options: SelectOptions | None = None) -> Selection:
    opts = _node_options(options)
    candidates = session.graph.node_candidates(opts.filter_fn, opts.sort_fn)
    return select(candidates, session.basic_provider, replace(opts, filter_fn=None, sort_fn=None, preview=False))


def default_ref_read(session: "Session", options: SelectOptions | None = None) -> Selection:
    opts = _ref_options(options)
    candidates = session.graph.ref_candidates(opts.filter_fn)
    return select(candidates, session.basic_provider, replace(opts, filter_fn=None, preview=False))


def selector_node_read(session: "Session", options: SelectOptions | None = None) -> Selection:
    opts = _node_options(options)
    candidates = session.graph.node_candidates(opts.filter_fn, opts.sort_fn)
    return select(candidates, session.provider, replace(opts, filter_fn=None, sort_fn=None))


def selector_ref_read(session: "Session", options: SelectOptions | None = None) -> Selection:
    opts = _ref_options(options)
    candidates = session.graph.ref_candidates(opts.filter_fn)
    return select(candidates, session.provider, replace(opts, filter_fn=None))


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class PromptRegistry:
    """Holds the active implementation of each prompt entry point."""

    def __init__(self, defaults: dict[str, ReadFn], overrides: dict[str, ReadFn]) -> None:
        self.defaults = dict(defaults)
        self.overrides = dict(overrides)
        self.active = dict(defaults)
        self.enabled = False

    def resolve(self, name: str) -> ReadFn:
        return self.active[name]

    def enable(self) -> bool:
        if not self.enabled:
            self.active.update(self.overrides)
            self.enabled = True
        return self.enabled

    def disable(self) -> bool:
        if self.enabled:
            self.active = dict(self.defaults)
            self.enabled = False
        return self.enabled


registry = PromptRegistry(
    defaults={NODE: default_node_read, REF: default_ref_read},
    overrides={NODE: selector_node_read, REF: selector_ref_read},
)


def node_read(session: "Session", options: SelectOptions | None = None) -> Selection:
    """Read a node from the user with the active implementation."""
    return registry.resolve(NODE)(session, options)


def ref_read(session: "Session", options: SelectOptions | None = None) -> Selection:
    """Read a reference from the user with the active implementation."""
    return registry.resolve(REF)(session, options)


def enable_mode() -> bool:
    return registry.enable()


def disable_mode() -> bool:
    return registry.disable()


def toggle_mode() -> bool:
    """Flip the override and return the new state."""
    return registry.disable() if registry.enabled else registry.enable()


def mode_enabled() -> bool:
    return registry.enabled
