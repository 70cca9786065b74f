"""Node/ref selector: run one prompt session over a candidate list."""

from __future__ import annotations

from contextlib import nullcontext
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, Callable, Sequence

from nodeselect.errors import SelectionAborted
from nodeselect.node import Candidate, Found, NotFound, Selection, find_candidate
from nodeselect.preview import PreviewAdapter
from nodeselect.provider import PromptProvider, ReadRequest


@dataclass
class SelectOptions:
    """Options of a single selection prompt.

    Attributes
    ----------
    initial_input:
        Text the prompt starts with.  Default: empty.
    filter_fn:
        Predicate over a candidate's *value*; only values it accepts are
        offered.  Default: keep everything.
    sort_fn:
        ``cmp``-style comparator over two candidates, controlling display
        order only.  Default: the collaborator's order.
    require_match:
        When true, text that matches no label never ends the session.
    prompt:
        Prompt string shown to the user.
    preview:
        Attach a live preview to the session (ignored for empty lists).
    """

    initial_input: str | None = None
    filter_fn: Callable[[Any], bool] | None = None
    sort_fn: Callable[[Candidate, Candidate], int] | None = None
    require_match: bool = False
    prompt: str = "Node: "
    preview: bool = True


def select(
    candidates: Sequence[Candidate],
    provider: PromptProvider,
    options: SelectOptions | None = None,
) -> Selection:
    """Prompt for one of *candidates* through *provider*.

    Returns ``Found(value)`` for a confirmed candidate (or typed text equal
    to a label, or to the bare title behind a tagged label), and
    ``NotFound(text)`` for other text when ``require_match`` is false.
    Under ``require_match`` unmatched text re-opens the prompt seeded with
    that text.  Raises :class:`SelectionAborted` on cancel.
    """
    options = options or SelectOptions()
    pool = [c for c in candidates if options.filter_fn is None or options.filter_fn(c.value)]
    if options.sort_fn is not None:
        pool.sort(key=cmp_to_key(options.sort_fn))

    adapter = PreviewAdapter() if pool and options.preview else None
    with adapter if adapter is not None else nullcontext():
        initial = options.initial_input
        while True:
            request = ReadRequest(
                prompt=options.prompt,
                initial_input=initial,
                require_match=options.require_match,
                state=adapter,
            )
            result = provider.read(pool, request)
            if result is None:
                raise SelectionAborted("Quit")
            if isinstance(result, Candidate):
                return Found(result.value)
            match = find_candidate(pool, result)
            if match is not None:
                return Found(match.value)
            if not options.require_match:
                return NotFound(result)
            initial = result
