"""Prompt provider protocol and loader.

A prompt provider is the interactive "read a value from the user" backend.
It receives the candidate list plus a :class:`ReadRequest` and returns one
of:

- the chosen :class:`~nodeselect.node.Candidate`;
- a ``str`` when the user submitted text that is not a candidate;
- ``None`` when the user cancelled.

Providers are named in configuration by entry point::

    [nodeselect]
    provider = "nodeselect.providers:FuzzyPromptProvider"

The entry may be a class or any zero-argument factory.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol, Sequence, Union, runtime_checkable

from nodeselect.config import resolve_callable
from nodeselect.errors import ConfigError
from nodeselect.node import Candidate
from nodeselect.preview import TransientView

PreviewState = Callable[[str, Union[Candidate, None]], Union[TransientView, None]]


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------


@dataclass
class ReadRequest:
    prompt: str = "Node: "
    initial_input: str | None = None
    require_match: bool = False
    #: preview callback, ``None`` when the session has nothing to preview
    state: PreviewState | None = None


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class PromptProvider(Protocol):
    def read(self, candidates: Sequence[Candidate], request: ReadRequest) -> Candidate | str | None: ...


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


def load_provider(entry: str) -> PromptProvider:
    """Instantiate the provider named by a ``module:attr`` *entry*."""
    factory = resolve_callable(entry)
    provider = factory()
    if not isinstance(provider, PromptProvider):
        raise ConfigError(f"Provider '{entry}' must produce an object with a 'read(candidates, request)' method.")
    return provider
