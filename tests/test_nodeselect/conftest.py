"""Shared fixtures: a small on-disk vault and a scripted prompt provider."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from nodeselect import prompts
from nodeselect.commands import Session
from nodeselect.config import Config
from nodeselect.index import NoteGraph
from nodeselect.node import Candidate


def write_note(directory: Path, name: str, content: str) -> Path:
    path = directory / f"{name}.md"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


class ScriptedProvider:
    """Prompt provider answering from a list of canned responses.

    A response is a label (returned as the matching candidate, or as free
    text when no label matches), an ``int`` index into the offered
    candidates, or ``None`` to cancel.  With ``preview_all`` every offered
    candidate is previewed before answering.
    """

    def __init__(self, responses, preview_all: bool = False) -> None:
        self.responses = list(responses)
        self.preview_all = preview_all
        self.calls: list[tuple[list[str], object]] = []

    def read(self, candidates, request):
        self.calls.append(([c.label for c in candidates], request))
        if self.preview_all and request.state is not None:
            for candidate in candidates:
                request.state("preview", candidate)
        answer = self.responses.pop(0)
        if isinstance(answer, int):
            answer = candidates[answer]
        elif isinstance(answer, str):
            answer = next((c for c in candidates if c.label == answer), answer)
        if request.state is not None:
            if isinstance(answer, Candidate):
                request.state("return", answer)
            else:
                request.state("exit", None)
        return answer


@pytest.fixture(autouse=True)
def _reset_mode():
    prompts.disable_mode()
    yield
    prompts.disable_mode()


@pytest.fixture()
def vault_dir(tmp_path: Path) -> Path:
    """Vault with three linked nodes, one heading node and one non-node file."""
    write_note(tmp_path, "alpha", """\
        ---
        id: alpha
        title: Alpha
        refs: ["@smith2020"]
        ---
        See [[id:beta][Beta]] and [[id:gamma]].
        Also [[https://example.com][the web]].
    """)
    write_note(tmp_path, "beta", """\
        ---
        id: beta
        title: Beta
        aliases: [Second]
        ---
        Back to [[id:alpha][Alpha]].

        ## Details {#beta-details}
        Deeper link to [[id:gamma][Gamma]].

        ## Plain heading
        Link from the file node again: [alpha](id:alpha)
    """)
    write_note(tmp_path, "gamma", """\
        ---
        id: gamma
        title: Gamma
        ---
        Standalone note.
    """)
    write_note(tmp_path, "sub/plain", """\
        No front-matter, so no node: [[id:alpha]]
    """)
    return tmp_path


@pytest.fixture()
def graph(vault_dir: Path) -> NoteGraph:
    g = NoteGraph(vault_dir)
    g.build()
    return g


@pytest.fixture()
def make_session(vault_dir: Path):
    """Factory for sessions over ``vault_dir`` with scripted providers."""
    opened: list[tuple[Path, int]] = []

    def _make(responses=(), basic_responses=(), current_file=None, current_line=1, **config_kwargs):
        config = Config(vault_dir=vault_dir, **config_kwargs)
        session = Session.open(
            config,
            provider=ScriptedProvider(responses),
            basic_provider=ScriptedProvider(basic_responses),
            opener=lambda path, line: opened.append((path, line)),
            current_file=current_file,
            current_line=current_line,
        )
        session.opened = opened
        return session

    return _make


@pytest.fixture()
def scripted():
    """The :class:`ScriptedProvider` class, for building providers in tests."""
    return ScriptedProvider
