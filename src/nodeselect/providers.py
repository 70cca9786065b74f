"""Built-in prompt providers.

:class:`BasicPromptProvider` is the graph's plain default prompt: one line
of input, exact label match or free text, no preview.

:class:`FuzzyPromptProvider` is the narrowing selector used by the
override.  Each round renders the best matches for the current query and
reads one line::

    3          confirm candidate 3
    >3         preview candidate 3
    !text      submit "text" verbatim (or the current query when empty)
    <empty>    cancel
    anything   becomes the new query
"""

from __future__ import annotations

from difflib import SequenceMatcher
from typing import Callable, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from nodeselect.node import Candidate, find_candidate
from nodeselect.provider import ReadRequest


def _default_ask(prompt: str) -> str:
    return input(prompt)


class BasicPromptProvider:
    """Plain completing read: exact label (or bare title) or free text."""

    def __init__(self, ask: Callable[[str], str] | None = None) -> None:
        self.ask = ask or _default_ask

    def read(self, candidates: Sequence[Candidate], request: ReadRequest) -> Candidate | str | None:
        prompt = request.prompt
        if request.initial_input:
            prompt = f"{prompt}[{request.initial_input}] "
        try:
            text = self.ask(prompt).strip()
        except (EOFError, KeyboardInterrupt):
            return None
        if not text:
            text = request.initial_input or ""
        if not text:
            return None
        return find_candidate(candidates, text) or text


# ---------------------------------------------------------------------------
# Fuzzy matching
# ---------------------------------------------------------------------------


def _is_subsequence(needle: str, haystack: str) -> bool:
    it = iter(haystack)
    return all(ch in it for ch in needle)


def fuzzy_score(query: str, label: str) -> float | None:
    """Score *label* against *query*; ``None`` when it does not match.

    Every whitespace-separated term of the query must occur in the label as
    a case-insensitive subsequence, in any order.
    """
    terms = query.lower().split()
    text = label.lower()
    if not terms:
        return 0.0
    score = 0.0
    for term in terms:
        if not _is_subsequence(term, text):
            return None
        score += SequenceMatcher(None, term, text).ratio()
        if term in text:
            score += 1.0
            if text.startswith(term):
                score += 0.5
    return score / len(terms)


def fuzzy_filter(query: str, candidates: Sequence[Candidate]) -> list[Candidate]:
    """Return matching candidates, best first; input order breaks ties."""
    scored = []
    for pos, candidate in enumerate(candidates):
        score = fuzzy_score(query, candidate.label)
        if score is not None:
            scored.append((-score, pos, candidate))
    scored.sort(key=lambda t: (t[0], t[1]))
    return [c for _, _, c in scored]


class FuzzyPromptProvider:
    """Interactive narrowing selector with live preview."""

    def __init__(
        self,
        ask: Callable[[str], str] | None = None,
        console: Console | None = None,
        limit: int = 10,
        preview_lines: int = 15,
    ) -> None:
        self.ask = ask or _default_ask
        self.console = console or Console()
        self.limit = limit
        self.preview_lines = preview_lines

    def read(self, candidates: Sequence[Candidate], request: ReadRequest) -> Candidate | str | None:
        state = request.state
        query = request.initial_input or ""
        while True:
            shown = fuzzy_filter(query, candidates)[: self.limit]
            self._render(shown, query)
            try:
                text = self.ask(request.prompt).strip()
            except (EOFError, KeyboardInterrupt):
                text = ""
            if not text:
                if state is not None:
                    state("exit", None)
                return None

            if text.isdigit():
                candidate = self._pick(shown, text)
                if candidate is None:
                    continue
                if state is not None:
                    state("return", candidate)
                return candidate

            if text.startswith(">"):
                candidate = self._pick(shown, text[1:].strip())
                if candidate is not None:
                    self._preview(state, candidate)
                continue

            if text.startswith("!"):
                if state is not None:
                    state("exit", None)
                return text[1:] or query

            query = text

    def _pick(self, shown: list[Candidate], number: str) -> Candidate | None:
        if number.isdigit() and 1 <= int(number) <= len(shown):
            return shown[int(number) - 1]
        self.console.print(f"[red]No candidate numbered {escape(number)}[/red]")
        return None

    def _render(self, shown: list[Candidate], query: str) -> None:
        header = f"[dim]query:[/dim] {escape(query)}" if query else "[dim]all candidates[/dim]"
        self.console.print(header)
        if not shown:
            self.console.print("  [yellow](no match)[/yellow]")
        for i, candidate in enumerate(shown, start=1):
            self.console.print(f"  [bold]{i:>2}[/bold] {escape(candidate.label)}")

    def _preview(self, state, candidate: Candidate) -> None:
        view = state("preview", candidate) if state is not None else None
        if view is None:
            self.console.print("[yellow]Nothing to preview[/yellow]")
            return
        body = "\n".join(view.visible_lines(self.preview_lines))
        self.console.print(Panel(escape(body), title=f"{view.path.name}:{candidate.point}"))
