"""Live preview of selection candidates.

A :class:`PreviewAdapter` lives for exactly one prompt session.  The prompt
provider drives it through its ``state(action, candidate)`` callback:

- ``"preview"`` closes the current transient view and opens one on the
  candidate's file, scrolled to the candidate's line;
- ``"return"`` / ``"exit"`` close the current view.

Leaving the ``with`` block closes whatever is still open, so every view is
closed exactly once on every exit path.
"""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import IO

from nodeselect.node import Candidate


class TransientView:
    """A read-only view of a file, scrolled to a given line."""

    def __init__(self, path: Path, point: int = 1) -> None:
        self.path = Path(path)
        self._fh: IO[str] | None = self.path.open("r", encoding="utf-8", errors="replace")
        try:
            self.lines = [line.rstrip("\n") for line in self._fh]
        except OSError:
            self.close()
            raise
        self.view_start = max(0, min(point - 1, len(self.lines) - 1))

    @property
    def closed(self) -> bool:
        return self._fh is None

    def visible_lines(self, height: int, width: int = 100) -> list[str]:
        """Return up to *height* wrapped lines starting at the scroll position."""
        output: list[str] = []
        for line in self.lines[self.view_start :]:
            for wrapped in textwrap.wrap(line, width=width) or [""]:
                output.append(wrapped)
                if len(output) >= height:
                    return output
        return output

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None


class PreviewAdapter:
    """Opens at most one transient view at a time for the current candidate."""

    def __init__(self) -> None:
        self.current: TransientView | None = None
        self.opened = 0
        self.closed = 0

    def __call__(self, action: str, candidate: Candidate | None = None) -> TransientView | None:
        if action == "preview":
            self._close_current()
            if candidate is None or candidate.file is None:
                return None
            self.current = TransientView(candidate.file, candidate.point)
            self.opened += 1
            return self.current
        if action in ("return", "exit"):
            self._close_current()
            return None
        raise ValueError(f"Unknown preview action: {action!r}")

    def _close_current(self) -> None:
        if self.current is not None:
            self.current.close()
            self.current = None
            self.closed += 1

    def __enter__(self) -> "PreviewAdapter":
        return self

    def __exit__(self, *_: object) -> None:
        self._close_current()
