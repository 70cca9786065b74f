"""Text search backends.

A search function has the signature ``fn(session, directory, initial_input)``
and is named in configuration as ``search_function``.  The default,
:func:`ripgrep_search`, greps the vault with ``rg`` and offers every hit as
a previewable candidate; the chosen hit is opened at its line.
"""

from __future__ import annotations

import re
import shutil
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING

from nodeselect.errors import EmptyResultError, SearchError, SelectionAborted
from nodeselect.node import Candidate
from nodeselect.provider import ReadRequest
from nodeselect.selector import SelectOptions, select

if TYPE_CHECKING:
    from nodeselect.commands import Session

# path:line:text as printed by ``rg --line-number --no-heading``
_HIT_RE = re.compile(r"^(.*?):(\d+):(.*)$")


def parse_rg_output(output: str, directory: Path) -> list[Candidate]:
    """Turn ``rg`` output lines into candidates labelled ``path:line: text``."""
    result: list[Candidate] = []
    for line in output.splitlines():
        m = _HIT_RE.match(line)
        if not m:
            continue
        path = Path(m.group(1))
        if not path.is_absolute():
            path = directory / path
        line_no = int(m.group(2))
        try:
            shown = path.relative_to(directory)
        except ValueError:
            shown = path
        result.append(Candidate(f"{shown}:{line_no}: {m.group(3).strip()}", (path, line_no), path, line_no))
    return result


def run_ripgrep(pattern: str, directory: Path, rg_args: list[str]) -> str:
    """Run ``rg`` in *directory* and return its stdout."""
    if shutil.which("rg") is None:
        raise SearchError("ripgrep (rg) is not installed or not on PATH")
    proc = subprocess.run(
        ["rg", *rg_args, "-e", pattern, "."],
        cwd=str(directory),
        capture_output=True,
        text=True,
        check=False,
    )
    # rg exits 1 for "no match", 2 for real errors
    if proc.returncode > 1:
        raise SearchError(f"rg failed: {proc.stderr.strip()}")
    return proc.stdout


def ripgrep_search(session: "Session", directory: Path, initial_input: str | None = None) -> None:
    """Grep *directory* for a pattern and visit the chosen hit."""
    pattern = initial_input
    if not pattern:
        pattern = session.basic_provider.read([], ReadRequest(prompt="Search: "))
        if not pattern:
            raise SelectionAborted("Quit")
    hits = parse_rg_output(run_ripgrep(pattern, directory, session.config.rg_args), directory)
    if not hits:
        raise EmptyResultError(f"No matches for {pattern!r}")
    selection = select(hits, session.provider, SelectOptions(prompt="Match: ", require_match=True))
    path, line = selection.value
    session.open_file(path, line)
