"""Terminal rendering of search sessions, suggestions, and history."""

from __future__ import annotations

import sys
from typing import TextIO

from cinelink_search.contracts import CacheRecord
from cinelink_search.search.session import SearchSession


def format_record(record: CacheRecord) -> str:
    year = f" ({record['year']})" if record.get("year") else ""
    return f"{record['title']}{year} [{record.get('type', '?')}] {record['id']}"


class ResultDisplay:
    """Prints results to stdout and status lines to stderr."""

    def __init__(self, *, out: TextIO | None = None, err: TextIO | None = None) -> None:
        self._out = out or sys.stdout
        self._err = err or sys.stderr
        self._shown = 0

    def _print(self, msg: str) -> None:
        print(msg, file=self._out, flush=True)

    def _status(self, msg: str) -> None:
        print(msg, file=self._err, flush=True)

    def show_session(self, session: SearchSession) -> None:
        """Print records not yet shown, then the condition or page summary."""
        for record in session.results[self._shown :]:
            self._print(format_record(record))
        self._shown = len(session.results)

        if session.message:
            self._status(session.message)
            return
        more = " (more available)" if session.has_more_pages else ""
        self._status(
            f"Page {session.current_page}/{session.total_pages} | "
            f"{session.total_results:,} total{more}"
        )

    def show_lines(self, lines: list[str], *, empty: str) -> None:
        if not lines:
            self._status(empty)
            return
        for line in lines:
            self._print(line)
