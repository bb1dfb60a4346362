"""Buffered player-facing text logs.

Event logs and reports are plain text meant for players. They are built in
memory during a command and written out by the persistence layer once the
command has succeeded, so a failed turn never leaves a half-written log.
"""


class EventLog:
    """Append-only text buffer with an optional lazy section header.

    The turn processor writes every event for a species under a single
    "Other events" header that only appears if at least one event happened.
    """

    def __init__(self, header: str = "", initial: str = ""):
        """Create a log.

        Args:
            header: Text written once, just before the first call to event()
            initial: Text the log starts with (for example a scan carried over
                from galaxy creation)
        """
        self._parts: list[str] = [initial] if initial else []
        self._header = header
        self.header_printed = False

    def write(self, text: str) -> None:
        """Append raw text."""
        if text:
            self._parts.append(text)

    def printf(self, fmt: str, *args) -> None:
        """Append printf-style formatted text."""
        self.write(fmt % args if args else fmt)

    def event(self, text: str) -> None:
        """Append text under the section header, printing the header first if needed."""
        if not self.header_printed:
            self.header_printed = True
            self.write(self._header)
        self.write(text)

    def text(self) -> str:
        """Return everything written so far."""
        return "".join(self._parts)

    def __len__(self) -> int:
        return sum(len(p) for p in self._parts)

    def __str__(self) -> str:
        return self.text()
