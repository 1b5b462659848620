from typing import List

from nodeflow.core.models import utc_now


def format_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a ``Z`` suffix."""
    return utc_now().isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ExecutionTranscript:
    """Append-only log of an execution, one ``[<timestamp>] <message>`` line per milestone."""

    def __init__(self):
        self._lines: List[str] = []

    def append(self, message: str) -> None:
        self._lines.append(f"[{format_timestamp()}] {message}")

    @property
    def lines(self) -> List[str]:
        return list(self._lines)

    @property
    def text(self) -> str:
        return "".join(f"{line}\n" for line in self._lines)

    def __len__(self) -> int:
        return len(self._lines)
