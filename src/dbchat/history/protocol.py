from typing import List, Optional, Protocol, runtime_checkable

from dbchat.models import HistoryEntry, QueryKind

HISTORY_LIMIT = 100
DISPLAY_PROMPT_WIDTH = 50


def make_display_name(connection_name: str, prompt: str, width: int = DISPLAY_PROMPT_WIDTH) -> str:
    """``"<connection>: <prompt prefix>"`` with an ellipsis when the prompt was cut."""
    suffix = "..." if len(prompt) > width else ""
    return f"{connection_name}: {prompt[:width]}{suffix}"


@runtime_checkable
class QueryLogStore(Protocol):
    """
    Prompt history and favorites, partitioned by connection name.

    ``history`` keeps only the most recent entries of each connection,
    ``favorite`` is unbounded. Listings are most recent first.
    """

    def append(self, connection_name: str, prompt: str, kind: QueryKind = QueryKind.HISTORY) -> HistoryEntry:
        ...

    def list(self, connection_name: str, kind: QueryKind = QueryKind.HISTORY) -> List[HistoryEntry]:
        ...

    def remove(self, connection_name: str, entry_name: str, kind: Optional[QueryKind] = None) -> int:
        """Deletes entries by display name; ``kind=None`` covers both kinds."""
        ...
