from typing import Any, Dict, List, Optional, Sequence, Union
from datetime import datetime, timezone
import logging

from ..models.complaint import HistoryAction, HistoryEntry

logger = logging.getLogger(__name__)

HistoryLike = Union[HistoryEntry, Dict[str, Any]]


def utc_now_iso() -> str:
    """Current instant as an ISO string, e.g. 2025-03-01T08:15:30.120Z"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _as_entry(entry: HistoryLike) -> HistoryEntry:
    if isinstance(entry, HistoryEntry):
        return entry
    return HistoryEntry(**entry)


def append_entry(
    existing_history: Optional[Sequence[HistoryLike]],
    actor_email: str,
    now: str,
    action: Optional[HistoryAction] = None,
) -> List[HistoryEntry]:
    """
    Return a new history with exactly one entry appended.

    An empty history always starts with a Created entry; any other history gets
    an Updated entry. The requested `action` only matters for the first entry
    and is otherwise ignored, so callers cannot forge a second Created record.
    Existing entries are carried over untouched.
    """
    previous = [_as_entry(e) for e in (existing_history or [])]

    if not previous:
        return [HistoryEntry(action=HistoryAction.CREATED, user=actor_email, timestamp=now)]

    if action is not None and action != HistoryAction.UPDATED:
        logger.debug(f"[History] Ignoring requested action '{action}' on existing history")

    return previous + [HistoryEntry(action=HistoryAction.UPDATED, user=actor_email, timestamp=now)]


def backfill_entry(record: Dict[str, Any], now: Optional[str] = None) -> Optional[List[HistoryEntry]]:
    """
    Synthesize the missing Created entry for a legacy complaint.

    Returns None when the record already has history. Only the one-time
    migration script calls this; the normal write path never does.
    """
    history = record.get("history")
    if isinstance(history, list) and history:
        return None

    created_at = record.get("createdAt") or record.get("timestamp") or now or utc_now_iso()
    if isinstance(created_at, datetime):
        created_at = created_at.isoformat()
    user = record.get("createdBy") or record.get("user") or "Unknown"

    return [HistoryEntry(action=HistoryAction.CREATED, user=user, timestamp=str(created_at))]
