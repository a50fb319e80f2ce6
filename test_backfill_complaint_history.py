"""
Tests for the one-time complaint history backfill.

Run with: pytest test_backfill_complaint_history.py -v
"""
import pytest

from app.database.memory_store import InMemoryDatabaseService
from scripts.backfill_complaint_history import backfill_complaint_history

EXISTING = [{"action": "Created", "user": "a@x.com", "timestamp": "2024-05-01T10:00:00.000Z"}]


@pytest.fixture
def legacy_db():
    return InMemoryDatabaseService({
        "complaints": {
            "old1": {"complaintId": "AIRTECH-01", "createdBy": "a@x.com", "createdAt": "2024-01-02T03:04:05.000Z"},
            "old2": {"complaintId": "AIRTECH-02"},
            "new1": {"complaintId": "AIRTECH-03", "createdBy": "a@x.com", "history": EXISTING},
        }
    })


@pytest.mark.asyncio
async def test_backfill_adds_created_entry(legacy_db):
    summary = await backfill_complaint_history(legacy_db)

    assert summary == {"total": 3, "updated": 2, "skipped": 1, "errors": 0}

    _, old1, _ = await legacy_db.get_document("complaints", "old1")
    assert old1["history"] == [{"action": "Created", "user": "a@x.com", "timestamp": "2024-01-02T03:04:05.000Z"}]

    _, old2, _ = await legacy_db.get_document("complaints", "old2")
    assert old2["history"][0]["user"] == "Unknown"
    assert old2["history"][0]["action"] == "Created"


@pytest.mark.asyncio
async def test_backfill_leaves_existing_history_alone(legacy_db):
    await backfill_complaint_history(legacy_db)

    _, new1, _ = await legacy_db.get_document("complaints", "new1")
    assert new1["history"] == EXISTING


@pytest.mark.asyncio
async def test_backfill_is_idempotent(legacy_db):
    await backfill_complaint_history(legacy_db)
    _, first_pass, _ = await legacy_db.get_document("complaints", "old2")

    summary = await backfill_complaint_history(legacy_db)

    assert summary["updated"] == 0
    assert summary["skipped"] == 3
    _, second_pass, _ = await legacy_db.get_document("complaints", "old2")
    assert second_pass["history"] == first_pass["history"]


@pytest.mark.asyncio
async def test_backfill_counts_failed_writes(legacy_db):
    async def refuse(*args, **kwargs):
        return False, "permission-denied"

    legacy_db.update_document = refuse

    summary = await backfill_complaint_history(legacy_db)

    assert summary["errors"] == 2
    assert summary["updated"] == 0
