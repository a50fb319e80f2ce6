"""
Migration script to backfill complaint history.

Complaints created before the audit trail existed have no `history` field.
This gives each of them a single 'Created' entry built from the record's
createdBy and creation timestamp. Records that already have history are left
alone, so the script is safe to run more than once.

Run this once against the live database:

    python scripts/backfill_complaint_history.py
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.database.collections import COLLECTIONS
from app.services.history_service import backfill_entry


async def backfill_complaint_history(db) -> dict:
    """Backfill every complaint lacking history; returns counts per outcome"""
    summary = {"total": 0, "updated": 0, "skipped": 0, "errors": 0}

    success, complaints, error = await db.query_documents(COLLECTIONS['complaints'])
    if not success:
        raise RuntimeError(f"Failed to fetch complaints: {error}")

    summary["total"] = len(complaints)

    for complaint in complaints:
        doc_id = complaint.get('id')
        history = backfill_entry(complaint)

        if history is None:
            summary["skipped"] += 1
            continue

        ok, update_error = await db.update_document(
            COLLECTIONS['complaints'],
            doc_id,
            {"history": [entry.model_dump(mode="json") for entry in history]},
            validate=False,
        )

        if ok:
            print(f"✓ Backfilled history for complaint {doc_id}")
            summary["updated"] += 1
        else:
            print(f"❌ Failed to backfill {doc_id}: {update_error}")
            summary["errors"] += 1

    return summary


async def main():
    from app.database.factory import get_database

    print("Starting complaint history backfill...")
    summary = await backfill_complaint_history(get_database())

    print("\n" + "=" * 60)
    print("Backfill Summary:")
    print(f"  Total complaints: {summary['total']}")
    print(f"  ✓ Updated: {summary['updated']}")
    print(f"  - Skipped (already has history): {summary['skipped']}")
    print(f"  ❌ Errors: {summary['errors']}")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
