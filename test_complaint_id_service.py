import pytest

from app.core.exceptions import StorageFailure
from app.database.memory_store import InMemoryDatabaseService
from app.services.complaint_id_service import ComplaintIdService

pytestmark = pytest.mark.asyncio


def seeded(*complaint_ids):
    return InMemoryDatabaseService({
        "complaints": {f"doc{i}": {"complaintId": cid} for i, cid in enumerate(complaint_ids)}
    })


async def test_first_id_when_store_is_empty():
    service = ComplaintIdService(InMemoryDatabaseService(), prefix="AIRTECH", min_digits=2)
    assert await service.generate_complaint_id() == "AIRTECH-01"


async def test_next_id_follows_highest_existing():
    service = ComplaintIdService(seeded("AIRTECH-01", "AIRTECH-07"), prefix="AIRTECH", min_digits=2)
    assert await service.generate_complaint_id() == "AIRTECH-08"


async def test_unparseable_latest_id_restarts_at_one():
    service = ComplaintIdService(seeded("legacy-record"), prefix="AIRTECH", min_digits=2)
    assert await service.generate_complaint_id() == "AIRTECH-01"


async def test_padding_grows_past_min_digits():
    service = ComplaintIdService(seeded("AIRTECH-99"), prefix="AIRTECH", min_digits=2)
    assert await service.generate_complaint_id() == "AIRTECH-100"


async def test_custom_prefix_and_digits():
    service = ComplaintIdService(seeded("MT-0041"), prefix="MT", min_digits=4)
    assert await service.generate_complaint_id() == "MT-0042"


async def test_parse_sequence():
    service = ComplaintIdService(InMemoryDatabaseService(), prefix="AIRTECH", min_digits=2)
    assert service.parse_sequence("AIRTECH-07") == 7
    assert service.parse_sequence("OTHER-07") is None
    assert service.parse_sequence(None) is None
    assert service.format_complaint_id(3) == "AIRTECH-03"


async def test_query_failure_raises_storage_failure():
    class BrokenDB:
        async def query_documents(self, collection, filters=None, order_by=None, limit=None):
            return False, [], "deadline exceeded"

    service = ComplaintIdService(BrokenDB(), prefix="AIRTECH", min_digits=2)
    with pytest.raises(StorageFailure) as exc:
        await service.generate_complaint_id()
    assert "deadline exceeded" in str(exc.value)


async def test_verify_id_uniqueness():
    service = ComplaintIdService(seeded("AIRTECH-01"), prefix="AIRTECH", min_digits=2)
    assert await service.verify_id_uniqueness("AIRTECH-01") is False
    assert await service.verify_id_uniqueness("AIRTECH-02") is True


async def test_verify_id_uniqueness_unknown_on_query_failure():
    class BrokenDB:
        async def query_documents(self, collection, filters=None, order_by=None, limit=None):
            return False, [], "unavailable"

    service = ComplaintIdService(BrokenDB(), prefix="AIRTECH", min_digits=2)
    assert await service.verify_id_uniqueness("AIRTECH-01") is None
