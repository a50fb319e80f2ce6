import pytest

from app.database.memory_store import InMemoryDatabaseService
from app.models.user import Actor
from app.services.complaint_id_service import ComplaintIdService
from app.services.complaint_service import ComplaintService


class FakeClock:
    """Deterministic, strictly increasing ISO timestamps"""

    def __init__(self):
        self.ticks = 0

    def __call__(self) -> str:
        self.ticks += 1
        return f"2025-01-01T00:{self.ticks // 60:02d}:{self.ticks % 60:02d}.000Z"


def make_actor(role: str, email: str = None, uid: str = None) -> Actor:
    email = email or f"{role}@x.com"
    return Actor(uid=uid or f"uid-{role}", email=email, role=role)


@pytest.fixture
def db():
    return InMemoryDatabaseService()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def service(db, clock):
    return ComplaintService(db, id_service=ComplaintIdService(db, prefix="AIRTECH", min_digits=2), clock=clock,
                            enforce_status_transitions=False)


@pytest.fixture
def valid_payload():
    return {
        "machineName": "Press-1",
        "complaintDescription": "Leak",
        "priority": "High",
        "department": "Mechanical",
    }


@pytest.fixture
def actor():
    return make_actor
