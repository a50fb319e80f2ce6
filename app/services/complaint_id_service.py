from typing import Optional
import logging
import re

from ..core.config import settings
from ..core.exceptions import StorageFailure
from ..database.collections import COLLECTIONS

logger = logging.getLogger(__name__)


class ComplaintIdService:
    """
    Generates human readable complaint IDs in the format PREFIX-NN
    (e.g. AIRTECH-01, AIRTECH-02, ...).

    The next number is derived from the complaint with the lexicographically
    greatest complaintId. Reading the latest ID and writing the new complaint
    are separate steps, so two concurrent creations can receive the same ID.
    """

    def __init__(self, db=None, prefix: Optional[str] = None, min_digits: Optional[int] = None):
        if db is None:
            from ..database.database_service import database_service
            db = database_service
        self.db = db
        self.prefix = prefix or settings.COMPLAINT_ID_PREFIX
        self.min_digits = min_digits or settings.COMPLAINT_ID_MIN_DIGITS
        self._pattern = re.compile(rf"{re.escape(self.prefix)}-(\d+)")

    def format_complaint_id(self, number: int) -> str:
        return f"{self.prefix}-{number:0{self.min_digits}d}"

    def parse_sequence(self, complaint_id: Optional[str]) -> Optional[int]:
        """Numeric suffix of an ID like AIRTECH-07, or None when it doesn't parse"""
        if not complaint_id or not isinstance(complaint_id, str):
            return None
        match = self._pattern.search(complaint_id)
        if not match:
            return None
        return int(match.group(1))

    async def generate_complaint_id(self) -> str:
        """Generate the next complaint ID"""
        success, latest, error = await self.db.query_documents(
            COLLECTIONS['complaints'],
            order_by=[('complaintId', 'desc')],
            limit=1,
        )

        if not success:
            logger.error(f"[ComplaintId] Failed to read latest complaint ID: {error}")
            raise StorageFailure(f"Failed to generate complaint ID: {error}")

        next_number = 1
        if latest:
            last_number = self.parse_sequence(latest[0].get('complaintId'))
            if last_number is not None:
                next_number = last_number + 1

        complaint_id = self.format_complaint_id(next_number)
        logger.info(f"[ComplaintId] Generated complaint ID: {complaint_id}")
        return complaint_id

    async def verify_id_uniqueness(self, complaint_id: str) -> Optional[bool]:
        """True when no stored complaint uses `complaint_id`, None if the lookup failed"""
        success, results, error = await self.db.query_documents(
            COLLECTIONS['complaints'],
            [('complaintId', '==', complaint_id)],
        )

        if not success:
            logger.error(f"[ComplaintId] Failed to verify ID uniqueness: {error}")
            return None

        return len(results) == 0
