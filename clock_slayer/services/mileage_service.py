"""Mileage service - business logic for mileage records."""
import logging
from datetime import date, datetime
from typing import Optional

from clock_slayer.errors import ValidationFailure
from clock_slayer.models.mileage_entry import MileageEntry, MileageEntryCreate, MileageEntryUpdate
from clock_slayer.utils.dates import date_to_datetime, datetime_to_date
from clock_slayer.utils.ids import generate_unique_id
from clock_slayer.utils.numbers import to_decimal, to_decimal128

logger = logging.getLogger(__name__)


class MileageService:
    """Service for handling mileage entry operations."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.mileage_entries = db["mileage_entries"]
        self.counters = db["counters"]

    def _doc_to_entry(self, doc: dict) -> MileageEntry:
        """
        Convert database document to MileageEntry model.

        Dates are stored as midnight datetimes and converted back here.
        """
        return MileageEntry(
            _id=doc["_id"],
            project_id=doc["project_id"],
            miles=to_decimal(doc["miles"]),
            date=datetime_to_date(doc["date"]),
            notes=doc.get("notes"),
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    async def list_entries(
        self,
        date_gte: Optional[date] = None,
        date_lte: Optional[date] = None,
        project_id: Optional[int] = None,
        newest_first: bool = True,
    ) -> list[MileageEntry]:
        """
        List mileage entries with optional filtering.

        Args:
            date_gte: Only entries dated on or after this day
            date_lte: Only entries dated on or before this day
            project_id: Optional project filter
            newest_first: Sort by date descending (ascending if False)

        Returns:
            List of mileage entries
        """
        query = {}

        if project_id is not None:
            query["project_id"] = project_id

        if date_gte or date_lte:
            query["date"] = {}
            if date_gte:
                query["date"]["$gte"] = date_to_datetime(date_gte)
            if date_lte:
                query["date"]["$lte"] = date_to_datetime(date_lte)

        cursor = self.mileage_entries.find(query).sort("date", -1 if newest_first else 1)
        entry_docs = await cursor.to_list(length=None)

        return [self._doc_to_entry(doc) for doc in entry_docs]

    async def get_entry(self, entry_id: int) -> MileageEntry:
        """
        Get a mileage entry by id.

        Raises:
            ValueError: If entry not found
        """
        entry_doc = await self.mileage_entries.find_one({"_id": entry_id})

        if not entry_doc:
            raise ValueError("Mileage entry not found")

        return self._doc_to_entry(entry_doc)

    async def create_entry(self, entry_create: MileageEntryCreate) -> MileageEntry:
        """
        Create a mileage entry.

        Raises:
            ValidationFailure: If the supplied id is already in use
        """
        if entry_create.id is not None:
            if await self.mileage_entries.find_one({"_id": entry_create.id}):
                raise ValidationFailure(f"Mileage entry {entry_create.id} already exists")
            entry_id = entry_create.id
        else:
            entry_id = await generate_unique_id(self.mileage_entries, self.counters, "mileage_entries")

        now = datetime.utcnow()
        entry_doc = {
            "_id": entry_id,
            "project_id": entry_create.project_id,
            "miles": to_decimal128(entry_create.miles),
            "date": date_to_datetime(entry_create.date),
            "notes": entry_create.notes,
            "created_at": now,
            "updated_at": now,
        }

        await self.mileage_entries.insert_one(entry_doc)
        logger.debug("Created mileage entry %s for project %s", entry_id, entry_create.project_id)

        return self._doc_to_entry(entry_doc)

    async def update_entry(
        self,
        entry_id: int,
        entry_update: MileageEntryUpdate,
    ) -> MileageEntry:
        """
        Update a mileage entry.

        Raises:
            ValueError: If entry not found
        """
        changes = entry_update.model_dump(exclude_unset=True)
        update_doc = {
            "updated_at": datetime.utcnow(),
        }

        # notes may be cleared with null; the other fields are required
        if "notes" in changes:
            update_doc["notes"] = changes["notes"]
        if changes.get("project_id") is not None:
            update_doc["project_id"] = changes["project_id"]
        if changes.get("miles") is not None:
            update_doc["miles"] = to_decimal128(changes["miles"])
        if changes.get("date") is not None:
            update_doc["date"] = date_to_datetime(changes["date"])

        updated_doc = await self.mileage_entries.find_one_and_update(
            {"_id": entry_id},
            {"$set": update_doc},
            return_document=True,
        )

        if not updated_doc:
            raise ValueError("Mileage entry not found")

        return self._doc_to_entry(updated_doc)

    async def delete_entry(self, entry_id: int) -> dict:
        """Delete a mileage entry (hard delete)."""
        result = await self.mileage_entries.delete_one({"_id": entry_id})

        if result.deleted_count == 0:
            raise ValueError("Mileage entry not found")

        return {"success": True}
