"""Time entry service - business logic for time tracking records."""
import logging
from datetime import datetime, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from clock_slayer.config import settings
from clock_slayer.errors import ValidationFailure
from clock_slayer.models.time_entry import TimeEntry, TimeEntryCreate, TimeEntryUpdate
from clock_slayer.utils.dates import as_utc, to_naive_utc
from clock_slayer.utils.ids import generate_unique_id
from clock_slayer.utils.numbers import to_decimal, to_decimal128

logger = logging.getLogger(__name__)


class TimeEntryService:
    """Service for handling time entry operations."""

    def __init__(self, db, timezone: Optional[tzinfo] = None):
        """
        Initialize service with database connection.

        Args:
            db: Database connection
            timezone: Zone for timestamps sent without an offset
                (defaults to the configured report time zone)
        """
        self.db = db
        self.time_entries = db["time_entries"]
        self.counters = db["counters"]
        self.timezone = timezone or ZoneInfo(settings.report_timezone)

    def _doc_to_entry(self, doc: dict) -> TimeEntry:
        """
        Convert database document to TimeEntry model.
        """
        return TimeEntry(
            _id=doc["_id"],
            project_id=doc["project_id"],
            start_time=as_utc(doc["start_time"]),
            end_time=as_utc(doc["end_time"]),
            duration=to_decimal(doc["duration"]),
            notes=doc.get("notes"),
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    async def list_entries(
        self,
        start_gte: Optional[datetime] = None,
        start_lte: Optional[datetime] = None,
        project_id: Optional[int] = None,
        newest_first: bool = True,
    ) -> list[TimeEntry]:
        """
        List time entries with optional filtering.

        Args:
            start_gte: Only entries starting at or after this time
            start_lte: Only entries starting at or before this time
            project_id: Optional project filter
            newest_first: Sort by start_time descending (ascending if False)

        Returns:
            List of time entries
        """
        query = {}

        if project_id is not None:
            query["project_id"] = project_id

        if start_gte or start_lte:
            query["start_time"] = {}
            if start_gte:
                query["start_time"]["$gte"] = to_naive_utc(start_gte, assume=self.timezone)
            if start_lte:
                query["start_time"]["$lte"] = to_naive_utc(start_lte, assume=self.timezone)

        cursor = self.time_entries.find(query).sort("start_time", -1 if newest_first else 1)
        entry_docs = await cursor.to_list(length=None)

        return [self._doc_to_entry(doc) for doc in entry_docs]

    async def get_entry(self, entry_id: int) -> TimeEntry:
        """
        Get a time entry by id.

        Raises:
            ValueError: If entry not found
        """
        entry_doc = await self.time_entries.find_one({"_id": entry_id})

        if not entry_doc:
            raise ValueError("Time entry not found")

        return self._doc_to_entry(entry_doc)

    async def create_entry(self, entry_create: TimeEntryCreate) -> TimeEntry:
        """
        Create a time entry.

        The project reference is not checked; the report labels entries for
        missing projects as "Unknown".

        Args:
            entry_create: Time entry creation data

        Returns:
            Created time entry

        Raises:
            ValidationFailure: If the supplied id is already in use
        """
        if entry_create.id is not None:
            if await self.time_entries.find_one({"_id": entry_create.id}):
                raise ValidationFailure(f"Time entry {entry_create.id} already exists")
            entry_id = entry_create.id
        else:
            entry_id = await generate_unique_id(self.time_entries, self.counters, "time_entries")

        now = datetime.utcnow()
        entry_doc = {
            "_id": entry_id,
            "project_id": entry_create.project_id,
            "start_time": to_naive_utc(entry_create.start_time, assume=self.timezone),
            "end_time": to_naive_utc(entry_create.end_time, assume=self.timezone),
            "duration": to_decimal128(entry_create.duration),
            "notes": entry_create.notes,
            "created_at": now,
            "updated_at": now,
        }

        await self.time_entries.insert_one(entry_doc)
        logger.debug("Created time entry %s for project %s", entry_id, entry_create.project_id)

        return self._doc_to_entry(entry_doc)

    async def update_entry(
        self,
        entry_id: int,
        entry_update: TimeEntryUpdate,
    ) -> TimeEntry:
        """
        Update a time entry.

        Args:
            entry_id: Time entry id
            entry_update: Update data (only provided fields change)

        Returns:
            Updated time entry

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
        for field in ("start_time", "end_time"):
            if changes.get(field) is not None:
                update_doc[field] = to_naive_utc(changes[field], assume=self.timezone)
        if changes.get("duration") is not None:
            update_doc["duration"] = to_decimal128(changes["duration"])

        updated_doc = await self.time_entries.find_one_and_update(
            {"_id": entry_id},
            {"$set": update_doc},
            return_document=True,
        )

        if not updated_doc:
            raise ValueError("Time entry not found")

        return self._doc_to_entry(updated_doc)

    async def delete_entry(self, entry_id: int) -> dict:
        """
        Delete a time entry (hard delete).

        Raises:
            ValueError: If entry not found
        """
        result = await self.time_entries.delete_one({"_id": entry_id})

        if result.deleted_count == 0:
            raise ValueError("Time entry not found")

        return {"success": True}
