"""Time entry endpoints."""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from clock_slayer.database import get_database
from clock_slayer.errors import ValidationFailure
from clock_slayer.models.time_entry import TimeEntry, TimeEntryCreate, TimeEntryUpdate
from clock_slayer.services.time_entry_service import TimeEntryService


router = APIRouter(prefix="/api/time-entries", tags=["time-entries"])


@router.get("", response_model=list[TimeEntry])
async def list_entries(
    start_date: Optional[datetime] = Query(None, description="Entries starting at or after"),
    end_date: Optional[datetime] = Query(None, description="Entries starting at or before"),
    project_id: Optional[int] = Query(None),
    db=Depends(get_database),
):
    """
    List time entries.

    - Optional filters: start_date, end_date, project_id
    - Results sorted by start_time descending (most recent first)
    """
    service = TimeEntryService(db)
    return await service.list_entries(
        start_gte=start_date,
        start_lte=end_date,
        project_id=project_id,
    )


@router.post("", response_model=TimeEntry, status_code=status.HTTP_201_CREATED)
async def create_entry(
    entry_create: TimeEntryCreate,
    db=Depends(get_database),
):
    """
    Create a time entry.

    - Duration is stored as given, not derived from start/end
    - The project reference is not checked
    """
    service = TimeEntryService(db)
    try:
        return await service.create_entry(entry_create)
    except ValidationFailure as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{entry_id}", response_model=TimeEntry)
async def get_entry(
    entry_id: int,
    db=Depends(get_database),
):
    """Get a specific time entry by id."""
    service = TimeEntryService(db)
    try:
        return await service.get_entry(entry_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.api_route("/{entry_id}", methods=["PUT", "PATCH"], response_model=TimeEntry)
async def update_entry(
    entry_id: int,
    entry_update: TimeEntryUpdate,
    db=Depends(get_database),
):
    """Update a time entry (partial)."""
    service = TimeEntryService(db)
    try:
        return await service.update_entry(entry_id, entry_update)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{entry_id}")
async def delete_entry(
    entry_id: int,
    db=Depends(get_database),
):
    """
    Delete a time entry.

    - Hard delete (permanent)
    """
    service = TimeEntryService(db)
    try:
        return await service.delete_entry(entry_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
