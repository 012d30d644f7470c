"""Mileage entry endpoints."""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from clock_slayer.database import get_database
from clock_slayer.errors import ValidationFailure
from clock_slayer.models.mileage_entry import MileageEntry, MileageEntryCreate, MileageEntryUpdate
from clock_slayer.services.mileage_service import MileageService


router = APIRouter(prefix="/api/mileage-entries", tags=["mileage-entries"])


@router.get("", response_model=list[MileageEntry])
async def list_entries(
    start_date: Optional[date] = Query(None, description="Entries dated on or after"),
    end_date: Optional[date] = Query(None, description="Entries dated on or before"),
    project_id: Optional[int] = Query(None),
    db=Depends(get_database),
):
    """
    List mileage entries.

    - Optional filters: start_date, end_date, project_id
    - Results sorted by date descending (most recent first)
    """
    service = MileageService(db)
    return await service.list_entries(
        date_gte=start_date,
        date_lte=end_date,
        project_id=project_id,
    )


@router.post("", response_model=MileageEntry, status_code=status.HTTP_201_CREATED)
async def create_entry(
    entry_create: MileageEntryCreate,
    db=Depends(get_database),
):
    """Create a mileage entry."""
    service = MileageService(db)
    try:
        return await service.create_entry(entry_create)
    except ValidationFailure as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{entry_id}", response_model=MileageEntry)
async def get_entry(
    entry_id: int,
    db=Depends(get_database),
):
    """Get a specific mileage entry by id."""
    service = MileageService(db)
    try:
        return await service.get_entry(entry_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.api_route("/{entry_id}", methods=["PUT", "PATCH"], response_model=MileageEntry)
async def update_entry(
    entry_id: int,
    entry_update: MileageEntryUpdate,
    db=Depends(get_database),
):
    """Update a mileage entry (partial)."""
    service = MileageService(db)
    try:
        return await service.update_entry(entry_id, entry_update)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{entry_id}")
async def delete_entry(
    entry_id: int,
    db=Depends(get_database),
):
    """Delete a mileage entry (hard delete)."""
    service = MileageService(db)
    try:
        return await service.delete_entry(entry_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
