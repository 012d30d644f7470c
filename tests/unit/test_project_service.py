"""Tests for ProjectService."""
import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from bson import Decimal128


def make_db(mock_projects, mock_counters=None):
    mock_db = MagicMock()
    collections = {
        "projects": mock_projects,
        "counters": mock_counters or AsyncMock(),
    }
    mock_db.__getitem__.side_effect = lambda key: collections[key]
    return mock_db


def project_doc(project_id=1, name="Deck Build", hourly_rate="85.00", mileage_rate="0.67"):
    now = datetime(2025, 3, 3, 12, 0)
    return {
        "_id": project_id,
        "name": name,
        "hourly_rate": Decimal128(hourly_rate),
        "mileage_rate": Decimal128(mileage_rate),
        "created_at": now,
        "updated_at": now,
    }


@pytest.mark.asyncio
class TestProjectServiceCreate:
    """Tests for creating projects."""

    async def test_create_project_generated_id(self):
        """Test project creation takes an id from the sequence."""
        from clock_slayer.services.project_service import ProjectService
        from clock_slayer.models.project import ProjectCreate

        mock_projects = AsyncMock()
        mock_counters = AsyncMock()
        mock_counters.find_one_and_update.return_value = {"_id": "projects", "seq": 3}
        mock_projects.find_one.return_value = None

        service = ProjectService(make_db(mock_projects, mock_counters))
        project = await service.create_project(ProjectCreate(name="Deck Build"))

        assert project.id == 3
        assert project.name == "Deck Build"
        assert project.hourly_rate == Decimal("0")
        assert project.mileage_rate == Decimal("0.67")

        inserted = mock_projects.insert_one.call_args[0][0]
        assert inserted["_id"] == 3
        assert inserted["mileage_rate"] == Decimal128("0.67")

    async def test_create_project_supplied_id(self):
        """Test a caller-supplied id is used as is."""
        from clock_slayer.services.project_service import ProjectService
        from clock_slayer.models.project import ProjectCreate

        mock_projects = AsyncMock()
        mock_counters = AsyncMock()
        mock_projects.find_one.return_value = None

        service = ProjectService(make_db(mock_projects, mock_counters))
        project = await service.create_project(
            ProjectCreate(id=1741000000000, name="Deck Build", hourly_rate="85")
        )

        assert project.id == 1741000000000
        assert project.hourly_rate == Decimal("85")
        mock_counters.find_one_and_update.assert_not_called()

    async def test_create_project_duplicate_id(self):
        """Test a caller-supplied id that exists is rejected."""
        from clock_slayer.services.project_service import ProjectService
        from clock_slayer.models.project import ProjectCreate
        from clock_slayer.errors import ValidationFailure

        mock_projects = AsyncMock()
        mock_projects.find_one.return_value = project_doc(project_id=1)

        service = ProjectService(make_db(mock_projects))

        with pytest.raises(ValidationFailure, match="already exists"):
            await service.create_project(ProjectCreate(id=1, name="Deck Build"))

        mock_projects.insert_one.assert_not_called()


@pytest.mark.asyncio
class TestProjectServiceRead:
    """Tests for listing and getting projects."""

    async def test_list_projects(self):
        """Test listing all projects converts rates to Decimal."""
        from clock_slayer.services.project_service import ProjectService

        mock_projects = MagicMock()
        mock_cursor = MagicMock()
        mock_cursor.to_list = AsyncMock(return_value=[
            project_doc(1, "Deck Build"),
            project_doc(2, "Kitchen Remodel", hourly_rate="95.00"),
        ])
        mock_projects.find.return_value.sort.return_value = mock_cursor

        service = ProjectService(make_db(mock_projects))
        projects = await service.list_projects()

        assert [p.name for p in projects] == ["Deck Build", "Kitchen Remodel"]
        assert projects[1].hourly_rate == Decimal("95.00")
        mock_projects.find.return_value.sort.assert_called_once_with("_id", 1)

    async def test_get_project_not_found(self):
        """Test getting a missing project fails."""
        from clock_slayer.services.project_service import ProjectService

        mock_projects = AsyncMock()
        mock_projects.find_one.return_value = None

        service = ProjectService(make_db(mock_projects))

        with pytest.raises(ValueError, match="Project not found"):
            await service.get_project(99)


@pytest.mark.asyncio
class TestProjectServiceUpdate:
    """Tests for updating projects."""

    async def test_update_project_fields(self):
        """Test only provided fields are set."""
        from clock_slayer.services.project_service import ProjectService
        from clock_slayer.models.project import ProjectUpdate

        mock_projects = AsyncMock()
        mock_projects.find_one_and_update.return_value = project_doc(1, "Deck Rebuild")

        service = ProjectService(make_db(mock_projects))
        project = await service.update_project(1, ProjectUpdate(name="Deck Rebuild"))

        assert project.name == "Deck Rebuild"
        call_args = mock_projects.find_one_and_update.call_args
        assert call_args[0][0] == {"_id": 1}
        update_doc = call_args[0][1]["$set"]
        assert update_doc["name"] == "Deck Rebuild"
        assert "hourly_rate" not in update_doc
        assert "updated_at" in update_doc

    async def test_update_project_not_found(self):
        """Test updating a missing project fails."""
        from clock_slayer.services.project_service import ProjectService
        from clock_slayer.models.project import ProjectUpdate

        mock_projects = AsyncMock()
        mock_projects.find_one_and_update.return_value = None

        service = ProjectService(make_db(mock_projects))

        with pytest.raises(ValueError, match="Project not found"):
            await service.update_project(99, ProjectUpdate(name="Nope"))


@pytest.mark.asyncio
class TestProjectServiceDelete:
    """Tests for deleting projects."""

    async def test_delete_project(self):
        """Test hard delete."""
        from clock_slayer.services.project_service import ProjectService

        mock_projects = AsyncMock()
        mock_projects.delete_one.return_value = MagicMock(deleted_count=1)

        service = ProjectService(make_db(mock_projects))
        result = await service.delete_project(1)

        assert result == {"success": True}
        mock_projects.delete_one.assert_called_once_with({"_id": 1})

    async def test_delete_project_not_found(self):
        """Test deleting a missing project fails."""
        from clock_slayer.services.project_service import ProjectService

        mock_projects = AsyncMock()
        mock_projects.delete_one.return_value = MagicMock(deleted_count=0)

        service = ProjectService(make_db(mock_projects))

        with pytest.raises(ValueError, match="Project not found"):
            await service.delete_project(99)
