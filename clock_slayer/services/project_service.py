"""Project service - business logic for project management."""
import logging
from datetime import datetime

from clock_slayer.errors import ValidationFailure
from clock_slayer.models.project import Project, ProjectCreate, ProjectUpdate
from clock_slayer.utils.ids import generate_unique_id
from clock_slayer.utils.numbers import to_decimal, to_decimal128

logger = logging.getLogger(__name__)


class ProjectService:
    """Service for handling project operations."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.projects = db["projects"]
        self.counters = db["counters"]

    def _doc_to_project(self, doc: dict) -> Project:
        """
        Convert database document to Project model.

        Handles Decimal128 to Decimal conversion for rate fields.
        """
        return Project(
            _id=doc["_id"],
            name=doc["name"],
            hourly_rate=to_decimal(doc.get("hourly_rate")),
            mileage_rate=to_decimal(doc.get("mileage_rate")),
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    async def create_project(self, project_create: ProjectCreate) -> Project:
        """
        Create a new project.

        Args:
            project_create: Project creation data

        Returns:
            Created project object

        Raises:
            ValidationFailure: If the supplied id is already in use
        """
        if project_create.id is not None:
            if await self.projects.find_one({"_id": project_create.id}):
                raise ValidationFailure(f"Project {project_create.id} already exists")
            project_id = project_create.id
        else:
            project_id = await generate_unique_id(self.projects, self.counters, "projects")

        now = datetime.utcnow()
        project_doc = {
            "_id": project_id,
            "name": project_create.name,
            "hourly_rate": to_decimal128(project_create.hourly_rate),
            "mileage_rate": to_decimal128(project_create.mileage_rate),
            "created_at": now,
            "updated_at": now,
        }

        await self.projects.insert_one(project_doc)
        logger.debug("Created project %s", project_id)

        return self._doc_to_project(project_doc)

    async def list_projects(self) -> list[Project]:
        """
        List all projects.

        Returns:
            List of projects ordered by id
        """
        cursor = self.projects.find({}).sort("_id", 1)
        project_docs = await cursor.to_list(length=None)

        return [self._doc_to_project(doc) for doc in project_docs]

    async def get_project(self, project_id: int) -> Project:
        """
        Get a project by id.

        Raises:
            ValueError: If project not found
        """
        project_doc = await self.projects.find_one({"_id": project_id})

        if not project_doc:
            raise ValueError("Project not found")

        return self._doc_to_project(project_doc)

    async def update_project(
        self,
        project_id: int,
        project_update: ProjectUpdate,
    ) -> Project:
        """
        Update a project.

        Args:
            project_id: Project id
            project_update: Update data (only provided fields change)

        Returns:
            Updated project object

        Raises:
            ValueError: If project not found
        """
        # every project field is required, so an explicit null leaves it as is
        changes = {
            field: value
            for field, value in project_update.model_dump(exclude_unset=True).items()
            if value is not None
        }
        update_doc = {
            "updated_at": datetime.utcnow(),
        }

        if "name" in changes:
            update_doc["name"] = changes["name"]
        for rate in ("hourly_rate", "mileage_rate"):
            if rate in changes:
                update_doc[rate] = to_decimal128(changes[rate])

        updated_doc = await self.projects.find_one_and_update(
            {"_id": project_id},
            {"$set": update_doc},
            return_document=True,
        )

        if not updated_doc:
            raise ValueError("Project not found")

        return self._doc_to_project(updated_doc)

    async def delete_project(self, project_id: int) -> dict:
        """
        Delete a project.

        Time and mileage entries that reference it are left in place and
        report under "Unknown".

        Raises:
            ValueError: If project not found
        """
        result = await self.projects.delete_one({"_id": project_id})

        if result.deleted_count == 0:
            raise ValueError("Project not found")

        logger.debug("Deleted project %s", project_id)
        return {"success": True}
