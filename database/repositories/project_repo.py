"""
Project repository for project CRUD operations.
"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Project


class ProjectRepository:
    """Repository for Project model operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, project_id: UUID) -> Project | None:
        """Get project by ID."""
        result = await self.session.execute(select(Project).where(Project.id == project_id))
        return result.scalar_one_or_none()

    async def create(
        self,
        user_id: UUID,
        name: str,
        description: str | None = None,
        is_public: bool = False,
    ) -> Project:
        """Create a new project."""
        project = Project(
            user_id=user_id,
            name=name,
            description=description,
            is_public=is_public,
        )
        self.session.add(project)
        await self.session.flush()
        return project

    async def list_by_user(
        self,
        user_id: UUID,
        status: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Project]:
        """List projects for a user, most recently updated first."""
        query = select(Project).where(Project.user_id == user_id)
        if status:
            query = query.where(Project.status == status)

        result = await self.session.execute(
            query.order_by(desc(Project.updated_at)).limit(limit).offset(offset)
        )
        return list(result.scalars().all())

    async def update(self, project: Project, **fields) -> Project:
        """Apply the given column updates to a project."""
        for key, value in fields.items():
            setattr(project, key, value)
        await self.session.flush()
        return project

    async def touch(self, project_id: UUID) -> None:
        """Bump updated_at."""
        await self.session.execute(
            update(Project)
            .where(Project.id == project_id)
            .values(updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )

    async def increment_transformations(self, project_id: UUID) -> None:
        await self.session.execute(
            update(Project)
            .where(Project.id == project_id)
            .values(
                total_transformations=Project.total_transformations + 1,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )

    async def delete(self, project: Project) -> None:
        await self.session.delete(project)
        await self.session.flush()
