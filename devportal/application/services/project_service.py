"""Project lookups and project-level health check configuration."""

from uuid import UUID

from devportal.application.schemas import ProjectResponse
from devportal.application.services.base import repository_errors
from devportal.application.services.converters import metadata_object
from devportal.domain.entities import Project, format_timestamp
from devportal.domain.repositories.interfaces import ProjectRepositoryProtocol


def to_project_response(project: Project) -> ProjectResponse:
    return ProjectResponse(
        id=project.id,
        name=project.name,
        title=project.title,
        description=project.description,
        metadata=metadata_object(project.metadata),
        created_at=format_timestamp(project.created_at),
        updated_at=format_timestamp(project.updated_at),
    )


class ProjectService:
    """Read-only project access."""

    def __init__(self, project_repo: ProjectRepositoryProtocol) -> None:
        self._repo = project_repo

    async def get_all_projects(self) -> list[ProjectResponse]:
        with repository_errors(None, "failed to get projects"):
            projects = await self._repo.get_all_projects()
        return [to_project_response(project) for project in projects]

    async def get_by_name(self, name: str) -> ProjectResponse:
        with repository_errors("project", "failed to get project"):
            return to_project_response(await self._repo.get_by_name(name))

    async def get_health_metadata(self, project_id: UUID) -> tuple[str, str]:
        """Health URL template and success regex; empty strings when unset."""
        with repository_errors("project", "failed to get project health metadata"):
            return await self._repo.get_health_metadata(project_id)
