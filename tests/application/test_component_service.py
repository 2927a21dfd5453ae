"""Tests for ComponentService and the project-level component view."""

from unittest.mock import AsyncMock

import pytest

from devportal.application.services import ComponentService
from devportal.application.services.component_service import to_project_view
from devportal.config import settings
from devportal.domain.errors import InternalError, NotFoundError, RecordNotFoundError


class TestProjectView:
    def test_enriches_from_metadata(self, component):
        view = to_project_view(
            component.with_metadata(
                '{"ci":{"qos":"gold"},"sonar":{"project_id":"acme_api"},'
                '"github":{"url":"https://github.com/acme/api"},'
                '"central-service":false,"isLibrary":true}'
            )
        )
        payload = view.to_payload()

        assert payload["qos"] == "gold"
        assert payload["sonar"] == f"{settings.components.sonar_dashboard_url}acme_api"
        assert payload["github"] == "https://github.com/acme/api"
        assert payload["central-service"] is False
        assert payload["is-library"] is True
        assert "health" not in payload

    def test_unreadable_metadata_yields_bare_view(self, component):
        payload = to_project_view(component.with_metadata("{broken")).to_payload()

        assert payload["name"] == "api"
        for absent in ("qos", "sonar", "github", "central-service", "is-library", "health"):
            assert absent not in payload


class TestComponentService:
    @pytest.fixture
    def component_repo(self, component):
        repo = AsyncMock()
        repo.get_by_id.return_value = component
        repo.get_by_name.return_value = component
        repo.get_all.return_value = ([component], 1)
        repo.get_components_by_project_id.return_value = ([component], 1)
        repo.create.side_effect = lambda c: c
        repo.update.side_effect = lambda c: c
        return repo

    @pytest.fixture
    def project_repo(self, project):
        repo = AsyncMock()
        repo.get_by_id.return_value = project
        repo.get_by_name.return_value = project
        return repo

    @pytest.fixture
    def service(self, component_repo, project_repo, cache):
        return ComponentService(component_repo, project_repo, cache=cache)

    async def test_create_component(self, service, project):
        response = await service.create_component(
            {
                "name": "worker",
                "title": "Worker",
                "project_id": str(project.id),
                "metadata": {"health": True},
                "created_by": "I123456",
            }
        )

        assert response.name == "worker"
        assert response.metadata == {"health": True}

    async def test_get_by_name_cached(self, service, component_repo):
        await service.get_by_name("api")
        await service.get_by_name("api")

        component_repo.get_by_name.assert_awaited_once_with("api")

    async def test_get_by_id_not_found(self, service, component_repo, component):
        component_repo.get_by_id.side_effect = RecordNotFoundError("missing")

        with pytest.raises(NotFoundError, match="component not found"):
            await service.get_by_id(component.id)

    async def test_list_components_clamps(self, service, component_repo):
        result = await service.list_components(-1, 1000)

        assert (result.page, result.page_size, result.total) == (1, 20, 1)
        component_repo.get_all.assert_awaited_once_with(20, 0)

    async def test_project_view_lists_every_component(
        self, service, component_repo, project
    ):
        views = await service.get_by_project_name_all_view("cis")
        again = await service.get_by_project_name_all_view("cis")

        assert [v.name for v in views] == ["api"]
        assert views == again
        component_repo.get_components_by_project_id.assert_awaited_once_with(
            project.id, 1_000_000, 0
        )

    async def test_project_view_with_empty_name(self, service, project_repo):
        assert await service.get_by_project_name_all_view("") == []
        project_repo.get_by_name.assert_not_awaited()

    async def test_project_title_cached(self, service, project_repo, project):
        assert await service.get_project_title_by_id(project.id) == "Cloud Integration"
        assert await service.get_project_title_by_id(project.id) == "Cloud Integration"
        project_repo.get_by_id.assert_awaited_once()

    async def test_update_merges_metadata_and_invalidates(
        self, service, component_repo, component
    ):
        await service.get_by_id(component.id)

        response = await service.update_component(
            component.id, {"metadata": {"ci": {"qos": "silver"}, "health": False}}
        )
        component_repo.get_by_id.return_value = component.updated(title="Changed")
        refetched = await service.get_by_id(component.id)

        assert response.metadata == {
            "ci": {"qos": "silver"},
            "github": {"url": "https://github.com/acme/api"},
            "health": False,
        }
        assert refetched.title == "Changed"

    async def test_delete_failure_is_internal(self, service, component_repo, component):
        component_repo.delete.side_effect = RuntimeError("locked")

        with pytest.raises(InternalError, match="failed to delete component"):
            await service.delete_component(component.id)
