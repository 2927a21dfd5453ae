"""Tests for PluginService - registry CRUD, viewer marking and UI content fetch."""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest

from devportal.application.services import PluginService
from devportal.config import settings
from devportal.domain.errors import (
    AlreadyExistsError,
    InternalError,
    InvalidGitHubURLError,
    MalformedInputError,
    NotFoundError,
    RecordNotFoundError,
)


class TestPluginService:
    @pytest.fixture
    def plugin_repo(self, plugin):
        repo = AsyncMock()
        repo.get_by_id.return_value = plugin
        repo.get_by_name.side_effect = RecordNotFoundError("plugins record not found")
        repo.get_all.return_value = ([plugin], 1)
        repo.create.side_effect = lambda p: p
        repo.update.side_effect = lambda p: p
        return repo

    @pytest.fixture
    def user_repo(self):
        return AsyncMock()

    @pytest.fixture
    def service(self, plugin_repo, user_repo, cache):
        return PluginService(plugin_repo, user_repo, cache=cache)

    @pytest.fixture
    def create_payload(self):
        return {
            "name": "deploy-board",
            "title": "Deploy Board",
            "icon": "rocket",
            "react_component_path": "https://github.com/acme/plugins/blob/main/Board.tsx",
            "backend_server_url": "https://deploy.example.com",
        }

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    async def test_create_plugin(self, service, plugin_repo, create_payload):
        response = await service.create_plugin(create_payload)

        assert response.name == "deploy-board"
        assert response.subscribed is None
        plugin_repo.create.assert_awaited_once()

    async def test_create_duplicate_name(self, service, plugin_repo, plugin, create_payload):
        plugin_repo.get_by_name.side_effect = None
        plugin_repo.get_by_name.return_value = plugin

        with pytest.raises(AlreadyExistsError):
            await service.create_plugin(create_payload)

        plugin_repo.create.assert_not_awaited()

    async def test_update_applies_only_supplied_fields(self, service, plugin):
        response = await service.update_plugin(plugin.id, {"title": "Deployments"})

        assert response.title == "Deployments"
        assert response.icon == plugin.icon

    async def test_rename_checks_uniqueness(self, service, plugin_repo, plugin):
        plugin_repo.get_by_name.side_effect = None
        plugin_repo.get_by_name.return_value = plugin

        with pytest.raises(AlreadyExistsError):
            await service.update_plugin(plugin.id, {"name": "taken"})

        plugin_repo.update.assert_not_awaited()

    async def test_get_by_id_cached_until_delete(self, service, plugin_repo, plugin):
        await service.get_plugin_by_id(plugin.id)
        await service.get_plugin_by_id(plugin.id)
        assert plugin_repo.get_by_id.await_count == 1

        await service.delete_plugin(plugin.id)
        plugin_repo.get_by_id.side_effect = RecordNotFoundError("gone")

        with pytest.raises(NotFoundError, match="plugin not found"):
            await service.get_plugin_by_id(plugin.id)

    # -------------------------------------------------------------------------
    # LISTINGS
    # -------------------------------------------------------------------------

    async def test_listing_clamps_and_caches(self, service, plugin_repo):
        first = await service.get_all_plugins(500, -4)
        second = await service.get_all_plugins(500, -4)

        assert (first.limit, first.offset, first.total) == (20, 0, 1)
        assert first == second
        plugin_repo.get_all.assert_awaited_once_with(20, 0)

    async def test_viewer_subscriptions_are_marked(self, service, user_repo, user, plugin):
        user_repo.get_by_name.return_value = user.with_metadata(
            json.dumps({"subscribed": [str(plugin.id), "not-a-uuid"]})
        )

        result = await service.get_all_plugins_with_viewer(20, 0, "jdoe")

        assert result.plugins[0].subscribed is True
        assert result.plugins[0].to_payload()["subscribed"] is True

    @pytest.mark.parametrize("viewer", ["", "   "])
    async def test_blank_viewer_lists_unmarked(self, service, user_repo, viewer):
        result = await service.get_all_plugins_with_viewer(20, 0, viewer)

        assert result.plugins[0].subscribed is None
        user_repo.get_by_name.assert_not_awaited()

    async def test_unknown_viewer_lists_unmarked(self, service, user_repo):
        user_repo.get_by_name.side_effect = RecordNotFoundError("missing")

        result = await service.get_all_plugins_with_viewer(20, 0, "ghost")

        assert "subscribed" not in result.plugins[0].to_payload()

    async def test_viewer_lookup_failure_is_internal(self, service, user_repo):
        user_repo.get_by_name.side_effect = ConnectionError("db down")

        with pytest.raises(InternalError, match="failed to get viewer"):
            await service.get_all_plugins_with_viewer(20, 0, "jdoe")

    # -------------------------------------------------------------------------
    # UI CONTENT
    # -------------------------------------------------------------------------

    async def test_fetches_content_from_blob_url(self, service, plugin):
        provider = AsyncMock()
        provider.get_repository_content.return_value = {"content": "export default Board;"}

        result = await service.get_plugin_ui_content(plugin.id, provider, "user-uuid")

        assert result.content == "export default Board;"
        assert result.content_type == settings.plugins.content_type
        provider.get_repository_content.assert_awaited_once_with(
            "user-uuid", "github", "acme", "plugins", "src/DeployBoard.tsx", "main"
        )

    async def test_missing_component_path(self, service, plugin_repo, plugin):
        plugin_repo.get_by_id.return_value = plugin.updated(react_component_path="")

        with pytest.raises(InvalidGitHubURLError, match="react_component_path configured"):
            await service.get_plugin_ui_content(plugin.id, AsyncMock(), "u")

    async def test_non_github_path(self, service, plugin_repo, plugin):
        plugin_repo.get_by_id.return_value = plugin.updated(
            react_component_path="https://example.com/acme/widgets/blob/main/App.tsx"
        )

        with pytest.raises(InvalidGitHubURLError):
            await service.get_plugin_ui_content(plugin.id, AsyncMock(), "u")

    async def test_provider_failure_is_internal(self, service, plugin):
        provider = AsyncMock()
        provider.get_repository_content.side_effect = PermissionError("token expired")

        with pytest.raises(InternalError, match="failed to fetch content from GitHub"):
            await service.get_plugin_ui_content(plugin.id, provider, "u")

    @pytest.mark.parametrize("payload", [{}, {"content": ""}, {"content": 42}])
    async def test_empty_content_is_malformed(self, service, plugin, payload):
        provider = AsyncMock()
        provider.get_repository_content.return_value = payload

        with pytest.raises(MalformedInputError, match="no content found"):
            await service.get_plugin_ui_content(plugin.id, provider, "u")

    async def test_fetch_is_bounded_by_timeout(self, service, plugin, monkeypatch):
        monkeypatch.setattr(settings.plugins, "content_timeout", 0.01)

        async def slow(*_args):
            await asyncio.sleep(1)

        provider = AsyncMock()
        provider.get_repository_content.side_effect = slow

        with pytest.raises(InternalError) as exc_info:
            await service.get_plugin_ui_content(plugin.id, provider, "u")

        assert isinstance(exc_info.value.__cause__, TimeoutError)
