"""Tests for UserService - profile CRUD, favorites, subscriptions and quick links."""

import json
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from devportal.application.services import UserService
from devportal.domain.errors import (
    AlreadyExistsError,
    InternalError,
    NotFoundError,
    RecordNotFoundError,
    ValidationFailedError,
)


class TestUserService:
    @pytest.fixture
    def user_repo(self, user):
        repo = AsyncMock()
        repo.get_by_id.return_value = user
        repo.get_by_user_id.return_value = user
        repo.get_by_name.return_value = user
        repo.get_by_email.side_effect = RecordNotFoundError("users record not found")
        repo.create.side_effect = lambda u: u
        repo.update.side_effect = lambda u: u
        return repo

    @pytest.fixture
    def link_repo(self):
        repo = AsyncMock()
        repo.get_by_ids.return_value = []
        repo.get_by_owner.return_value = []
        return repo

    @pytest.fixture
    def plugin_repo(self):
        return AsyncMock()

    @pytest.fixture
    def service(self, user_repo, link_repo, plugin_repo, cache):
        return UserService(user_repo, link_repo, plugin_repo, cache=cache)

    @staticmethod
    def saved_metadata(user_repo) -> dict:
        return json.loads(user_repo.update.await_args.args[0].metadata)

    # -------------------------------------------------------------------------
    # PROFILE
    # -------------------------------------------------------------------------

    async def test_create_defaults_name_to_user_id(self, service, user_repo):
        response = await service.create_user(
            {
                "user_id": "I777777",
                "first_name": "Max",
                "last_name": "Mustermann",
                "email": "max@example.com",
                "created_by": "admin",
            }
        )

        created = user_repo.create.await_args.args[0]
        assert response.id == "I777777"
        assert response.name == "I777777"
        assert (created.created_by, created.updated_by) == ("admin", "admin")

    async def test_create_duplicate_email(self, service, user_repo, user):
        user_repo.get_by_email.side_effect = None
        user_repo.get_by_email.return_value = user

        with pytest.raises(AlreadyExistsError, match="with this email"):
            await service.create_user(
                {
                    "user_id": "I777777",
                    "first_name": "Max",
                    "last_name": "Mustermann",
                    "email": user.email,
                    "created_by": "admin",
                }
            )

        user_repo.create.assert_not_awaited()

    async def test_update_to_own_email_skips_uniqueness(self, service, user_repo, user):
        await service.update_user(user.id, {"email": user.email, "mobile": "+49 1"})

        user_repo.get_by_email.assert_not_awaited()

    async def test_update_to_taken_email(self, service, user_repo, user):
        user_repo.get_by_email.side_effect = None
        user_repo.get_by_email.return_value = user.updated(email="taken@example.com")

        with pytest.raises(AlreadyExistsError):
            await service.update_user(user.id, {"email": "taken@example.com"})

        user_repo.update.assert_not_awaited()

    async def test_get_user_by_id_cached_and_invalidated(self, service, user_repo, user):
        await service.get_user_by_id(user.id)
        await service.get_user_by_id(user.id)
        await service.update_user_team(user.id, uuid4(), "admin")
        await service.get_user_by_id(user.id)

        assert user_repo.get_by_id.await_count == 3

    async def test_missing_user(self, service, user_repo):
        user_repo.get_by_user_id.side_effect = RecordNotFoundError("missing")

        with pytest.raises(NotFoundError, match="user not found"):
            await service.get_user_by_user_id("nobody")

    async def test_listing_clamps_window(self, service, user_repo, user):
        user_repo.get_all.return_value = ([user], 1)

        result = await service.get_all_users(0, -1)

        assert (result.limit, result.offset, result.total) == (20, 0, 1)
        user_repo.get_all.assert_awaited_once_with(20, 0)

    async def test_active_users(self, service, user_repo, user):
        user_repo.get_active_by_organization.return_value = ([user], 1)
        organization_id = uuid4()

        result = await service.get_active_users(organization_id, 50, 0)

        assert result.total == 1
        user_repo.get_active_by_organization.assert_awaited_once_with(organization_id, 50, 0)

    async def test_delete_user(self, service, user_repo, user):
        await service.get_user_by_id(user.id)
        await service.delete_user(user.id)
        await service.get_user_by_id(user.id)

        user_repo.delete.assert_awaited_once_with(user.id)
        assert user_repo.get_by_id.await_count == 3

    async def test_users_by_organization(self, service, user_repo, user):
        user_repo.get_by_organization_id.return_value = ([user], 7)
        organization_id = uuid4()

        result = await service.get_users_by_organization(organization_id, 5, 10)

        assert (result.total, result.limit, result.offset) == (7, 5, 10)
        user_repo.get_by_organization_id.assert_awaited_once_with(organization_id, 5, 10)

    async def test_search_failure_is_internal(self, service, user_repo):
        user_repo.search_by_organization.side_effect = ConnectionError("gone")

        with pytest.raises(InternalError, match="failed to search users"):
            await service.search_users(uuid4(), "jane", 20, 0)

    async def test_global_search(self, service, user_repo, user):
        user_repo.search_by_name_or_title_global.return_value = ([user], 1)

        result = await service.search_users_global("jd", 10, 5)

        assert [u.name for u in result.users] == ["jdoe"]
        user_repo.search_by_name_or_title_global.assert_awaited_once_with("jd", 10, 5)

    # -------------------------------------------------------------------------
    # FAVORITES AND SUBSCRIPTIONS
    # -------------------------------------------------------------------------

    async def test_add_favorite_twice_keeps_one_entry(self, service, user_repo, user):
        link_id = uuid4()
        await service.add_favorite_link_by_user_id(user.user_id, link_id)
        user_repo.get_by_user_id.return_value = user_repo.update.await_args.args[0]

        await service.add_favorite_link_by_user_id(user.user_id, link_id)

        assert self.saved_metadata(user_repo) == {"favorites": [str(link_id)]}

    async def test_remove_absent_favorite_is_noop(self, service, user_repo, user):
        user_repo.get_by_user_id.return_value = user.with_metadata('{"favorites":["L1"]}')

        await service.remove_favorite_link_by_user_id(user.user_id, "L2")

        assert user_repo.update.await_args.args[0].metadata == '{"favorites":["L1"]}'

    async def test_subscribe_appends_plugin_id(self, service, user_repo, user):
        plugin_id = uuid4()

        await service.add_subscribed_plugin_by_user_id(user.user_id, plugin_id)

        assert self.saved_metadata(user_repo) == {"subscribed": [str(plugin_id)]}

    async def test_remove_last_subscription_leaves_empty_list(self, service, user_repo, user):
        plugin_id = uuid4()
        user_repo.get_by_user_id.return_value = user.with_metadata(
            json.dumps({"subscribed": [str(plugin_id)], "portal_admin": True})
        )

        await service.remove_subscribed_plugin_by_user_id(user.user_id, plugin_id)

        assert self.saved_metadata(user_repo) == {"subscribed": [], "portal_admin": True}

    async def test_subscribed_plugins_skip_deleted(self, service, plugin_repo, user, plugin):
        gone = uuid4()

        async def lookup(plugin_id):
            if plugin_id != plugin.id:
                raise RecordNotFoundError("plugins record not found")
            return plugin

        plugin_repo.get_by_id.side_effect = lookup
        subscriber = user.with_metadata(
            json.dumps({"subscribed": [str(gone), str(plugin.id), "bogus"]})
        )

        plugins = await service.get_subscribed_plugins_from_user(subscriber)

        assert [p.name for p in plugins] == ["deploy-board"]
        assert plugins[0].subscribed is True

    async def test_subscribed_plugins_failure_is_internal(self, service, plugin_repo, user):
        plugin_repo.get_by_id.side_effect = ConnectionError("db down")
        subscriber = user.with_metadata(json.dumps({"subscribed": [str(uuid4())]}))

        with pytest.raises(InternalError, match="failed to get subscribed plugins"):
            await service.get_subscribed_plugins_from_user(subscriber)

    # -------------------------------------------------------------------------
    # COMPOSITE VIEWS
    # -------------------------------------------------------------------------

    async def test_with_links_merges_favorites_and_owned(
        self, service, user_repo, link_repo, user, link_factory
    ):
        shared = link_factory(uuid4(), name="wiki")
        own = link_factory(user.id, name="docs")
        user_repo.get_by_name.return_value = user.with_metadata(
            json.dumps({"favorites": [str(shared.id), str(own.id)], "portal_admin": "true"})
        )
        link_repo.get_by_ids.return_value = [shared, own]
        link_repo.get_by_owner.return_value = [own]

        response = await service.get_user_by_name_with_links("jdoe")

        assert [(link.name, link.favorite) for link in response.links] == [
            ("wiki", True),
            ("docs", True),
        ]
        assert response.portal_admin is True
        assert response.plugins == []

    async def test_with_links_requires_name(self, service):
        with pytest.raises(ValidationFailedError, match="name is required"):
            await service.get_user_by_name_with_links("")

    async def test_with_links_and_plugins(self, service, plugin_repo, user_repo, user, plugin):
        plugin_repo.get_by_id.return_value = plugin
        user_repo.get_by_name.return_value = user.with_metadata(
            json.dumps({"subscribed": [str(plugin.id)]})
        )

        response = await service.get_user_by_name_with_links_and_plugins("jdoe")

        assert [p.id for p in response.plugins] == [plugin.id]
        assert response.portal_admin is False

    async def test_plugins_by_user_id(self, service, plugin_repo, user_repo, user, plugin):
        plugin_repo.get_by_id.return_value = plugin
        user_repo.get_by_user_id.return_value = user.with_metadata(
            json.dumps({"subscribed": [str(plugin.id)]})
        )

        plugins = await service.get_user_by_user_id_with_plugins(user.user_id)

        assert len(plugins) == 1

    # -------------------------------------------------------------------------
    # QUICK LINKS
    # -------------------------------------------------------------------------

    async def test_add_quick_link_replaces_same_url(self, service, user_repo, user):
        user_repo.get_by_id.return_value = user.with_metadata(
            json.dumps(
                {
                    "quick_links": [
                        {"url": "https://a.example.com", "title": "Old"},
                        {"url": "https://b.example.com", "title": "B"},
                        "garbage",
                    ]
                }
            )
        )

        await service.add_quick_link(user.id, {"url": "https://a.example.com", "title": "New"})

        stored = self.saved_metadata(user_repo)["quick_links"]
        assert [(q["url"], q["title"]) for q in stored] == [
            ("https://b.example.com", "B"),
            ("https://a.example.com", "New"),
        ]

    async def test_add_quick_link_validates_url(self, service, user_repo, user):
        with pytest.raises(ValidationFailedError):
            await service.add_quick_link(user.id, {"url": "ftp://x", "title": "X"})

        user_repo.get_by_id.assert_not_awaited()

    async def test_get_and_remove_quick_links(self, service, user_repo, user):
        user_repo.get_by_id.return_value = user.with_metadata(
            '{"quick_links":[{"url":"https://a.example.com","title":"A","icon":"star"}]}'
        )

        listed = await service.get_quick_links(user.id)
        await service.remove_quick_link(user.id, "https://a.example.com")

        assert listed.quick_links[0].icon == "star"
        assert self.saved_metadata(user_repo) == {"quick_links": []}

    async def test_remove_quick_link_requires_url(self, service):
        with pytest.raises(ValidationFailedError, match="link URL is required"):
            await service.remove_quick_link(uuid4(), "")
