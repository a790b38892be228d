"""
RedLife Backend - User Service Unit Tests
=========================================

What we test:
    ✅ First login registers with server-stamped role/status/timestamps
    ✅ Second login only refreshes last_loggedIn
    ✅ Concurrent first login (duplicate key) falls back to refresh
    ✅ Profile edits: owner only, no write on mismatch, 404 for unknown user
    ✅ Admin role/status updates and donor search
"""

import pytest
from datetime import datetime, timezone

from conftest import USER_ID, make_user
from redlife.exceptions import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from redlife.repositories.base import UpdateOutcome
from redlife.schemas.user import UserProfileUpdate, UserRegistration
from redlife.services.user_service import UserService


class TestLoginOrRegister:
    def setup_method(self):
        self.payload = UserRegistration(
            email="new@example.com",
            name="New Donor",
            bloodGroup="O+",
            role="admin",
            status="blocked",
        )

    @pytest.mark.asyncio
    async def test_first_login_creates_user(self, user_repo):
        user_repo.find_by_email.side_effect = None
        user_repo.find_by_email.return_value = None
        service = UserService(user_repo)

        result = await service.login_or_register(self.payload)

        assert result.created is True
        inserted = user_repo.insert.await_args.args[0]
        assert inserted["email"] == "new@example.com"
        assert inserted["bloodGroup"] == "O+"
        # Client-supplied role/status never reach the document
        assert inserted["role"] == "donor"
        assert inserted["status"] == "active"
        assert isinstance(inserted["created_at"], datetime)
        assert inserted["created_at"] == inserted["last_loggedIn"]
        assert result.user.id == USER_ID
        user_repo.update_by_email.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_second_login_only_touches_last_logged_in(self, user_repo):
        existing = make_user("new@example.com")
        user_repo.find_by_email.side_effect = None
        user_repo.find_by_email.return_value = existing
        service = UserService(user_repo)

        result = await service.login_or_register(self.payload)

        assert result.created is False
        user_repo.insert.assert_not_awaited()
        email, fields = user_repo.update_by_email.await_args.args
        assert email == "new@example.com"
        assert list(fields) == ["last_loggedIn"]
        assert fields["last_loggedIn"].tzinfo == timezone.utc

    @pytest.mark.asyncio
    async def test_duplicate_insert_falls_back_to_refresh(self, user_repo):
        user_repo.find_by_email.side_effect = [None, make_user("new@example.com")]
        user_repo.insert.side_effect = ConflictError()
        service = UserService(user_repo)

        result = await service.login_or_register(self.payload)

        assert result.created is False
        user_repo.update_by_email.assert_awaited_once()


class TestProfileUpdate:
    @pytest.mark.asyncio
    async def test_other_users_profile_is_forbidden_without_write(self, user_repo):
        service = UserService(user_repo)

        with pytest.raises(PermissionDeniedError):
            await service.update_profile(
                "donor@example.com", "admin@example.com", UserProfileUpdate(name="Hacker")
            )
        user_repo.update_by_email.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_owner_updates_editable_fields(self, user_repo):
        service = UserService(user_repo)
        payload = UserProfileUpdate.model_validate(
            {"name": "Renamed", "district": "Dhaka", "role": "admin", "email": "x@example.com"}
        )

        result = await service.update_profile("donor@example.com", "donor@example.com", payload)

        assert result.message == "User updated successfully"
        _, fields = user_repo.update_by_email.await_args.args
        assert fields == {"name": "Renamed", "district": "Dhaka"}

    @pytest.mark.asyncio
    async def test_empty_payload_is_rejected(self, user_repo):
        service = UserService(user_repo)
        with pytest.raises(ValidationError):
            await service.update_profile("a@example.com", "a@example.com", UserProfileUpdate())

    @pytest.mark.asyncio
    async def test_unknown_user_is_not_found(self, user_repo):
        user_repo.update_by_email.return_value = UpdateOutcome(0, 0)
        service = UserService(user_repo)
        with pytest.raises(NotFoundError):
            await service.update_profile(
                "ghost@example.com", "ghost@example.com", UserProfileUpdate(name="Ghost")
            )


class TestAdminAndQueries:
    @pytest.mark.asyncio
    async def test_set_role(self, user_repo):
        service = UserService(user_repo)
        result = await service.set_role(USER_ID, "volunteer")
        user_repo.update_by_id.assert_awaited_once_with(USER_ID, {"role": "volunteer"})
        assert result.matched_count == 1

    @pytest.mark.asyncio
    async def test_set_status_unknown_user(self, user_repo):
        user_repo.update_by_id.return_value = UpdateOutcome(0, 0)
        service = UserService(user_repo)
        with pytest.raises(NotFoundError):
            await service.set_status(USER_ID, "blocked")

    @pytest.mark.asyncio
    async def test_search_without_criteria_returns_empty(self, user_repo):
        service = UserService(user_repo)
        assert await service.search_donors() == []
        assert await service.search_donors(blood_group="", district=None) == []
        user_repo.find.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_search_uses_only_supplied_criteria(self, user_repo):
        user_repo.find.return_value = [make_user("a@example.com", bloodGroup="A+")]
        service = UserService(user_repo)

        donors = await service.search_donors(blood_group="A+", district="Dhaka")

        user_repo.find.assert_awaited_once_with({"bloodGroup": "A+", "district": "Dhaka"})
        assert donors[0].blood_group == "A+"

    @pytest.mark.asyncio
    async def test_count_donors_filters_by_role(self, user_repo):
        user_repo.count.return_value = 7
        service = UserService(user_repo)
        result = await service.count_donors()
        user_repo.count.assert_awaited_once_with({"role": "donor"})
        assert result.count == 7

    @pytest.mark.asyncio
    async def test_list_users_passes_pagination(self, user_repo):
        service = UserService(user_repo)
        await service.list_users(status="blocked", skip=10, limit=5)
        user_repo.find.assert_awaited_once_with({"status": "blocked"}, skip=10, limit=5)
