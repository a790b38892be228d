"""
RedLife Backend - Donation Service Unit Tests
=============================================

What we test:
    ✅ Creation forces pending status and the verified requester
    ✅ Edits drop privileged fields; empty edits are rejected
    ✅ Status transitions follow the lifecycle and record the donor
    ✅ Concurrent transitions: the conditional write loses → 409
    ✅ Listing, recent-three and deletion
"""

import pytest
from bson import ObjectId

from conftest import DONATION_ID, make_user
from redlife.exceptions import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from redlife.repositories.base import UpdateOutcome
from redlife.schemas.donation import (
    DonationRequestCreate,
    DonationRequestEdit,
    DonationStatusUpdate,
)
from redlife.services.donation_service import RECENT_REQUESTS_LIMIT, DonationService


def stored_request(status="pending", **extra):
    return {
        "_id": DONATION_ID,
        "requesterEmail": "donor@example.com",
        "recipientName": "Rahim",
        "hospitalName": "Dhaka Medical",
        "bloodGroup": "B+",
        "donationDate": "2024-02-01",
        "donationStatus": status,
        **extra,
    }


class TestCreate:
    @pytest.mark.asyncio
    async def test_forces_pending_and_requester(self, donation_repo):
        service = DonationService(donation_repo)
        payload = DonationRequestCreate.model_validate(
            {
                "recipientName": "Rahim",
                "hospitalName": "Dhaka Medical",
                "bloodGroup": "B+",
                "donationDate": "2024-02-01",
                "donationStatus": "done",
                "requesterEmail": "someone-else@example.com",
            }
        )

        result = await service.create(make_user("donor@example.com"), payload)

        assert result.inserted_id == DONATION_ID
        doc = donation_repo.insert.await_args.args[0]
        assert doc["donationStatus"] == "pending"
        assert doc["requesterEmail"] == "donor@example.com"
        assert doc["requesterName"] == "Donor"
        assert doc["donationDate"] == "2024-02-01"
        assert "createdAt" in doc

    @pytest.mark.asyncio
    async def test_keeps_supplied_requester_name(self, donation_repo):
        service = DonationService(donation_repo)
        payload = DonationRequestCreate(
            requester_name="Karim",
            recipient_name="Rahim",
            hospital_name="Dhaka Medical",
            blood_group="B+",
            donation_date="2024-02-01",
        )
        await service.create(make_user("donor@example.com"), payload)
        assert donation_repo.insert.await_args.args[0]["requesterName"] == "Karim"


class TestEdit:
    @pytest.mark.asyncio
    async def test_privileged_fields_are_dropped(self, donation_repo):
        service = DonationService(donation_repo)
        payload = DonationRequestEdit.model_validate(
            {
                "hospitalName": "Square Hospital",
                "donationStatus": "done",
                "requesterEmail": "x@example.com",
                "donorEmail": "y@example.com",
                "_id": "000000000000000000000000",
            }
        )

        await service.edit(DONATION_ID, payload)

        donation_repo.update_by_id.assert_awaited_once_with(
            DONATION_ID, {"hospitalName": "Square Hospital"}
        )

    @pytest.mark.asyncio
    async def test_nothing_editable_is_rejected(self, donation_repo):
        service = DonationService(donation_repo)
        payload = DonationRequestEdit.model_validate({"donationStatus": "done"})
        with pytest.raises(ValidationError):
            await service.edit(DONATION_ID, payload)
        donation_repo.update_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_request_is_not_found(self, donation_repo):
        donation_repo.update_by_id.return_value = UpdateOutcome(0, 0)
        service = DonationService(donation_repo)
        with pytest.raises(NotFoundError):
            await service.edit(DONATION_ID, DonationRequestEdit(hospital_name="X"))


class TestUpdateStatus:
    @pytest.mark.asyncio
    async def test_accept_records_donor(self, donation_repo):
        donation_repo.find_by_id.return_value = stored_request("pending")
        service = DonationService(donation_repo)

        result = await service.update_status(
            DONATION_ID,
            DonationStatusUpdate(
                donation_status="inprogress",
                donor_email="helper@example.com",
                donor_name="Helper",
            ),
        )

        assert result.modified_count == 1
        filter_, fields = donation_repo.update_one.await_args.args
        assert filter_ == {"_id": ObjectId(DONATION_ID), "donationStatus": "pending"}
        assert fields == {
            "donationStatus": "inprogress",
            "donorEmail": "helper@example.com",
            "donorName": "Helper",
        }

    @pytest.mark.asyncio
    async def test_accept_without_donor_is_rejected(self, donation_repo):
        donation_repo.find_by_id.return_value = stored_request("pending")
        service = DonationService(donation_repo)
        with pytest.raises(ValidationError):
            await service.update_status(
                DONATION_ID, DonationStatusUpdate(donation_status="inprogress")
            )
        donation_repo.update_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_done_to_pending_is_invalid(self, donation_repo):
        donation_repo.find_by_id.return_value = stored_request("done")
        service = DonationService(donation_repo)
        with pytest.raises(InvalidTransitionError):
            await service.update_status(DONATION_ID, DonationStatusUpdate(donation_status="pending"))
        donation_repo.update_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_same_status_is_a_noop(self, donation_repo):
        donation_repo.find_by_id.return_value = stored_request("inprogress")
        service = DonationService(donation_repo)

        result = await service.update_status(
            DONATION_ID, DonationStatusUpdate(donation_status="inprogress")
        )

        assert (result.matched_count, result.modified_count) == (1, 0)
        donation_repo.update_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lost_race_is_conflict(self, donation_repo):
        donation_repo.find_by_id.return_value = stored_request("inprogress")
        donation_repo.update_one.return_value = UpdateOutcome(0, 0)
        service = DonationService(donation_repo)
        with pytest.raises(ConflictError):
            await service.update_status(DONATION_ID, DonationStatusUpdate(donation_status="done"))

    @pytest.mark.asyncio
    async def test_legacy_request_without_status_counts_as_pending(self, donation_repo):
        doc = stored_request()
        del doc["donationStatus"]
        donation_repo.find_by_id.return_value = doc
        service = DonationService(donation_repo)

        await service.update_status(DONATION_ID, DonationStatusUpdate(donation_status="canceled"))

        filter_, _ = donation_repo.update_one.await_args.args
        assert filter_["donationStatus"] is None

    @pytest.mark.asyncio
    async def test_missing_request_is_not_found(self, donation_repo):
        service = DonationService(donation_repo)
        with pytest.raises(NotFoundError):
            await service.update_status(DONATION_ID, DonationStatusUpdate(donation_status="done"))


class TestQueriesAndDelete:
    @pytest.mark.asyncio
    async def test_recent_is_limited_to_three(self, donation_repo):
        service = DonationService(donation_repo)
        await service.recent_for_requester("donor@example.com")
        donation_repo.find_for_requester.assert_awaited_once_with(
            "donor@example.com", limit=RECENT_REQUESTS_LIMIT
        )
        assert RECENT_REQUESTS_LIMIT == 3

    @pytest.mark.asyncio
    async def test_list_all_sorts_by_donation_date(self, donation_repo):
        donation_repo.find.return_value = [stored_request()]
        service = DonationService(donation_repo)

        results = await service.list_all(status="pending", sort="desc", skip=5, limit=10)

        donation_repo.find.assert_awaited_once_with(
            {"donationStatus": "pending"}, sort=[("donationDate", -1)], skip=5, limit=10
        )
        assert results[0].id == DONATION_ID
        assert results[0].donation_status == "pending"

    @pytest.mark.asyncio
    async def test_list_all_unknown_sort_keeps_natural_order(self, donation_repo):
        service = DonationService(donation_repo)
        await service.list_all(sort="sideways")
        assert donation_repo.find.await_args.kwargs["sort"] is None

    @pytest.mark.asyncio
    async def test_delete_missing_is_not_found(self, donation_repo):
        donation_repo.delete_by_id.return_value = 0
        service = DonationService(donation_repo)
        with pytest.raises(NotFoundError):
            await service.delete(DONATION_ID)

    @pytest.mark.asyncio
    async def test_delete(self, donation_repo):
        service = DonationService(donation_repo)
        result = await service.delete(DONATION_ID)
        assert result.deleted_count == 1
