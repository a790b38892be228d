"""
RedLife Backend - Donation Request Schemas
==========================================

What:  Request and response bodies for the donation request endpoints.

Field ownership:
    requester*      stamped from the verified caller at creation
    donationStatus  changes only through PUT /donation-request/{id}
    donor*          recorded only with the pending → inprogress transition
    everything else editable through PATCH /donation-requests/{id}
"""

from datetime import date, datetime
from typing import Optional

from pydantic import EmailStr, Field

from redlife.models.donation import DonationStatus
from redlife.schemas.common import APIModel, BloodGroup


class DonationRequestCreate(APIModel):
    """Body of POST /create-donate-request. Any client donationStatus is dropped."""

    requester_name: Optional[str] = Field(default=None, max_length=120)
    recipient_name: str = Field(min_length=1, max_length=120)
    recipient_district: Optional[str] = Field(default=None, max_length=80)
    recipient_upazila: Optional[str] = Field(default=None, max_length=80)
    hospital_name: str = Field(min_length=1, max_length=200)
    full_address: Optional[str] = Field(default=None, max_length=500)
    blood_group: BloodGroup
    donation_date: date
    donation_time: Optional[str] = Field(default=None, max_length=20)
    request_message: Optional[str] = Field(default=None, max_length=2000)


class DonationRequestEdit(APIModel):
    """Body of PATCH /donation-requests/{id}; privileged fields are not accepted."""

    recipient_name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    recipient_district: Optional[str] = Field(default=None, max_length=80)
    recipient_upazila: Optional[str] = Field(default=None, max_length=80)
    hospital_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    full_address: Optional[str] = Field(default=None, max_length=500)
    blood_group: Optional[BloodGroup] = None
    donation_date: Optional[date] = None
    donation_time: Optional[str] = Field(default=None, max_length=20)
    request_message: Optional[str] = Field(default=None, max_length=2000)


class DonationStatusUpdate(APIModel):
    """Body of PUT /donation-request/{id}."""

    donation_status: DonationStatus
    donor_email: Optional[EmailStr] = None
    donor_name: Optional[str] = Field(default=None, min_length=1, max_length=120)


class DonationRequestOut(APIModel):
    id: str = Field(alias="_id")
    requester_email: Optional[str] = None
    requester_name: Optional[str] = None
    recipient_name: Optional[str] = None
    recipient_district: Optional[str] = None
    recipient_upazila: Optional[str] = None
    hospital_name: Optional[str] = None
    full_address: Optional[str] = None
    blood_group: Optional[str] = None
    donation_date: Optional[str] = None
    donation_time: Optional[str] = None
    request_message: Optional[str] = None
    donation_status: DonationStatus = DonationStatus.PENDING
    donor_email: Optional[str] = None
    donor_name: Optional[str] = None
    created_at: Optional[datetime] = None
