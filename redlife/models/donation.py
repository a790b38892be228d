"""
RedLife Backend - Donation Request Domain Model
===============================================

What:  Status values and lifecycle of a blood donation request.

Lifecycle:
    pending ──▶ inprogress ──▶ done
       │             │
       └──▶ canceled ◀┘

    pending     created by an active requester, waiting for a donor
    inprogress  a donor has committed (donorEmail/donorName recorded)
    done        donation happened (terminal)
    canceled    withdrawn by the requester (terminal)
"""

from enum import Enum

from redlife.models.lifecycle import StatusLifecycle


class DonationStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "inprogress"
    DONE = "done"
    CANCELED = "canceled"


DONATION_LIFECYCLE = StatusLifecycle(
    resource="donation request",
    transitions={
        DonationStatus.PENDING.value: {
            DonationStatus.IN_PROGRESS.value,
            DonationStatus.CANCELED.value,
        },
        DonationStatus.IN_PROGRESS.value: {
            DonationStatus.DONE.value,
            DonationStatus.CANCELED.value,
        },
        DonationStatus.DONE.value: set(),
        DonationStatus.CANCELED.value: set(),
    },
    initial=DonationStatus.PENDING.value,
)
