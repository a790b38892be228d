"""
RedLife Backend - Donation Request Repository
=============================================
"""

from typing import List, Optional

from redlife.database import DONATIONS_COLLECTION
from redlife.repositories.base import Document, MongoRepository, SortSpec, build_filter


class DonationRepository(MongoRepository):
    collection_name = DONATIONS_COLLECTION

    async def find_for_requester(
        self,
        requester_email: str,
        status: Optional[str] = None,
        sort: Optional[SortSpec] = None,
        skip: int = 0,
        limit: int = 0,
    ) -> List[Document]:
        query = build_filter(requesterEmail=requester_email, donationStatus=status)
        return await self.find(query, sort=sort, skip=skip, limit=limit)

    async def count_for_requester(self, requester_email: str, status: Optional[str] = None) -> int:
        return await self.count(build_filter(requesterEmail=requester_email, donationStatus=status))
