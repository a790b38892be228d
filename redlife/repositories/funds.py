"""
RedLife Backend - Fund Repository
=================================
"""

from typing import List

from pymongo import DESCENDING

from redlife.database import FUNDS_COLLECTION
from redlife.repositories.base import Document, MongoRepository


class FundRepository(MongoRepository):
    collection_name = FUNDS_COLLECTION

    async def find_latest(self, skip: int = 0, limit: int = 0) -> List[Document]:
        """Newest payments first."""
        return await self.find(sort=[("fundDate", DESCENDING)], skip=skip, limit=limit)

    async def total_amount(self) -> float:
        return await self.sum_field("fundAmount")
