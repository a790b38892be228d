"""
RedLife Backend - User Repository
=================================
"""

from typing import Optional

from redlife.database import USERS_COLLECTION
from redlife.repositories.base import Document, MongoRepository, UpdateOutcome


class UserRepository(MongoRepository):
    collection_name = USERS_COLLECTION

    async def find_by_email(self, email: str) -> Optional[Document]:
        return await self.find_one({"email": email})

    async def update_by_email(self, email: str, fields: Document) -> UpdateOutcome:
        return await self.update_one({"email": email}, fields)
