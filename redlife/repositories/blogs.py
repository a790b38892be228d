"""
RedLife Backend - Blog Repository
=================================
"""

from redlife.database import BLOGS_COLLECTION
from redlife.repositories.base import MongoRepository


class BlogRepository(MongoRepository):
    collection_name = BLOGS_COLLECTION
