# Repositories package init
"""
RedLife Backend - Repositories Layer
====================================

What:  Async data access, one class per MongoDB collection.
How:   Each repository subclasses MongoRepository (base.py) and adds the
       lookups specific to its collection. Repositories hold no state
       besides the collection handle and are built per request by
       dependencies.py from the shared database.

Repository Inventory:
    - UserRepository:      users       (keyed by email and _id)
    - DonationRepository:  Donation    (blood donation requests)
    - FundRepository:      Funds       (money donations)
    - BlogRepository:      Blogs
"""
