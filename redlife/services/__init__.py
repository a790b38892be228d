# Services package init
"""
RedLife Backend - Services Layer
================================

What:  Business logic layer sitting between routes (HTTP) and repositories (persistence).
How:   Services take repositories in their constructor, apply the domain rules
       and return response schemas. dependencies.py builds them per request.

Service Inventory:
    - UserService:               login-or-register, profile edits, admin role/status, donor search
    - DonationService:           donation requests and their status lifecycle
    - FundService:               fund ledger and funding total
    - BlogService:               blogs and the draft/published lifecycle
    - StripePaymentService:      PaymentIntent creation (Stripe)
    - FirebaseIdentityVerifier:  ID token → verified email (Firebase Admin)
"""
