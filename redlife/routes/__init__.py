# Routes package init
"""
RedLife Backend - API Routes Package
====================================

What:  HTTP route handlers that accept requests and return responses.
How:   One module per resource, each exposing an APIRouter.

Route Inventory:
    - health.py:     GET  /, /health
    - users.py:      /add-user, /user/{email}, /user/{id}/role|status,
                     /all-users, /all-users-count, /donors/search
    - donations.py:  /create-donate-request, /donation-request(s)...,
                     /my-all-donation-request/{email}, counts
    - funds.py:      /funds, /funds-count, /create-payment-intent
    - blogs.py:      /blogs..., /all-blogs, /blogs-published, /blog/{id}
    - admin.py:      /admin/funding/total, /admin/users/count,
                     /admin/blood-requests/count

Routes are THIN: they declare the access policy, parse the request into a
schema, call one service method and return its response model.
"""
