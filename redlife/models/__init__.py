# Models package init
"""
RedLife Backend - Domain Models
===============================

What:  Enumerations and status lifecycles shared by schemas and services.
       Documents themselves live in MongoDB as plain dicts; see schemas/ for
       their wire shapes.
"""
