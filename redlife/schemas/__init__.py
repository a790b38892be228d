# Schemas package init
"""
RedLife Backend - Pydantic Schemas
==================================

What:  Request and response bodies, one module per resource plus common.py.
"""
