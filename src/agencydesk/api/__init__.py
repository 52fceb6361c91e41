"""
HTTP surface for the dashboard's backend functions.

Usage::

    uvicorn agencydesk.api.app:create_app --factory
"""

from agencydesk.api.app import create_app

__all__ = ["create_app"]
