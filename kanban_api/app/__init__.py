"""
Application package initializer.

This package contains the main entrypoint for the API and all of its
submodules.  Each domain (boards, lists, cards, friends, etc.) has a
schema module, a service module and a router defined in
``api/v1/endpoints``.  Persistence, authentication and file storage are
delegated to the hosted Supabase platform through ``core.supabase``.
"""

from .main import app  # noqa: F401
