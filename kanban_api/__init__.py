"""
Kanban board backend.

``kanban_api.app`` holds the FastAPI application: a REST surface over a
hosted Supabase project for boards, lists, cards, labels, board
collaborators, friends, notifications and user profiles.
"""

__version__ = "1.0.0"
