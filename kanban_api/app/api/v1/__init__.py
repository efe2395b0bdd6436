"""
Version 1 of the Kanban API.

The routes are mounted at the application root, which is where the
single‑page frontend expects them.
"""
