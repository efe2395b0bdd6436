"""
Top‑level router for version 1 of the API.

This router aggregates the domain routers under their prefixes.  When a
new domain is introduced, include its router here.
"""

from fastapi import APIRouter

from .endpoints import (
    auth,
    boards,
    cards,
    friends,
    labels,
    lists,
    notifications,
    users,
)

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(boards.router, prefix="/boards", tags=["boards"])
router.include_router(lists.router, prefix="/lists", tags=["lists"])
router.include_router(cards.router, prefix="/cards", tags=["cards"])
router.include_router(labels.router, prefix="/labels", tags=["labels"])
router.include_router(friends.router, prefix="/friends", tags=["friends"])
router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
router.include_router(users.router, prefix="/users", tags=["users"])
