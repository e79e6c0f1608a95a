from __future__ import annotations

from app.api.routes import auth, books, files, health, notes, statistics, users
from fastapi import APIRouter

api_router = APIRouter()

# Keep this list in the order you want routes registered.
for _mod in (health, auth, users, books, notes, files, statistics):
    api_router.include_router(_mod.router)
