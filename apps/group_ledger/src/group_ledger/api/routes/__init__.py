"""API v1 router registration."""

from fastapi import APIRouter

from group_ledger.api.routes import groups, settlements

v1_router = APIRouter(prefix="/v1")
v1_router.include_router(groups.router)
v1_router.include_router(settlements.router)
