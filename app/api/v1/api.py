from fastapi import APIRouter

from app.api.v1.routes import admin, auth, bookings, public

api_router = APIRouter(prefix="/api/v1")

for module in (auth, public, bookings, admin):
    api_router.include_router(module.router)
