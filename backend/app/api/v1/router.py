from fastapi import APIRouter

from app.api.v1 import import_routes, settings_routes

api_router = APIRouter()

api_router.include_router(settings_routes.router, prefix="/settings", tags=["settings"])
api_router.include_router(import_routes.router, prefix="/imports", tags=["imports"])
