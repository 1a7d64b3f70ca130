"""Main API router"""

from fastapi import APIRouter

from .routes import admin, auth, properties, revalidate, users

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(properties.router, prefix="/properties", tags=["properties"])
api_router.include_router(revalidate.router, prefix="/revalidate", tags=["revalidate"])
