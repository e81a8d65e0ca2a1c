from fastapi import APIRouter

from app.api.v1.routes import admin, auth, health, public

api_router = APIRouter()
api_router.include_router(health.router, prefix="/v1", tags=["health"])
api_router.include_router(public.router, prefix="/v1", tags=["public"])
api_router.include_router(auth.router, prefix="/v1/auth", tags=["auth"])
api_router.include_router(admin.router, prefix="/v1/admin", tags=["admin"])
