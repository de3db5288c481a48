from fastapi import APIRouter

from medpal.api.v1.endpoints import auth
from medpal.api.v1.endpoints import notifications

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
