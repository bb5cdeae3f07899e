from fastapi import APIRouter
from chatrelay.api import chat, health
from chatrelay.core.config import settings

api_router = APIRouter(prefix=settings.API_PREFIX)

api_router.include_router(health.router, tags=['health'])
api_router.include_router(chat.router)
