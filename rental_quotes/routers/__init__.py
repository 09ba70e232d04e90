from fastapi import APIRouter
from .auth import router as auth_router
from .users import router as users_router
from .categories import router as categories_router
from .equipment import router as equipment_router
from .bundles import router as bundles_router
from .quotations import router as quotations_router

api_router = APIRouter()

api_router.include_router(auth_router)
api_router.include_router(users_router)
api_router.include_router(categories_router)
api_router.include_router(equipment_router)
api_router.include_router(bundles_router)
api_router.include_router(quotations_router)
