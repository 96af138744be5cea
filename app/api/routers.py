from fastapi import APIRouter

from app.api.v1.accounts import router as accounts_router
from app.api.v1.pull_requests import router as pull_requests_router
from app.api.v1.repositories import router as repositories_router
from app.api.v1.reviews import router as reviews_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(accounts_router)
api_router.include_router(repositories_router)
api_router.include_router(pull_requests_router)
api_router.include_router(reviews_router)
