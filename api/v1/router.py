# api/v1/router.py
from fastapi import APIRouter

from . import onboarding, users

api_router = APIRouter()

api_router.include_router(onboarding.router, prefix="/onboarding", tags=["Onboarding"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
