from fastapi import APIRouter
from app.routers import (
    auth, users, branches, teams, goals, performance, kpis, notifications, settings
)

# Centralized API router hub
# Routers are aggregated here and main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(auth.router, tags=["Authentication"])
api_router.include_router(users.router, tags=["Users"])
api_router.include_router(branches.router, tags=["Branches"])
api_router.include_router(teams.router, tags=["Teams"])
api_router.include_router(goals.router, tags=["Goals"])
api_router.include_router(performance.router, tags=["Performance"])
api_router.include_router(kpis.router, tags=["KPIs"])
api_router.include_router(notifications.router, tags=["Notifications"])
api_router.include_router(settings.router, tags=["Settings"])
