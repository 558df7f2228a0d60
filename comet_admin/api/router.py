from fastapi import APIRouter

from comet_admin.api import auth, users, licenses, subscriptions, stats, activity

api_router = APIRouter()

# Admin panel API routes
api_router.include_router(auth.router, prefix="/auth", tags=["Auth"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(licenses.router, prefix="/licenses", tags=["Licenses"])
api_router.include_router(subscriptions.router, prefix="/subscriptions", tags=["Subscriptions"])
api_router.include_router(stats.router, prefix="/stats", tags=["Stats"])
api_router.include_router(activity.router, prefix="/activity", tags=["Activity"])
