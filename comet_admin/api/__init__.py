from comet_admin.api.router import api_router

__all__ = ["api_router"]
