"""API routers."""

from flag_identity.presentation.api.routers.users import router as users_router

__all__ = ["users_router"]
