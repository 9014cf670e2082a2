"""Auth domain - registration, login, profile and password reset"""

from .router import router

__all__ = ["router"]
