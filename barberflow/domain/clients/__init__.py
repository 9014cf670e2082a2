"""Clients domain - per-shop client book"""

from .router import router

__all__ = ["router"]
