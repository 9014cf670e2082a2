"""Analytics domain - revenue and booking aggregates"""

from .router import router

__all__ = ["router"]
