"""Services domain - the catalogue of services a barber offers"""

from .router import router

__all__ = ["router"]
