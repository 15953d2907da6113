from .import_router import router as import_router
from .query_router import router as query_router

__all__ = ["import_router", "query_router"]
