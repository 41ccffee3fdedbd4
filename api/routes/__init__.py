"""
API route modules.
"""

from api.routes.todos import router as todos_router

__all__ = ["todos_router"]
