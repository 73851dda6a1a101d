"""
HTTP layer: FastAPI application factory, dependencies and routers.
"""

from .app import create_app, register_exception_handlers

__all__ = ["create_app", "register_exception_handlers"]
