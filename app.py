"""
ASGI entry point - re-exports the application from wellnest.main.

    uvicorn app:app
"""
from wellnest.main import app

__all__ = ['app']
