"""Guest directory referenced by spa appointments and billing"""

from .router import router

__all__ = ["router"]
