"""Concierge domain: guest service requests"""

from .router import router

__all__ = ["router"]
