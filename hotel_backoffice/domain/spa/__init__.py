"""Spa & Wellness domain: catalog, appointments and derived billing"""

from .router import router

__all__ = ["router"]
