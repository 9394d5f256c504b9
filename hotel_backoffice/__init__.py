"""Hotel back office API: concierge requests, spa catalog, appointments and billing."""

__version__ = "1.0.0"
