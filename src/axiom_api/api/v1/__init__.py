"""API v1."""

from axiom_api.api.v1.router import router

__all__ = ["router"]
