"""Async service layer for service ranking."""

from .service import ServiceSearchService

__all__ = ["ServiceSearchService"]
