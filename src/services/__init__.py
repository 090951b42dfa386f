"""
Service Layer - Business logic layer between routers and the core.

Services orchestrate operations involving the pipeline and session storage,
implement business rules, and provide a clean interface for routers.
"""

from .image_service import ImageService

__all__ = ["ImageService"]
