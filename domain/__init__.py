"""
Domain layer - Business entities, models, schemas, and enums.
"""

from domain import enums, models

__all__ = ["enums", "models"]
